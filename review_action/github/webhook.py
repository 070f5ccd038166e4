"""
GitHub Webhook 接入层（服务模式下的另一种触发方式）。

职责：
- 校验 `X-Hub-Signature-256`（HMAC SHA256）
- 校验 event 类型（只处理 pull_request，其余返回 ignored）
- 解析 payload -> Pydantic schema -> `RunContext`
- 过滤 action（opened/reopened/synchronize）
- 调用业务 handler
"""

from __future__ import annotations

import hashlib
import hmac
import json
from collections.abc import Awaitable, Callable

from fastapi import APIRouter
from fastapi import Header
from fastapi import HTTPException
from fastapi import Request
from pydantic import ValidationError

from review_action.github.event import PULL_REQUEST_EVENT
from review_action.github.event import build_run_context
from review_action.github.schemas import GitHubPullRequestEvent
from review_action.review.models import RunContext

RunHandler = Callable[[RunContext], Awaitable[None]]

TRIGGER_ACTIONS = ("opened", "reopened", "synchronize")


def sign_payload(body: bytes, secret: str) -> str:
    return "sha256=" + hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def _verify_github_signature(body: bytes, signature_header: str, secret: str) -> None:
    if not signature_header.startswith("sha256="):
        raise HTTPException(status_code=401, detail="Invalid signature header")
    if not hmac.compare_digest(sign_payload(body=body, secret=secret), signature_header):
        raise HTTPException(status_code=401, detail="Invalid webhook signature")


def build_github_webhook_router(webhook_secret: str, handler: RunHandler) -> APIRouter:
    router = APIRouter()

    @router.post("/github/webhook")
    async def github_webhook(
        request: Request,
        x_github_event: str = Header(alias="X-GitHub-Event"),
        x_hub_signature_256: str = Header(alias="X-Hub-Signature-256"),
    ) -> dict[str, str]:
        body = await request.body()
        _verify_github_signature(body=body, signature_header=x_hub_signature_256, secret=webhook_secret)
        if x_github_event != PULL_REQUEST_EVENT:
            return {"status": "ignored"}

        try:
            payload = json.loads(body.decode("utf-8"))
        except json.JSONDecodeError as exc:
            raise HTTPException(status_code=400, detail="Invalid JSON payload") from exc
        try:
            event = GitHubPullRequestEvent.model_validate(payload)
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail="Invalid pull_request payload") from exc
        if event.action not in TRIGGER_ACTIONS or event.repository is None:
            return {"status": "ignored"}

        await handler(build_run_context(event=event, repository=None))
        return {"status": "ok"}

    return router
