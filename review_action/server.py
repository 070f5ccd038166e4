"""
FastAPI 服务入口（webhook 模式）。

与 action 模式共用同一份配置与 pipeline：
- 配置从环境变量读取（`INPUT_*` + `GITHUB_API_URL`），另外必须设置 `GITHUB_WEBHOOK_SECRET`
- 每个 webhook 请求对应一次 run（一次 review、一条评论）

启动：
  uvicorn review_action.server:create_app --factory
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from review_action.config import load_config_from_env
from review_action.errors import ConfigError
from review_action.github.webhook import build_github_webhook_router
from review_action.infra.actions_log import setup_logging
from review_action.main import HTTP_TIMEOUT
from review_action.main import execute
from review_action.review.models import RunContext

logger = logging.getLogger(__name__)


def build_app(environ: Mapping[str, str], http_client: httpx.AsyncClient | None = None) -> FastAPI:
    """创建并返回 FastAPI app（便于测试/复用）。"""

    # 1) 配置：缺失会直接抛错，启动失败（这是期望行为）
    config = load_config_from_env(environ)
    if not config.github.webhook_secret:
        raise ConfigError("Missing required env var: GITHUB_WEBHOOK_SECRET")
    setup_logging(level=config.log_level, secrets=config.secrets())

    # 2) 可复用的 HTTP client：供 GitHub API 与模型后端调用使用
    client = http_client or httpx.AsyncClient(timeout=HTTP_TIMEOUT)

    async def handle(ctx: RunContext) -> None:
        logger.info(f"Webhook run for {ctx.owner}/{ctx.repo}#{ctx.pull_number} at {ctx.head_sha}")
        await execute(config=config, ctx=ctx, http_client=client)

    # app 生命周期内复用同一个 client，关闭时释放连接池
    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await client.aclose()

    app = FastAPI(title="PR Review Action", version="0.1.0", lifespan=lifespan)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """健康检查：用于 k8s / LB 探活。"""
        return {"status": "ok"}

    app.include_router(build_github_webhook_router(webhook_secret=config.github.webhook_secret, handler=handle))
    return app


def create_app() -> FastAPI:
    """uvicorn factory：`uvicorn review_action.server:create_app --factory`。"""
    return build_app(os.environ)
