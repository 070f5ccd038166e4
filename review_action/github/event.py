"""
触发事件解析（GitHub Actions 运行环境）。

职责：
- 读取 `GITHUB_EVENT_NAME`：只处理 `pull_request`，其他事件返回 None（视为成功 no-op）
- 解析 `GITHUB_EVENT_PATH` 指向的 JSON -> Pydantic schema -> `RunContext`

`RunContext` 只在这里构造一次，之后按参数传给 pipeline 的每个阶段。
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping

from pydantic import ValidationError

from review_action.errors import HostFetchError
from review_action.github.schemas import GitHubPullRequestEvent
from review_action.review.models import RunContext

logger = logging.getLogger(__name__)

PULL_REQUEST_EVENT = "pull_request"


def build_run_context(event: GitHubPullRequestEvent, repository: str | None) -> RunContext:
    """
    从 PR 事件构造 run context。

    owner/repo 优先取事件里的 repository，缺失时回退到 `owner/repo` 形式的 `GITHUB_REPOSITORY`。
    """
    if event.repository is not None:
        owner = event.repository.owner.login
        repo = event.repository.name
    elif repository and "/" in repository:
        owner, repo = repository.split("/", 1)
    else:
        raise HostFetchError("Cannot determine repository owner/name from event")
    return RunContext(
        owner=owner,
        repo=repo,
        pull_number=event.pull_request.number,
        head_sha=event.pull_request.head.sha,
    )


def load_run_context(environ: Mapping[str, str]) -> RunContext | None:
    event_name = environ.get("GITHUB_EVENT_NAME", "")
    if event_name != PULL_REQUEST_EVENT:
        logger.info(f"Ignoring event `{event_name}`: this action only works on pull requests.")
        return None

    event_path = environ.get("GITHUB_EVENT_PATH")
    if not event_path:
        raise HostFetchError("GITHUB_EVENT_PATH is not set")
    try:
        with open(event_path, encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise HostFetchError(f"Cannot read event payload {event_path}: {exc}") from exc

    try:
        event = GitHubPullRequestEvent.model_validate(payload)
    except ValidationError as exc:
        raise HostFetchError(f"Invalid pull_request event payload: {exc}") from exc
    return build_run_context(event=event, repository=environ.get("GITHUB_REPOSITORY"))
