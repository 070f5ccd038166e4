"""
GitHub Action 入口。

这里做四件事：
- 加载配置（严格校验 action 输入；缺失直接失败，不发任何网络请求）
- 解析触发事件（非 pull_request 直接成功退出）
- 组装外部依赖（HTTP Client / GitHub Client / 模型后端）
- 跑 pipeline，并把结果映射为进程退出码（0 成功，1 失败）

注意：
- 业务流程不写在这里（由 `review/orchestrator.py` 负责）
- `httpx.AsyncClient` 在一次 run 内复用
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

import anyio
import httpx

from review_action.config import ActionConfig
from review_action.config import load_config_from_env
from review_action.errors import ReviewActionError
from review_action.github.client import GitHubClient
from review_action.github.event import load_run_context
from review_action.infra.actions_log import setup_logging
from review_action.llm.factory import build_review_model
from review_action.review.models import ReviewResult
from review_action.review.models import RunContext
from review_action.review.orchestrator import ReviewOrchestrator
from review_action.review.orchestrator import run_review

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = httpx.Timeout(connect=30.0, read=600.0, write=30.0, pool=30.0)


async def execute(config: ActionConfig, ctx: RunContext, http_client: httpx.AsyncClient) -> ReviewResult:
    """用给定的 http client 组装依赖并跑一次 review（便于测试注入 transport）。"""
    orchestrator = ReviewOrchestrator(
        github_client=GitHubClient(
            api_base_url=str(config.github.api_base_url),
            token=config.github.token,
            http_client=http_client,
        ),
        model=build_review_model(config=config.backend, http_client=http_client),
        policy=config.policy,
    )
    return await run_review(orchestrator=orchestrator, ctx=ctx)


async def _run(config: ActionConfig, ctx: RunContext) -> ReviewResult:
    # 模型推理可能很慢：read timeout 放宽，其余保持较短
    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as http_client:
        return await execute(config=config, ctx=ctx, http_client=http_client)


def run_action(environ: Mapping[str, str]) -> int:
    """跑一次 action，返回进程退出码。"""
    setup_logging()
    try:
        config = load_config_from_env(environ)
        setup_logging(level=config.log_level, secrets=config.secrets())
        ctx = load_run_context(environ)
        if ctx is None:
            return 0
        result = anyio.run(_run, config, ctx)
    except ReviewActionError as exc:
        logger.error(f"Action failed: {exc}")
        return 1
    except Exception as exc:
        logger.error(f"Action failed: {exc}", exc_info=True)
        return 1

    if result.is_short_circuit:
        logger.info("Posted status comment; no review was generated.")
    else:
        logger.info("Code review completed and posted as a comment.")
    return 0


def main() -> None:
    sys.exit(run_action(os.environ))


if __name__ == "__main__":
    main()
