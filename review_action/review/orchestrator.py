"""
Review Orchestrator（核心流程编排）。

流程严格单向：
fetch files -> filter -> (short-circuit | resolve contents -> assemble prompt -> invoke model) -> publish

保证：
- 每次 run 恰好产出一个 `ReviewResult`，并恰好发布一条评论（致命错误在发布前中止除外）
- 只有单文件内容拉取失败会被吸收，其余错误直接向上抛
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from review_action.config import ReviewPolicy
from review_action.github.adapter import build_changed_files
from review_action.github.client import GitHubClient
from review_action.llm.client import ReviewModel
from review_action.review.content import resolve_contents
from review_action.review.filtering import NO_RELEVANT_FILES_MESSAGE
from review_action.review.filtering import ShortCircuit
from review_action.review.filtering import decide_file_set
from review_action.review.models import ChangedFile
from review_action.review.models import ResultKind
from review_action.review.models import ReviewResult
from review_action.review.models import RunContext
from review_action.review.prompt import build_review_request
from review_action.review.publisher import publish_result

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewOrchestrator:
    """Orchestrator 运行时依赖集合。"""

    github_client: GitHubClient
    model: ReviewModel
    policy: ReviewPolicy


async def fetch_changed_files(github_client: GitHubClient, ctx: RunContext) -> list[ChangedFile]:
    files = await github_client.list_pull_request_files(owner=ctx.owner, repo=ctx.repo, pull_number=ctx.pull_number)
    logger.info(f"PR {ctx.owner}/{ctx.repo}#{ctx.pull_number} has {len(files)} changed file(s)")
    return build_changed_files(files)


async def generate_review(orchestrator: ReviewOrchestrator, ctx: RunContext) -> ReviewResult:
    """
    跑到模型输出为止（不发布），返回本次 run 的唯一结果。
    """
    changed = await fetch_changed_files(github_client=orchestrator.github_client, ctx=ctx)
    decision = decide_file_set(files=changed, max_files=orchestrator.policy.max_files)
    if isinstance(decision, ShortCircuit):
        logger.info(decision.message)
        return ReviewResult(kind=decision.kind, text=decision.message)

    logger.info(f"Reviewing the following files: {', '.join(f.path for f in decision.files)}")

    async def fetch_content(path: str) -> str:
        return await orchestrator.github_client.get_file_content(
            owner=ctx.owner, repo=ctx.repo, path=path, ref=ctx.head_sha
        )

    resolved = await resolve_contents(
        fetch_content=fetch_content,
        files=decision.files,
        min_resolved_ratio=orchestrator.policy.min_resolved_ratio,
    )
    if not resolved:
        # 所有文件内容都拿不到：没有东西可审，不调用模型
        logger.info(NO_RELEVANT_FILES_MESSAGE)
        return ReviewResult(kind=ResultKind.NO_RELEVANT_FILES, text=NO_RELEVANT_FILES_MESSAGE)

    request = build_review_request(files=resolved)
    review = await orchestrator.model.review(request)
    logger.info(f"Code review response from {orchestrator.model.name}: {len(review)} chars")
    logger.debug(f"Code review response: {review}")
    return ReviewResult(kind=ResultKind.REVIEW, text=review)


async def run_review(orchestrator: ReviewOrchestrator, ctx: RunContext) -> ReviewResult:
    """跑一次完整 review 并把结果写回 PR。"""
    result = await generate_review(orchestrator=orchestrator, ctx=ctx)
    await publish_result(
        github_client=orchestrator.github_client,
        ctx=ctx,
        result=result,
        header=orchestrator.policy.comment_header,
        footer=orchestrator.policy.comment_footer,
    )
    return result
