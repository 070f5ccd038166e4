"""
Publisher：把最终文本作为一条 PR conversation 评论发布。

- 文本原样发布；header/footer 只在配置了时才包裹
- 失败直接抛 `PublishError`（由 GitHub client 负责转换），不重试
"""

from __future__ import annotations

import logging

from review_action.github.client import GitHubClient
from review_action.github.schemas import GitHubIssueComment
from review_action.review.models import ReviewResult
from review_action.review.models import RunContext

logger = logging.getLogger(__name__)


def format_comment_body(text: str, header: str | None = None, footer: str | None = None) -> str:
    parts = [p for p in (header, text, footer) if p]
    return "\n\n".join(parts)


async def publish_result(
    github_client: GitHubClient,
    ctx: RunContext,
    result: ReviewResult,
    header: str | None = None,
    footer: str | None = None,
) -> GitHubIssueComment:
    body = format_comment_body(text=result.text, header=header, footer=footer)
    comment = await github_client.create_issue_comment(
        owner=ctx.owner,
        repo=ctx.repo,
        issue_number=ctx.pull_number,
        body=body,
    )
    logger.info(f"Posted {result.kind.value} comment on {ctx.owner}/{ctx.repo}#{ctx.pull_number}")
    return comment
