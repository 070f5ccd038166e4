"""
Content Resolver：并发拉取每个文件在 head revision 下的完整内容。

关键点：
- 所有拉取在一个 anyio task group 里并发执行，等待全部结束（join-all，不是 fail-fast）
- 每个任务写自己的结果槽位（按输入下标），没有共享的可变聚合状态
- 单个文件失败只记 warning 并丢弃；输出保持 listing 顺序
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import anyio

from review_action.errors import ContentFetchError
from review_action.errors import ContentLossError
from review_action.review.models import ChangedFile
from review_action.review.models import ReviewableFile

logger = logging.getLogger(__name__)

ContentFetcher = Callable[[str], Awaitable[str]]


@dataclass(frozen=True)
class Resolved:
    file: ReviewableFile


@dataclass(frozen=True)
class Failed:
    path: str
    reason: str


FetchOutcome = Resolved | Failed


async def _fetch_one(fetch_content: ContentFetcher, file: ChangedFile) -> FetchOutcome:
    try:
        content = await fetch_content(file.path)
    except ContentFetchError as exc:
        return Failed(path=file.path, reason=exc.reason)
    return Resolved(file=ReviewableFile(path=file.path, status=file.status, patch=file.patch, content=content))


async def fetch_all_contents(fetch_content: ContentFetcher, files: list[ChangedFile]) -> list[FetchOutcome]:
    """并发拉取，返回与 `files` 一一对应（同序）的 tagged 结果。"""
    slots: list[FetchOutcome | None] = [None] * len(files)

    async def run(index: int, file: ChangedFile) -> None:
        slots[index] = await _fetch_one(fetch_content=fetch_content, file=file)

    async with anyio.create_task_group() as tg:
        for index, file in enumerate(files):
            tg.start_soon(run, index, file)

    outcomes: list[FetchOutcome] = []
    for outcome in slots:
        if outcome is None:
            raise RuntimeError("content fetch task finished without a result")
        outcomes.append(outcome)
    return outcomes


def collect_resolved(outcomes: list[FetchOutcome]) -> list[ReviewableFile]:
    """保留成功项（原顺序），失败项只记 warning。"""
    resolved: list[ReviewableFile] = []
    for outcome in outcomes:
        if isinstance(outcome, Failed):
            logger.warning(f"Failed to get content for {outcome.path}: {outcome.reason}")
            continue
        resolved.append(outcome.file)
    return resolved


def check_content_loss(resolved: int, requested: int, min_resolved_ratio: float) -> None:
    """
    内容丢失策略：`min_resolved_ratio` 为 0 时永不失败。

    例如 0.5 表示超过一半文件拉取失败时整次 run 失败。
    """
    if min_resolved_ratio <= 0 or requested == 0:
        return
    ratio = resolved / requested
    if ratio < min_resolved_ratio:
        raise ContentLossError(
            f"Only {resolved}/{requested} file contents could be fetched "
            f"(required ratio {min_resolved_ratio:.2f})"
        )


async def resolve_contents(
    fetch_content: ContentFetcher,
    files: list[ChangedFile],
    min_resolved_ratio: float = 0.0,
) -> list[ReviewableFile]:
    outcomes = await fetch_all_contents(fetch_content=fetch_content, files=files)
    resolved = collect_resolved(outcomes)
    check_content_loss(resolved=len(resolved), requested=len(files), min_resolved_ratio=min_resolved_ratio)
    return resolved
