"""
File-Set Filter（非 AI，确定性）。

策略：
- 排除二进制/媒体扩展名（大小写不敏感，与 status 无关）
- 排除 status == "removed"（head 上没有内容可审）
- 过滤后为空 / 超过上限 -> short-circuit，不调用模型
"""

from __future__ import annotations

from dataclasses import dataclass

from review_action.review.models import ChangedFile
from review_action.review.models import ResultKind

EXCLUDED_EXTENSIONS: frozenset[str] = frozenset(
    {
        "png",
        "jpg",
        "jpeg",
        "gif",
        "svg",
        "ico",
        "woff",
        "woff2",
        "ttf",
        "eot",
        "mp3",
        "mp4",
        "mov",
        "zip",
        "tar",
        "gz",
    }
)

NO_RELEVANT_FILES_MESSAGE = "No relevant files to review."


def too_many_files_message(count: int, max_files: int) -> str:
    return f"There are too many changed files to meaningfully review them ({count} > {max_files})"


@dataclass(frozen=True)
class Proceed:
    files: list[ChangedFile]


@dataclass(frozen=True)
class ShortCircuit:
    kind: ResultKind
    message: str
    count: int = 0


FilterDecision = Proceed | ShortCircuit


def is_excluded_path(path: str) -> bool:
    """按扩展名判断是否二进制/媒体文件。"""
    _, dot, ext = path.rpartition(".")
    if not dot:
        return False
    return ext.lower() in EXCLUDED_EXTENSIONS


def filter_relevant_files(files: list[ChangedFile]) -> list[ChangedFile]:
    """保序过滤：只保留可审查的文件。"""
    return [f for f in files if not is_excluded_path(f.path) and f.status != "removed"]


def decide_file_set(files: list[ChangedFile], max_files: int) -> FilterDecision:
    """
    过滤并决定本次 run 的走向。

    - 0 个文件：ShortCircuit(NO_RELEVANT_FILES)
    - 超过 max_files：ShortCircuit(TOO_MANY_FILES)（边界 == max_files 仍然 Proceed）
    """
    if max_files <= 0:
        raise ValueError("max_files must be > 0")
    relevant = filter_relevant_files(files)
    if not relevant:
        return ShortCircuit(kind=ResultKind.NO_RELEVANT_FILES, message=NO_RELEVANT_FILES_MESSAGE)
    if len(relevant) > max_files:
        return ShortCircuit(
            kind=ResultKind.TOO_MANY_FILES,
            message=too_many_files_message(count=len(relevant), max_files=max_files),
            count=len(relevant),
        )
    return Proceed(files=relevant)
