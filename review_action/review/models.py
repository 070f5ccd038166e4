"""
Review 领域模型（Pydantic）。

用途：
- 明确各阶段输入/输出的数据结构（全部是单次 run 内的瞬态值）
- 与 GitHub schema 解耦：pipeline 只认这里的类型
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RunContext(BaseModel):
    """一次 run 的 PR 身份（在入口构造一次，按参数传给每个阶段）。"""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    pull_number: int
    head_sha: str


class ChangedFile(BaseModel):
    """PR 的单个变更文件（来自 list files，读取后不可变）。"""

    model_config = ConfigDict(frozen=True)

    path: str
    status: str
    patch: str | None = None


class ReviewableFile(ChangedFile):
    """ChangedFile + head revision 下的完整内容。"""

    content: str


class ReviewRequest(BaseModel):
    """交给模型后端的单元：有序文件集合 + 固定的审查说明。"""

    preamble: str
    files: list[ReviewableFile] = Field(default_factory=list)


class ResultKind(str, Enum):
    REVIEW = "review"
    NO_RELEVANT_FILES = "no_relevant_files"
    TOO_MANY_FILES = "too_many_files"


class ReviewResult(BaseModel):
    """每次 run 恰好一个：模型输出，或 short-circuit 的固定提示。"""

    kind: ResultKind
    text: str

    @property
    def is_short_circuit(self) -> bool:
        return self.kind is not ResultKind.REVIEW
