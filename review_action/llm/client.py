"""
Review-Model Invoker 的统一接口。

目标：
- **pipeline 只依赖接口**：`ReviewModel.review(request) -> str`
- **具体后端按配置选择**：ollama（同步 / 流式）、anthropic、openai-compatible
- **失败即失败**：非成功状态/畸形响应/连接错误统一抛 `BackendError`，不重试、不 fallback
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol

from pydantic import BaseModel

from review_action.review.models import ReviewRequest


class ChatMessage(BaseModel):
    """chat message 的最小结构（ollama / openai 通用）。"""

    role: str
    content: str


class ReviewModel(Protocol):
    """模型后端协议（依赖倒置，方便替换/测试）。"""

    @property
    def name(self) -> str: ...

    async def review(self, request: ReviewRequest) -> str: ...


async def concat_fragments(fragments: AsyncIterator[str]) -> str:
    """
    按到达顺序拼接流式片段。

    只做有序拼接：不插入分隔符、不重排、不去重。
    """
    parts: list[str] = []
    async for fragment in fragments:
        parts.append(fragment)
    return "".join(parts)
