"""
OpenAI-compatible 后端（基于 OpenAI SDK，可对接 LiteLLM Proxy / vLLM 等网关）。

chat 序列形状：system preamble + 每个文件一条 user + 最后的开放式提问。
"""

from __future__ import annotations

import logging

import httpx
from openai import AsyncOpenAI, OpenAIError

from review_action.errors import BackendError
from review_action.review.models import ReviewRequest
from review_action.review.prompt import render_chat_messages

logger = logging.getLogger(__name__)


def _normalize_base_url(base_url: str) -> str:
    normalized = base_url.rstrip("/")
    if normalized.endswith("/v1"):
        return normalized
    return f"{normalized}/v1"


class OpenAICompatModel:
    def __init__(self, api_key: str, base_url: str | None, http_client: httpx.AsyncClient, model: str) -> None:
        """
        - api_key: API key（本地网关可以是任意非空字符串）
        - base_url: OpenAI-compatible base URL；None 表示官方地址
        - http_client: 复用 httpx.AsyncClient 连接池
        """
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=_normalize_base_url(base_url) if base_url else None,
            http_client=http_client,
            max_retries=0,
        )

    @property
    def name(self) -> str:
        return f"openai:{self._model}"

    async def review(self, request: ReviewRequest) -> str:
        messages = render_chat_messages(request)
        try:
            logger.info(f"LLM request: model={self._model}, messages={len(messages)} msg(s)")
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[m.model_dump() for m in messages],
            )
        except OpenAIError as exc:
            logger.error(f"LLM API error: {exc}")
            raise BackendError(f"OpenAI-compatible API error: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.error(f"LLM HTTP error: {exc}")
            raise BackendError(f"OpenAI-compatible HTTP error: {exc}") from exc

        if not response.choices:
            raise BackendError("LLM returned no choices")
        content = response.choices[0].message.content
        if content is None:
            logger.error("LLM returned None content")
            raise BackendError("LLM returned None content")

        logger.info(f"LLM response: {len(content)} chars")
        return content
