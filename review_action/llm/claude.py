"""
Anthropic Messages API 后端（基于官方 anthropic SDK）。

形状：`{model, max_tokens, system, messages:[{role:"user", content}]}` -> `{content:[{text}]}`
- system：审查 persona / 关注点
- 单条 user：全部文件段落（与 flat prompt 的文件部分相同）
"""

from __future__ import annotations

import logging

import httpx
from anthropic import APIError, AsyncAnthropic

from review_action.errors import BackendError
from review_action.review.models import ReviewRequest
from review_action.review.prompt import render_files_block

logger = logging.getLogger(__name__)


class AnthropicModel:
    def __init__(
        self,
        api_key: str,
        model: str,
        http_client: httpx.AsyncClient,
        max_tokens: int,
        base_url: str | None = None,
        api_version: str | None = None,
    ) -> None:
        """
        - api_key: Anthropic API key
        - base_url: 可选（代理 / 本地 mock），默认官方地址
        - api_version: 可选，覆盖 `anthropic-version` 请求头
        - max_retries=0：失败直接抛，不做重试
        """
        headers = {"anthropic-version": api_version} if api_version else None
        self._model = model
        self._max_tokens = max_tokens
        self._client = AsyncAnthropic(
            api_key=api_key,
            base_url=base_url,
            http_client=http_client,
            max_retries=0,
            default_headers=headers,
        )

    @property
    def name(self) -> str:
        return f"anthropic:{self._model}"

    async def review(self, request: ReviewRequest) -> str:
        try:
            logger.info(f"LLM request: model={self._model}, files={len(request.files)}")
            message = await self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                system=request.preamble,
                messages=[{"role": "user", "content": render_files_block(request)}],
            )
        except APIError as exc:
            logger.error(f"LLM API error: {exc}")
            raise BackendError(f"Anthropic API error: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.error(f"LLM HTTP error: {exc}")
            raise BackendError(f"Anthropic HTTP error: {exc}") from exc

        texts = [block.text for block in message.content if block.type == "text"]
        if not texts:
            raise BackendError("Anthropic response contains no text content")
        logger.info(f"LLM response: {sum(len(t) for t in texts)} chars")
        return "".join(texts)
