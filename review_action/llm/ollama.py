"""
Ollama 后端（本地推理服务，直接走 HTTP）。

两种消费方式：
- `OllamaGenerateModel`：POST /api/generate，stream=false，一次拿到完整 `response`
- `OllamaChatStreamModel`：POST /api/chat，stream=true，NDJSON 逐行返回
  `{"message": {"content": "..."}, "done": false}`，直到 `done: true`
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator

import httpx

from review_action.errors import BackendError
from review_action.llm.client import concat_fragments
from review_action.review.models import ReviewRequest
from review_action.review.prompt import render_chat_messages
from review_action.review.prompt import render_flat_prompt

logger = logging.getLogger(__name__)


def _endpoint(url: str, path: str) -> str:
    """
    `url` 可以是 Ollama 根地址，也可以已经是完整接口地址（兼容旧配置）。
    """
    normalized = url.rstrip("/")
    if normalized.endswith("/api/generate") or normalized.endswith("/api/chat"):
        return normalized
    return f"{normalized}{path}"


class OllamaGenerateModel:
    """text-completion 形状：`{model, prompt, options:{num_ctx}, stream:false}` -> `{response}`。"""

    def __init__(self, url: str, model: str, http_client: httpx.AsyncClient, context_window: int) -> None:
        self._url = _endpoint(url=url, path="/api/generate")
        self._model = model
        self._http_client = http_client
        self._context_window = context_window

    @property
    def name(self) -> str:
        return f"ollama-generate:{self._model}"

    def build_payload(self, request: ReviewRequest) -> dict[str, object]:
        return {
            "model": self._model,
            "prompt": render_flat_prompt(request),
            "options": {"num_ctx": self._context_window},
            "stream": False,
        }

    async def review(self, request: ReviewRequest) -> str:
        logger.info(f"Code review request sent to {self._url}")
        try:
            response = await self._http_client.post(self._url, json=self.build_payload(request))
        except httpx.HTTPError as exc:
            raise BackendError(f"Request to AI server failed: {exc}") from exc
        if response.status_code >= 400:
            raise BackendError(f"Request to AI server failed: {response.status_code} {response.reason_phrase}")
        try:
            data = response.json()
        except ValueError as exc:
            raise BackendError(f"AI server returned invalid JSON: {response.text[:200]}") from exc
        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise BackendError(f"AI server response has no `response` text: {data}")
        return text


def parse_chat_stream_line(line: str) -> tuple[str, bool]:
    """
    解析一行 NDJSON，返回 (fragment, done)。

    - `error` 字段 / 非 JSON / 缺少 message.content 都是畸形输入
    """
    try:
        chunk = json.loads(line)
    except json.JSONDecodeError as exc:
        raise BackendError(f"Malformed stream chunk: {line[:200]}") from exc
    if not isinstance(chunk, dict):
        raise BackendError(f"Malformed stream chunk: {line[:200]}")
    if "error" in chunk:
        raise BackendError(f"AI server stream error: {chunk['error']}")
    done = bool(chunk.get("done", False))
    message = chunk.get("message")
    if message is None and done:
        return "", True
    if not isinstance(message, dict) or not isinstance(message.get("content"), str):
        raise BackendError(f"Stream chunk has no message content: {line[:200]}")
    return message["content"], done


class OllamaChatStreamModel:
    """chat-completion 流式形状：`{model, messages, stream:true}` -> NDJSON 片段序列。"""

    def __init__(self, url: str, model: str, http_client: httpx.AsyncClient, context_window: int) -> None:
        self._url = _endpoint(url=url, path="/api/chat")
        self._model = model
        self._http_client = http_client
        self._context_window = context_window

    @property
    def name(self) -> str:
        return f"ollama-chat:{self._model}"

    def build_payload(self, request: ReviewRequest) -> dict[str, object]:
        return {
            "model": self._model,
            "messages": [m.model_dump() for m in render_chat_messages(request)],
            "options": {"num_ctx": self._context_window},
            "stream": True,
        }

    async def stream_fragments(self, request: ReviewRequest) -> AsyncIterator[str]:
        """
        产出有序、有限、不可重启的片段序列。

        终止条件是后端的 `done: true`；在此之前连接关闭视为失败（不能把半截 review 当成结果）。
        """
        logger.info(f"Code review request sent to {self._url} (streaming)")
        try:
            async with self._http_client.stream("POST", self._url, json=self.build_payload(request)) as response:
                if response.status_code >= 400:
                    await response.aread()
                    raise BackendError(
                        f"Request to AI server failed: {response.status_code} {response.reason_phrase}"
                    )
                async for line in response.aiter_lines():
                    if not line.strip():
                        continue
                    fragment, done = parse_chat_stream_line(line)
                    if fragment:
                        yield fragment
                    if done:
                        return
        except httpx.HTTPError as exc:
            raise BackendError(f"Request to AI server failed: {exc}") from exc
        raise BackendError("AI server stream ended before completion")

    async def review(self, request: ReviewRequest) -> str:
        return await concat_fragments(self.stream_fragments(request))
