"""
本地 Mock 模型后端（同时模拟 Ollama / Anthropic / OpenAI-compatible 的请求形状）。

用途：
- 在没有真实模型服务的情况下，本地跑通 review 闭环
- 端到端测试里通过 `httpx.ASGITransport` 直接挂载，并统计调用次数

回复内容：从 prompt 中提取 `Filename: ...` 行，生成一段引用这些文件的 review。

启动：
  python -m review_action.dev.mock_llm_server
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from dataclasses import dataclass, field

import uvicorn
from fastapi import FastAPI
from fastapi import HTTPException
from fastapi import Request
from fastapi.responses import StreamingResponse


@dataclass
class MockLLMState:
    fail_status: int | None = None
    fragment_size: int = 8
    calls: list[str] = field(default_factory=list)


def _extract_filenames(prompt: str) -> list[str]:
    names: list[str] = []
    for line in prompt.splitlines():
        stripped = line.strip()
        if stripped.startswith("Filename: "):
            names.append(stripped.removeprefix("Filename: ").strip())
    return names


def build_mock_review(prompt: str) -> str:
    names = _extract_filenames(prompt)
    lines = ["## [MOCK] Code review", ""]
    for name in names:
        lines.append(f"- `{name}`: consider adding tests for the changed logic.")
    return "\n".join(lines)


def _messages_text(messages: object) -> str:
    if not isinstance(messages, list):
        return ""
    texts: list[str] = []
    for m in messages:
        if isinstance(m, dict) and isinstance(m.get("content"), str):
            texts.append(m["content"])
    return "\n".join(texts)


def build_mock_llm_app(state: MockLLMState) -> FastAPI:
    app = FastAPI(title="Mock LLM backends", version="0.1.0")

    def record(kind: str) -> None:
        state.calls.append(kind)
        if state.fail_status is not None:
            raise HTTPException(status_code=state.fail_status, detail="mock backend failure")

    @app.post("/api/generate")
    async def ollama_generate(request: Request) -> dict[str, object]:
        record("ollama-generate")
        payload = await request.json()
        return {"model": payload.get("model"), "response": build_mock_review(payload.get("prompt", "")), "done": True}

    @app.post("/api/chat")
    async def ollama_chat(request: Request) -> StreamingResponse:
        record("ollama-chat")
        payload = await request.json()
        text = build_mock_review(_messages_text(payload.get("messages")))
        size = max(1, state.fragment_size)

        async def ndjson() -> AsyncIterator[str]:
            for i in range(0, len(text), size):
                yield json.dumps({"message": {"role": "assistant", "content": text[i : i + size]}, "done": False}) + "\n"
            yield json.dumps({"message": {"role": "assistant", "content": ""}, "done": True}) + "\n"

        return StreamingResponse(ndjson(), media_type="application/x-ndjson")

    @app.post("/v1/messages")
    async def anthropic_messages(request: Request) -> dict[str, object]:
        record("anthropic")
        payload = await request.json()
        text = build_mock_review(_messages_text(payload.get("messages")))
        return {
            "id": "msg_mock",
            "type": "message",
            "role": "assistant",
            "model": payload.get("model"),
            "content": [{"type": "text", "text": text}],
            "stop_reason": "end_turn",
            "stop_sequence": None,
            "usage": {"input_tokens": 0, "output_tokens": 0},
        }

    @app.post("/v1/chat/completions")
    async def openai_chat_completions(request: Request) -> dict[str, object]:
        record("openai")
        payload = await request.json()
        text = build_mock_review(_messages_text(payload.get("messages")))
        return {
            "id": "chatcmpl-mock",
            "object": "chat.completion",
            "created": 0,
            "model": payload.get("model"),
            "choices": [{"index": 0, "message": {"role": "assistant", "content": text}, "finish_reason": "stop"}],
        }

    return app


app = build_mock_llm_app(MockLLMState())


def main() -> None:
    uvicorn.run(app, host="127.0.0.1", port=9001)


if __name__ == "__main__":
    main()
