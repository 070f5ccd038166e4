"""按配置选择模型后端实现（pipeline 只拿到 `ReviewModel`）。"""

from __future__ import annotations

import httpx

from review_action.config import BackendConfig
from review_action.errors import ConfigError
from review_action.llm.claude import AnthropicModel
from review_action.llm.client import ReviewModel
from review_action.llm.ollama import OllamaChatStreamModel
from review_action.llm.ollama import OllamaGenerateModel
from review_action.llm.openai_compat import OpenAICompatModel


def build_review_model(config: BackendConfig, http_client: httpx.AsyncClient) -> ReviewModel:
    url = str(config.url) if config.url is not None else None
    if config.kind == "ollama-generate" and url is not None:
        return OllamaGenerateModel(
            url=url, model=config.model, http_client=http_client, context_window=config.context_window
        )
    if config.kind == "ollama-chat" and url is not None:
        return OllamaChatStreamModel(
            url=url, model=config.model, http_client=http_client, context_window=config.context_window
        )
    if config.kind == "anthropic" and config.api_key is not None:
        return AnthropicModel(
            api_key=config.api_key,
            model=config.model,
            http_client=http_client,
            max_tokens=config.max_tokens,
            base_url=url,
            api_version=config.api_version,
        )
    if config.kind == "openai":
        return OpenAICompatModel(
            api_key=config.api_key or "unused",
            base_url=url,
            http_client=http_client,
            model=config.model,
        )
    raise ConfigError(f"Backend `{config.kind}` is missing its connection settings")
