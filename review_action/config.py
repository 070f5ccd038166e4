"""
Action 配置加载。

设计目标：
- **严格**：缺少必要输入就直接报错（在任何网络调用之前失败）
- **类型安全**：使用 Pydantic 校验 URL/数字等，减少运行时踩坑
- **可测试**：核心加载函数接收 `environ` 显式输入，便于单元测试

输入约定：GitHub Actions 会把 `with:` 里的输入暴露为 `INPUT_<NAME>` 环境变量
（名字大写，连字符保留），例如 `github-token` -> `INPUT_GITHUB-TOKEN`。
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, Field, HttpUrl, ValidationError

from review_action.errors import ConfigError

BackendKind = Literal["ollama-generate", "ollama-chat", "anthropic", "openai"]

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_MAX_FILES = 20
DEFAULT_CONTEXT_WINDOW = 16384
DEFAULT_MAX_TOKENS = 4096


class GitHubConfig(BaseModel):
    api_base_url: HttpUrl
    token: str
    webhook_secret: str | None = None


class BackendConfig(BaseModel):
    """模型后端连接参数（由 `kind` 选择具体实现）。"""

    kind: BackendKind
    model: str
    url: HttpUrl | None = None
    api_key: str | None = None
    api_version: str | None = None
    context_window: int = Field(default=DEFAULT_CONTEXT_WINDOW, gt=0)
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0)


class ReviewPolicy(BaseModel):
    """文件过滤/内容拉取/评论格式相关的策略开关。"""

    max_files: int = Field(default=DEFAULT_MAX_FILES, gt=0)
    min_resolved_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    comment_header: str | None = None
    comment_footer: str | None = None


class ActionConfig(BaseModel):
    github: GitHubConfig
    backend: BackendConfig
    policy: ReviewPolicy = Field(default_factory=ReviewPolicy)
    log_level: str = "INFO"

    def secrets(self) -> list[str]:
        """需要从日志里脱敏的值。"""
        values = [self.github.token, self.backend.api_key, self.github.webhook_secret]
        return [v for v in values if v]


def _input(environ: Mapping[str, str], name: str) -> str | None:
    """读取一个 action 输入；空白字符串视为未设置。"""
    raw = environ.get(f"INPUT_{name.upper()}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _infer_backend(url: str | None, api_key: str | None) -> BackendKind:
    if url is not None:
        return "ollama-generate"
    if api_key is not None:
        return "anthropic"
    raise ConfigError("Missing required input: one of `url` or `api-key` must be set")


def _validate_backend_inputs(kind: BackendKind, url: str | None, api_key: str | None) -> None:
    if kind in ("ollama-generate", "ollama-chat") and url is None:
        raise ConfigError(f"Backend `{kind}` requires input `url`")
    if kind == "anthropic" and api_key is None:
        raise ConfigError("Backend `anthropic` requires input `api-key`")
    if kind == "openai" and url is None and api_key is None:
        raise ConfigError("Backend `openai` requires input `url` or `api-key`")


def load_config_from_env(environ: Mapping[str, str]) -> ActionConfig:
    """
    从环境变量加载并校验 action 配置。

    - **输入**：`environ`（例如 `os.environ`）
    - **输出**：`ActionConfig`
    - **失败**：缺失/为空/非法则抛 `ConfigError`（同时是 `ValueError`）
    """
    required = ("github-token", "model")
    missing = [name for name in required if _input(environ, name) is None]
    if missing:
        raise ConfigError(f"Missing required inputs: {', '.join(missing)}")

    url = _input(environ, "url")
    api_key = _input(environ, "api-key")
    backend = _input(environ, "backend")
    if backend is None:
        kind = _infer_backend(url=url, api_key=api_key)
    elif backend in ("ollama-generate", "ollama-chat", "anthropic", "openai"):
        kind = backend
    else:
        raise ConfigError(f"Unknown backend: {backend}")
    _validate_backend_inputs(kind=kind, url=url, api_key=api_key)

    backend_fields: dict[str, object] = {
        "kind": kind,
        "model": _input(environ, "model"),
        "url": url,
        "api_key": api_key,
        "api_version": _input(environ, "api-version"),
    }
    policy_fields: dict[str, object] = {
        "comment_header": _input(environ, "comment-header"),
        "comment_footer": _input(environ, "comment-footer"),
    }
    # 可选数字输入：未设置时走 Pydantic 默认值
    for name, target, key in (
        ("context-window", backend_fields, "context_window"),
        ("max-tokens", backend_fields, "max_tokens"),
        ("max-files", policy_fields, "max_files"),
        ("min-resolved-ratio", policy_fields, "min_resolved_ratio"),
    ):
        value = _input(environ, name)
        if value is not None:
            target[key] = value

    # 交给 Pydantic 做类型校验（例如 URL 合法性、数字范围）
    try:
        return ActionConfig(
            github=GitHubConfig(
                api_base_url=environ.get("GITHUB_API_URL") or DEFAULT_GITHUB_API_URL,
                token=_input(environ, "github-token"),
                webhook_secret=environ.get("GITHUB_WEBHOOK_SECRET") or None,
            ),
            backend=BackendConfig.model_validate(backend_fields),
            policy=ReviewPolicy.model_validate(policy_fields),
            log_level=(_input(environ, "log-level") or "INFO").upper(),
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
