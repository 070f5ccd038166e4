from __future__ import annotations

"""
GitHub Actions 日志格式。

- WARNING/ERROR 渲染成 workflow command（`::warning::` / `::error::`），在 Actions UI 里显示为 annotation
- 所有输出都会把 token / API key 等敏感值替换成 `***`
"""

import logging
from collections.abc import Sequence

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

_COMMANDS = {
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


def _escape_command_data(value: str) -> str:
    """workflow command 的 data 部分需要转义 % / CR / LF。"""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class ActionsFormatter(logging.Formatter):
    def __init__(self, fmt: str, secrets: Sequence[str] = ()) -> None:
        super().__init__(fmt)
        self._secrets = [s for s in secrets if s]

    def redact(self, text: str) -> str:
        for secret in self._secrets:
            text = text.replace(secret, "***")
        return text

    def format(self, record: logging.LogRecord) -> str:
        command = _COMMANDS.get(record.levelno)
        if command is None:
            return self.redact(super().format(record))
        message = self.redact(record.getMessage())
        if record.exc_info:
            message = f"{message}\n{self.redact(self.formatException(record.exc_info))}"
        return f"::{command}::{_escape_command_data(message)}"


def setup_logging(level: str = "INFO", secrets: Sequence[str] = ()) -> None:
    """配置 root logger（入口调用一次；重复调用会替换 formatter/secret 列表）。"""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in root.handlers:
        handler.setFormatter(ActionsFormatter(LOG_FORMAT, secrets=secrets))
