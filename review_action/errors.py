from __future__ import annotations

"""
错误类型（一次 run 内的失败分类）。

传播策略：
- 只有 `ContentFetchError` 会在 content resolver 内被吸收（丢弃该文件 + warning）
- 其余错误一律向上抛，由入口统一输出一条 `Action failed: ...` 并以非 0 退出
- 任何地方都不做重试
"""


class ReviewActionError(RuntimeError):
    """所有 run 级错误的基类。"""

    pass


class ConfigError(ReviewActionError, ValueError):
    """必填输入缺失/非法：在任何网络调用之前失败。"""

    pass


class HostFetchError(ReviewActionError):
    """读取 PR 文件列表或触发事件失败。"""

    pass


class ContentLossError(HostFetchError):
    """内容拉取失败的文件比例超过 `min_resolved_ratio` 策略。"""

    pass


class ContentFetchError(ReviewActionError):
    """单个文件内容拉取失败（唯一允许被局部吸收的错误）。"""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class BackendError(ReviewActionError):
    """模型后端返回非成功状态、畸形响应或连接失败。"""

    pass


class PublishError(ReviewActionError):
    """发布 PR 评论失败（生成的 review 文本会丢失，除非已写入日志）。"""

    pass
