"""
GitHub 事件 / API response schemas（Pydantic）。

说明：
- 字段只覆盖当前闭环需要的子集（pull_request 事件 + list files + contents）。
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class GitHubOwner(BaseModel):
    login: str


class GitHubRepository(BaseModel):
    name: str
    owner: GitHubOwner


class GitHubPullRequestHead(BaseModel):
    sha: str


class GitHubPullRequest(BaseModel):
    number: int
    head: GitHubPullRequestHead


class GitHubPullRequestEvent(BaseModel):
    """
    `pull_request` 事件（Actions 的 GITHUB_EVENT_PATH 文件 / webhook body 同构）。

    action: opened/reopened/synchronize 等；Actions 下按 workflow 的 `on:` 过滤，这里不限制取值。
    """

    action: str | None = None
    pull_request: GitHubPullRequest
    repository: GitHubRepository | None = None


class GitHubPullRequestFile(BaseModel):
    """
    PR 文件列表 item（GET /pulls/{pull_number}/files）。

    patch 可能缺失（例如大文件/二进制/纯重命名），prompt 里会用占位文本代替。
    """

    filename: str
    status: Literal["added", "modified", "removed", "renamed", "changed", "copied", "unchanged"]
    patch: str | None = None


class GitHubContent(BaseModel):
    """文件内容（GET /repos/{owner}/{repo}/contents/{path}?ref=...）。"""

    type: str
    path: str
    content: str | None = None
    encoding: str | None = None


class GitHubIssueComment(BaseModel):
    id: int
    html_url: str | None = None
