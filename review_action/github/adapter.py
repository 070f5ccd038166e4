"""
GitHub -> Review domain adapter。

职责：
- 将 GitHub PR files 转为平台无关的 `ChangedFile`（保持 API 返回顺序）
"""

from __future__ import annotations

from review_action.github.schemas import GitHubPullRequestFile
from review_action.review.models import ChangedFile


def build_changed_files(files: list[GitHubPullRequestFile]) -> list[ChangedFile]:
    return [ChangedFile(path=f.filename, status=f.status, patch=f.patch or None) for f in files]
