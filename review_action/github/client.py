"""
GitHub API 客户端（外部系统连接器）。

约定：
- 这里只做 HTTP 调用 + 错误处理 + schema 校验，不做业务决策
- 出错直接抛错（不要吞），每个接口抛各自语义的错误类型
- 不做重试
"""

from __future__ import annotations

import base64
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from review_action.errors import ContentFetchError
from review_action.errors import HostFetchError
from review_action.errors import PublishError
from review_action.github.schemas import GitHubContent
from review_action.github.schemas import GitHubIssueComment
from review_action.github.schemas import GitHubPullRequestFile

GITHUB_API_VERSION = "2022-11-28"


class GitHubClient:
    """最小 GitHub API client（list PR files + get contents + create issue comment）。"""

    def __init__(self, api_base_url: str, token: str, http_client: httpx.AsyncClient) -> None:
        self._api_base_url = api_base_url.rstrip("/")
        self._token = token
        self._http_client = http_client

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    async def list_pull_request_files(self, owner: str, repo: str, pull_number: int) -> list[GitHubPullRequestFile]:
        """
        拉取 PR 的变更文件列表（包含每个文件的 patch diff）。

        注意：GitHub API 有分页；这里会拉取全部文件，并保持 API 返回顺序。
        """
        per_page = 100
        page = 1
        all_items: list[GitHubPullRequestFile] = []
        while True:
            url = f"{self._api_base_url}/repos/{owner}/{repo}/pulls/{pull_number}/files"
            try:
                response = await self._http_client.get(
                    url,
                    headers=self._headers(),
                    params={"per_page": per_page, "page": page},
                )
            except httpx.HTTPError as exc:
                raise HostFetchError(f"GitHub request failed: {exc}") from exc
            if response.status_code >= 400:
                raise HostFetchError(f"GitHub API error {response.status_code}: {response.text}")
            try:
                data = response.json()
                if not isinstance(data, list):
                    raise HostFetchError(f"Unexpected GitHub response shape for PR files: {data}")
                items = [GitHubPullRequestFile.model_validate(x) for x in data]
            except (ValueError, ValidationError) as exc:
                raise HostFetchError(f"Invalid GitHub response for PR files: {exc}") from exc
            all_items.extend(items)
            if len(items) < per_page:
                break
            page += 1
        return all_items

    async def get_file_content(self, owner: str, repo: str, path: str, ref: str) -> str:
        """
        获取文件在指定 revision 下的完整文本。

        - contents API 默认返回 base64；这里解码为 UTF-8 文本
        - 目录/软链接/子模块、超大文件（content 为空）、非 UTF-8 都视为该文件失败
        """
        url = f"{self._api_base_url}/repos/{owner}/{repo}/contents/{quote(path)}"
        try:
            response = await self._http_client.get(url, headers=self._headers(), params={"ref": ref})
        except httpx.HTTPError as exc:
            raise ContentFetchError(path=path, reason=f"request failed: {exc}") from exc
        if response.status_code >= 400:
            raise ContentFetchError(path=path, reason=f"GitHub API error {response.status_code}")
        try:
            data = response.json()
            if isinstance(data, list):
                raise ContentFetchError(path=path, reason="path is a directory")
            content = GitHubContent.model_validate(data)
        except (ValueError, ValidationError) as exc:
            raise ContentFetchError(path=path, reason=f"invalid response: {exc}") from exc

        if content.type != "file":
            raise ContentFetchError(path=path, reason=f"unsupported content type: {content.type}")
        if content.content is None:
            raise ContentFetchError(path=path, reason="no content returned (file too large?)")
        if content.encoding != "base64":
            return content.content
        try:
            return base64.b64decode(content.content).decode("utf-8")
        except ValueError as exc:
            # binascii.Error / UnicodeDecodeError 也都是 ValueError
            raise ContentFetchError(path=path, reason=f"cannot decode content: {exc}") from exc

    async def create_issue_comment(self, owner: str, repo: str, issue_number: int, body: str) -> GitHubIssueComment:
        """
        在 PR 的 conversation 下发布一条评论（PR 在 API 层面也是 issue）。
        """
        url = f"{self._api_base_url}/repos/{owner}/{repo}/issues/{issue_number}/comments"
        try:
            response = await self._http_client.post(url, headers=self._headers(), json={"body": body})
        except httpx.HTTPError as exc:
            raise PublishError(f"GitHub request failed: {exc}") from exc
        if response.status_code >= 400:
            raise PublishError(f"GitHub API error {response.status_code}: {response.text}")
        try:
            return GitHubIssueComment.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise PublishError(f"Invalid GitHub response for created comment: {exc}") from exc
