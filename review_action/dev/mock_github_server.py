"""
本地 Mock GitHub API server（只覆盖闭环用到的三个接口）。

用途：
- 在没有真实 GitHub 的情况下，本地跑通：
  list PR files -> get contents -> post issue comment
- 端到端测试里通过 `httpx.ASGITransport` 直接挂载

启动：
  python -m review_action.dev.mock_github_server
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field

import uvicorn
from fastapi import FastAPI
from fastapi import HTTPException
from pydantic import BaseModel


class CommentCreateRequest(BaseModel):
    body: str


@dataclass
class MockGitHubState:
    """可变的 mock 状态：测试可以预置文件/内容，并检查发布的评论。"""

    files: list[dict[str, object]] = field(default_factory=list)
    contents: dict[str, str] = field(default_factory=dict)
    missing_paths: set[str] = field(default_factory=set)
    fail_listing: bool = False
    fail_comments: bool = False
    comments: list[dict[str, object]] = field(default_factory=list)
    content_requests: list[tuple[str, str]] = field(default_factory=list)


def _default_state() -> MockGitHubState:
    content = "def add(a: int, b: int) -> int:\n    return a + b\n"
    return MockGitHubState(
        files=[
            {
                "filename": "src/example.py",
                "status": "modified",
                "patch": "@@ -1,2 +1,2 @@\n def add(a: int, b: int) -> int:\n-    return a - b\n+    return a + b\n",
            }
        ],
        contents={"src/example.py": content},
    )


def build_mock_github_app(state: MockGitHubState) -> FastAPI:
    app = FastAPI(title="Mock GitHub API", version="0.1.0")

    @app.get("/repos/{owner}/{repo}/pulls/{pull_number}/files")
    async def list_pull_request_files(
        owner: str, repo: str, pull_number: int, per_page: int = 30, page: int = 1
    ) -> list[dict[str, object]]:
        if state.fail_listing:
            raise HTTPException(status_code=404, detail="Not Found")
        start = (page - 1) * per_page
        return state.files[start : start + per_page]

    @app.get("/repos/{owner}/{repo}/contents/{path:path}")
    async def get_content(owner: str, repo: str, path: str, ref: str = "") -> dict[str, object]:
        state.content_requests.append((path, ref))
        if path in state.missing_paths or path not in state.contents:
            raise HTTPException(status_code=404, detail="Not Found")
        encoded = base64.b64encode(state.contents[path].encode("utf-8")).decode("ascii")
        return {"type": "file", "path": path, "encoding": "base64", "content": encoded}

    @app.post("/repos/{owner}/{repo}/issues/{issue_number}/comments", status_code=201)
    async def create_issue_comment(
        owner: str, repo: str, issue_number: int, req: CommentCreateRequest
    ) -> dict[str, object]:
        if state.fail_comments:
            raise HTTPException(status_code=403, detail="Resource not accessible by integration")
        comment_id = len(state.comments) + 1
        comment = {"id": comment_id, "body": req.body, "issue_number": issue_number}
        state.comments.append(comment)
        return {"id": comment_id, "html_url": f"https://github.com/{owner}/{repo}/pull/{issue_number}"}

    @app.get("/__debug__/comments")
    async def debug_comments() -> dict[str, object]:
        return {"count": len(state.comments), "comments": state.comments}

    return app


app = build_mock_github_app(_default_state())


def main() -> None:
    uvicorn.run(app, host="127.0.0.1", port=9002)


if __name__ == "__main__":
    main()
