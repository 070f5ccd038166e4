from __future__ import annotations

import httpx
import pytest

from review_action.dev.mock_github_server import MockGitHubState
from review_action.dev.mock_github_server import build_mock_github_app
from review_action.dev.mock_llm_server import MockLLMState
from review_action.dev.mock_llm_server import build_mock_llm_app

GITHUB_HOST = "github.test"
LLM_HOST = "llm.test"


class HostRoutingTransport(httpx.AsyncBaseTransport):
    """按 host 把请求分发到不同的 ASGI mock app。"""

    def __init__(self, routes: dict[str, httpx.AsyncBaseTransport]) -> None:
        self._routes = routes

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        transport = self._routes.get(request.url.host)
        if transport is None:
            raise httpx.ConnectError(f"No mock for host {request.url.host}", request=request)
        return await transport.handle_async_request(request)


@pytest.fixture
def github_state() -> MockGitHubState:
    return MockGitHubState()


@pytest.fixture
def llm_state() -> MockLLMState:
    return MockLLMState()


@pytest.fixture
def routing_transport(github_state: MockGitHubState, llm_state: MockLLMState) -> HostRoutingTransport:
    return HostRoutingTransport(
        {
            GITHUB_HOST: httpx.ASGITransport(app=build_mock_github_app(github_state)),
            LLM_HOST: httpx.ASGITransport(app=build_mock_llm_app(llm_state)),
        }
    )


@pytest.fixture
def base_environ() -> dict[str, str]:
    return {
        "GITHUB_API_URL": f"http://{GITHUB_HOST}",
        "INPUT_GITHUB-TOKEN": "ghs_secret_token",
        "INPUT_MODEL": "codellama",
        "INPUT_URL": f"http://{LLM_HOST}",
    }
