from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from review_action.dev.mock_github_server import MockGitHubState
from review_action.dev.mock_llm_server import MockLLMState
from review_action.errors import ConfigError
from review_action.github.webhook import sign_payload
from review_action.server import build_app

SECRET = "hook-secret"


def _payload(action: str = "opened") -> bytes:
    return json.dumps(
        {
            "action": action,
            "pull_request": {"number": 3, "head": {"sha": "f00d"}},
            "repository": {"name": "widgets", "owner": {"login": "acme"}},
        }
    ).encode("utf-8")


@pytest.fixture
def client(base_environ: dict[str, str], routing_transport: httpx.AsyncBaseTransport) -> TestClient:
    environ = {**base_environ, "GITHUB_WEBHOOK_SECRET": SECRET}
    app = build_app(environ, http_client=httpx.AsyncClient(transport=routing_transport))
    return TestClient(app)


def _post(client: TestClient, body: bytes, event: str = "pull_request", signature: str | None = None) -> httpx.Response:
    return client.post(
        "/github/webhook",
        content=body,
        headers={
            "X-GitHub-Event": event,
            "X-Hub-Signature-256": signature or sign_payload(body=body, secret=SECRET),
            "Content-Type": "application/json",
        },
    )


def test_build_app_requires_webhook_secret(base_environ: dict[str, str]) -> None:
    with pytest.raises(ConfigError):
        build_app(base_environ)


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_opened_pull_request_runs_review(
    client: TestClient, github_state: MockGitHubState, llm_state: MockLLMState
) -> None:
    github_state.files.append({"filename": "app.py", "status": "added", "patch": "@@ +1 @@\n+x = 1"})
    github_state.contents["app.py"] = "x = 1\n"

    response = _post(client, _payload())

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert llm_state.calls == ["ollama-generate"]
    assert len(github_state.comments) == 1
    assert github_state.comments[0]["issue_number"] == 3
    assert github_state.content_requests == [("app.py", "f00d")]


def test_bad_signature_is_rejected(client: TestClient, github_state: MockGitHubState) -> None:
    response = _post(client, _payload(), signature="sha256=" + "0" * 64)
    assert response.status_code == 401
    assert github_state.comments == []


def test_other_events_are_ignored(client: TestClient, github_state: MockGitHubState) -> None:
    response = _post(client, b"{}", event="push")
    assert response.json() == {"status": "ignored"}
    assert github_state.comments == []


def test_non_trigger_actions_are_ignored(client: TestClient, github_state: MockGitHubState) -> None:
    response = _post(client, _payload(action="closed"))
    assert response.json() == {"status": "ignored"}
    assert github_state.comments == []


def test_shutdown_closes_http_client(base_environ: dict[str, str], routing_transport: httpx.AsyncBaseTransport) -> None:
    http_client = httpx.AsyncClient(transport=routing_transport)
    app = build_app({**base_environ, "GITHUB_WEBHOOK_SECRET": SECRET}, http_client=http_client)
    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
        assert not http_client.is_closed
    assert http_client.is_closed
