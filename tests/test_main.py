from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from review_action import main
from review_action.main import run_action


def test_missing_inputs_fail_before_network() -> None:
    assert run_action({"GITHUB_EVENT_NAME": "pull_request"}) == 1


def test_non_pull_request_event_succeeds_without_work() -> None:
    environ = {
        "GITHUB_EVENT_NAME": "push",
        "INPUT_GITHUB-TOKEN": "t",
        "INPUT_MODEL": "m",
        "INPUT_URL": "http://llm.test",
    }
    assert run_action(environ) == 0


def test_invalid_event_payload_fails(tmp_path: Path) -> None:
    event_path = tmp_path / "event.json"
    event_path.write_text(json.dumps({"action": "opened"}), encoding="utf-8")
    environ = {
        "GITHUB_EVENT_NAME": "pull_request",
        "GITHUB_EVENT_PATH": str(event_path),
        "INPUT_GITHUB-TOKEN": "t",
        "INPUT_MODEL": "m",
        "INPUT_URL": "http://llm.test",
    }
    assert run_action(environ) == 1


def test_unexpected_error_is_reported_as_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    event_path = tmp_path / "event.json"
    event_path.write_text(
        json.dumps({"pull_request": {"number": 1, "head": {"sha": "abc"}}, "repository": {"name": "r", "owner": {"login": "o"}}}),
        encoding="utf-8",
    )

    async def boom(config, ctx):
        raise ValueError("boom")

    monkeypatch.setattr(main, "_run", boom)
    environ = {
        "GITHUB_EVENT_NAME": "pull_request",
        "GITHUB_EVENT_PATH": str(event_path),
        "INPUT_GITHUB-TOKEN": "t",
        "INPUT_MODEL": "m",
        "INPUT_URL": "http://llm.test",
    }
    with caplog.at_level(logging.ERROR):
        assert run_action(environ) == 1
    assert "Action failed: boom" in caplog.text
