from __future__ import annotations

from review_action.review.models import ReviewableFile
from review_action.review.prompt import FEEDBACK_QUESTION
from review_action.review.prompt import NO_PATCH_PLACEHOLDER
from review_action.review.prompt import REVIEWER_PREAMBLE
from review_action.review.prompt import build_review_request
from review_action.review.prompt import render_chat_messages
from review_action.review.prompt import render_files_block
from review_action.review.prompt import render_flat_prompt

FILES = [
    ReviewableFile(path="src/app.py", status="modified", patch="@@ -1 +1 @@\n-a\n+b", content="b\n"),
    ReviewableFile(path="README.md", status="added", patch=None, content="# Title"),
]


def test_flat_prompt_is_deterministic() -> None:
    first = render_flat_prompt(build_review_request(files=FILES))
    second = render_flat_prompt(build_review_request(files=[f.model_copy() for f in FILES]))
    assert first == second


def test_flat_prompt_contains_preamble_and_files_in_order() -> None:
    prompt = render_flat_prompt(build_review_request(files=FILES))
    assert prompt.startswith(REVIEWER_PREAMBLE)
    for criterion in ("Code quality", "bugs", "Security", "Performance", "Suggestions for improvements"):
        assert criterion in prompt
    assert prompt.index("Filename: src/app.py") < prompt.index("Filename: README.md")
    assert "Status: modified" in prompt
    assert "@@ -1 +1 @@\n-a\n+b" in prompt
    assert "```\n# Title\n```" in prompt


def test_missing_patch_uses_placeholder() -> None:
    prompt = render_flat_prompt(build_review_request(files=FILES[1:]))
    assert f"Patch:\n{NO_PATCH_PLACEHOLDER}\n" in prompt


def test_chat_messages_shape() -> None:
    messages = render_chat_messages(build_review_request(files=FILES))
    assert [m.role for m in messages] == ["system", "user", "user", "user"]
    assert messages[0].content == REVIEWER_PREAMBLE
    assert "Filename: src/app.py" in messages[1].content
    assert "Filename: README.md" in messages[2].content
    assert messages[-1].content == FEEDBACK_QUESTION


def test_chat_and_flat_shapes_carry_same_file_sections() -> None:
    request = build_review_request(files=FILES)
    block = render_files_block(request)
    for message in render_chat_messages(request)[1:-1]:
        assert message.content in block
    assert block in render_flat_prompt(request)


def test_custom_preamble() -> None:
    request = build_review_request(files=FILES, preamble="Be terse.")
    assert render_flat_prompt(request).startswith("Be terse.\n\n")
