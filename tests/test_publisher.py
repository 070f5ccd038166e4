from __future__ import annotations

from review_action.review.publisher import format_comment_body


def test_body_is_verbatim_without_wrapper() -> None:
    assert format_comment_body(text="LGTM") == "LGTM"


def test_header_and_footer_wrap_text() -> None:
    assert format_comment_body(text="LGTM", header="### AI review", footer="_bot_") == "### AI review\n\nLGTM\n\n_bot_"


def test_header_is_kept_when_text_is_empty() -> None:
    assert format_comment_body(text="", header="### AI review") == "### AI review"
