from __future__ import annotations

import pytest

from review_action.review.filtering import EXCLUDED_EXTENSIONS
from review_action.review.filtering import NO_RELEVANT_FILES_MESSAGE
from review_action.review.filtering import Proceed
from review_action.review.filtering import ShortCircuit
from review_action.review.filtering import decide_file_set
from review_action.review.filtering import filter_relevant_files
from review_action.review.models import ChangedFile
from review_action.review.models import ResultKind


def _files(n: int, ext: str = "py") -> list[ChangedFile]:
    return [ChangedFile(path=f"src/f{i}.{ext}", status="modified", patch="@@") for i in range(n)]


@pytest.mark.parametrize("ext", sorted(EXCLUDED_EXTENSIONS))
def test_binary_extensions_are_excluded_case_insensitively(ext: str) -> None:
    files = [
        ChangedFile(path=f"assets/a.{ext}", status="added"),
        ChangedFile(path=f"assets/B.{ext.upper()}", status="modified"),
        ChangedFile(path=f"assets/c.{ext.capitalize()}", status="renamed"),
    ]
    assert filter_relevant_files(files) == []


def test_removed_files_are_excluded() -> None:
    files = [
        ChangedFile(path="a.py", status="removed"),
        ChangedFile(path="b.py", status="modified"),
        ChangedFile(path="c.py", status="added"),
    ]
    assert [f.path for f in filter_relevant_files(files)] == ["b.py", "c.py"]


def test_extension_must_be_a_suffix() -> None:
    files = [
        ChangedFile(path="png_loader.py", status="modified"),
        ChangedFile(path="archive.tar.gz", status="added"),
        ChangedFile(path="Makefile", status="modified"),
        ChangedFile(path="docs/gzip.md", status="modified"),
    ]
    assert [f.path for f in filter_relevant_files(files)] == ["png_loader.py", "Makefile", "docs/gzip.md"]


def test_empty_filtered_list_short_circuits() -> None:
    decision = decide_file_set(files=[ChangedFile(path="logo.png", status="added")], max_files=20)
    assert isinstance(decision, ShortCircuit)
    assert decision.kind is ResultKind.NO_RELEVANT_FILES
    assert decision.message == NO_RELEVANT_FILES_MESSAGE == "No relevant files to review."


def test_above_cap_short_circuits_with_count() -> None:
    decision = decide_file_set(files=_files(21), max_files=20)
    assert isinstance(decision, ShortCircuit)
    assert decision.kind is ResultKind.TOO_MANY_FILES
    assert decision.count == 21
    assert "21 > 20" in decision.message


def test_cap_is_inclusive() -> None:
    decision = decide_file_set(files=_files(20), max_files=20)
    assert isinstance(decision, Proceed)
    assert len(decision.files) == 20


def test_cap_counts_only_relevant_files() -> None:
    files = _files(20) + _files(5, ext="png")
    decision = decide_file_set(files=files, max_files=20)
    assert isinstance(decision, Proceed)


def test_filter_preserves_listing_order() -> None:
    files = [
        ChangedFile(path="z.py", status="modified"),
        ChangedFile(path="img.gif", status="modified"),
        ChangedFile(path="a.py", status="added"),
    ]
    decision = decide_file_set(files=files, max_files=20)
    assert isinstance(decision, Proceed)
    assert [f.path for f in decision.files] == ["z.py", "a.py"]


def test_max_files_must_be_positive() -> None:
    with pytest.raises(ValueError):
        decide_file_set(files=_files(1), max_files=0)
