import pytest

from portfolio.errors import SubjectValidationError
from portfolio.models import Subject
from portfolio.services.subject_service import require_subject
from portfolio.services.subject_service import resolve_subject
from portfolio.services.subject_service import sanitize_handle


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("octocat", "octocat"),
        ("  @octocat  ", "octocat"),
        ("@@octocat", "octocat"),
        ("@ @octocat", "octocat"),
        ("   ", ""),
        ("@", ""),
        (None, ""),
    ],
)
def test_sanitize_handle_strips_whitespace_and_at_signs(raw, expected) -> None:
    assert sanitize_handle(raw) == expected


@pytest.mark.parametrize("raw", ["  @Ada ", "@\t@Ada", "Ada", "@@", " a b ", "@Ada@"])
def test_sanitize_handle_is_idempotent(raw: str) -> None:
    once = sanitize_handle(raw)

    assert sanitize_handle(once) == once
    assert not once.startswith("@")
    assert once == once.strip()


def test_resolve_subject_prefers_query_over_stored_values() -> None:
    subject = resolve_subject("Ada", "Babbage", "stored-user", "stored-org", "def", "def-org")

    assert subject == Subject(user="Ada", org="Babbage")


def test_resolve_subject_falls_back_per_field() -> None:
    subject = resolve_subject("", "  @ ", "stored-user", None, "def-user", "def-org")

    assert subject == Subject(user="stored-user", org="def-org")


def test_require_subject_rejects_partial_submission() -> None:
    with pytest.raises(SubjectValidationError) as exc_info:
        require_subject("Ada", "  @ ")

    assert exc_info.value.message == "Please provide both a GitHub user and organization."


def test_require_subject_sanitizes_both_fields() -> None:
    assert require_subject(" @Ada", "@Babbage ") == Subject(user="Ada", org="Babbage")
