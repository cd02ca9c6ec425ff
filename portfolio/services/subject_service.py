import re

from portfolio.errors import SubjectValidationError
from portfolio.models import Subject


_LEADING_NOISE = re.compile(r"^[\s@]+")


def sanitize_handle(raw_value: str | None) -> str:
    """Trim whitespace and strip any leading `@` from a GitHub handle."""

    if not raw_value:
        return ""
    return _LEADING_NOISE.sub("", raw_value).strip()


def resolve_subject(
    query_user: str | None,
    query_org: str | None,
    stored_user: str | None,
    stored_org: str | None,
    default_user: str,
    default_org: str,
) -> Subject:
    """Pick each handle independently: query string, then stored, then default."""

    user = (
        sanitize_handle(query_user)
        or sanitize_handle(stored_user)
        or sanitize_handle(default_user)
    )
    org = (
        sanitize_handle(query_org)
        or sanitize_handle(stored_org)
        or sanitize_handle(default_org)
    )
    return Subject(user=user, org=org)


def require_subject(user: str | None, org: str | None) -> Subject:
    """Validate an explicit resubmission, which must name both handles.

    Raises:
        SubjectValidationError: If either handle is empty after sanitizing.
    """

    clean_user = sanitize_handle(user)
    clean_org = sanitize_handle(org)
    if not clean_user or not clean_org:
        raise SubjectValidationError()
    return Subject(user=clean_user, org=clean_org)
