import re
from datetime import date
from datetime import datetime
from html import escape


_SCHEME = re.compile(r"^https?://")


def esc(value: object) -> str:
    return escape(str(value), quote=True)


def format_date(value: datetime | date | None) -> str:
    """Render a timestamp as e.g. `Mar 4, 2025`."""

    if value is None:
        return "n/a"
    return f"{value:%b} {value.day}, {value.year}"


def strip_scheme(url: str) -> str:
    return _SCHEME.sub("", url)


def to_repo_url(api_url: str, api_base_url: str, web_base_url: str) -> str:
    """Turn `https://api.github.com/repos/o/r` into `https://github.com/o/r`."""

    api_prefix = f"{api_base_url.rstrip('/')}/repos/"
    return api_url.replace(api_prefix, f"{web_base_url.rstrip('/')}/")
