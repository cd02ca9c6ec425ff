import json
import logging
import uuid
from collections.abc import MutableMapping
from datetime import UTC
from datetime import datetime
from typing import Any
from urllib.parse import quote
from urllib.parse import unquote

from starlette.responses import Response

from portfolio.models import PortfolioLoad


logger = logging.getLogger(__name__)

USER_KEY = "portfolio.github.user"
ORG_KEY = "portfolio.github.org"
SNAPSHOT_KEY = "portfolio.github.snapshot"
CLIENT_KEY = "portfolio.client"

MAX_COOKIE_BYTES = 4096
COOKIE_MAX_AGE_SECONDS = 60 * 60 * 24 * 365


class CookieJar(dict[str, str]):
    """Request cookies plus the writes to send back on the response."""

    def __init__(self, cookies: MutableMapping[str, str] | dict[str, str]) -> None:
        super().__init__(cookies)
        self.changed: set[str] = set()

    def __setitem__(self, key: str, value: str) -> None:
        if len(key.encode()) + len(value.encode()) > MAX_COOKIE_BYTES:
            raise ValueError(f"cookie {key} exceeds {MAX_COOKIE_BYTES} bytes")
        super().__setitem__(key, value)
        self.changed.add(key)

    def apply(self, response: Response) -> None:
        for key in sorted(self.changed):
            response.set_cookie(
                key,
                self[key],
                max_age=COOKIE_MAX_AGE_SECONDS,
                httponly=True,
                samesite="lax",
            )


class PreferenceStore:
    """Best-effort access to the last resolved handles and load snapshot.

    Nothing here is required for a correct page: unreadable values count as
    absent and failed writes are dropped.
    """

    def __init__(self, backing: MutableMapping[str, str]) -> None:
        self._backing = backing

    def get(self, key: str) -> str | None:
        value = self._backing.get(key)
        return value if isinstance(value, str) and value else None

    def set(self, key: str, value: str) -> None:
        try:
            self._backing[key] = value
        except (ValueError, OSError) as exc:
            logger.debug("Dropping preference %s: %s", key, exc)

    def client_id(self) -> str:
        """Return the browser's load-ordering id, issuing one on first visit."""

        existing = self.get(CLIENT_KEY)
        if existing:
            return existing
        issued = uuid.uuid4().hex
        self.set(CLIENT_KEY, issued)
        return issued

    def read_snapshot(self) -> dict[str, Any] | None:
        raw_value = self.get(SNAPSHOT_KEY)
        if raw_value is None:
            return None
        try:
            snapshot = json.loads(unquote(raw_value))
        except ValueError:
            return None
        return snapshot if isinstance(snapshot, dict) else None

    def write_snapshot(self, snapshot: dict[str, Any]) -> None:
        self.set(SNAPSHOT_KEY, quote(json.dumps(snapshot, separators=(",", ":")), safe=""))

    def remember(self, load: PortfolioLoad) -> None:
        """Persist the halves of the subject that resolved, plus a snapshot."""

        if load.user_profile.ok:
            self.set(USER_KEY, load.user)
        if load.org_profile.ok:
            self.set(ORG_KEY, load.org)
        self.write_snapshot(
            {
                "user": load.user,
                "org": load.org,
                "loaded_at": datetime.now(UTC).isoformat(),
                "warnings": len(load.warnings),
            }
        )
