import logging
from collections.abc import Mapping
from datetime import date
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError

from portfolio.core.security import build_upstream_headers
from portfolio.errors import RateLimitError
from portfolio.errors import ResourceNotFoundError
from portfolio.errors import UnexpectedLoadError
from portfolio.errors import UpstreamRequestError
from portfolio.models import ContributionDay
from portfolio.models import ContributionHistory
from portfolio.models import GitHubEvent
from portfolio.models import GitHubOrg
from portfolio.models import GitHubRepo
from portfolio.models import GitHubUser


logger = logging.getLogger(__name__)

_REPO_LIST = TypeAdapter(list[GitHubRepo])
_EVENT_LIST = TypeAdapter(list[GitHubEvent])
_USER = TypeAdapter(GitHubUser)
_ORG = TypeAdapter(GitHubOrg)


class GitHubProxy:
    """Same-origin gateway to the GitHub REST API.

    Owns the upstream base URL and the optional bearer credential; both the
    `/api/github` endpoint and the aggregator read GitHub through it.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_base_url: str,
        token: str | None = None,
        user_agent: str = "matrixjava-dev-portfolio",
    ) -> None:
        self._client = client
        self._api_base_url = api_base_url.rstrip("/")
        self._headers = build_upstream_headers(token, user_agent)

    async def get(self, endpoint: str) -> httpx.Response:
        logger.debug("Proxying GET %s", endpoint)
        return await self._client.get(
            f"{self._api_base_url}{endpoint}", headers=self._headers
        )


def raise_for_status(response: httpx.Response, resource: str) -> None:
    """Translate a non-2xx response into the matching load error."""

    if response.is_success:
        return
    if response.status_code == 404:
        raise ResourceNotFoundError(resource)
    if response.status_code == 403:
        raise RateLimitError(resource)
    raise UpstreamRequestError(resource, response.status_code)


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise UnexpectedLoadError() from exc


async def fetch_json(proxy: GitHubProxy, endpoint: str, resource: str) -> Any:
    """Read one JSON document through the proxy, classifying failures."""

    try:
        response = await proxy.get(endpoint)
    except httpx.HTTPError as exc:
        logger.warning("GitHub request for %s failed: %s", endpoint, exc)
        raise UnexpectedLoadError() from exc

    raise_for_status(response, resource)
    return _decode_json(response)


async def fetch_text(client: httpx.AsyncClient, url: str, resource: str) -> str:
    try:
        response = await client.get(url)
    except httpx.HTTPError as exc:
        raise UnexpectedLoadError(f"Unexpected error while loading {resource}.") from exc

    raise_for_status(response, resource)
    return response.text


def _validate(adapter: TypeAdapter, payload: Any) -> Any:
    try:
        return adapter.validate_python(payload)
    except ValidationError as exc:
        raise UnexpectedLoadError() from exc


def _segment(handle: str) -> str:
    return quote(handle, safe="")


async def fetch_org(proxy: GitHubProxy, org: str) -> GitHubOrg:
    payload = await fetch_json(proxy, f"/orgs/{_segment(org)}", f"Organization @{org}")
    return _validate(_ORG, payload)


async def fetch_org_repos(proxy: GitHubProxy, org: str) -> list[GitHubRepo]:
    payload = await fetch_json(
        proxy,
        f"/orgs/{_segment(org)}/repos?sort=updated&per_page=100&type=public",
        f"Organization repositories for @{org}",
    )
    return _validate(_REPO_LIST, payload)


async def fetch_user(proxy: GitHubProxy, user: str) -> GitHubUser:
    payload = await fetch_json(proxy, f"/users/{_segment(user)}", f"User @{user}")
    return _validate(_USER, payload)


async def fetch_user_repos(proxy: GitHubProxy, user: str) -> list[GitHubRepo]:
    payload = await fetch_json(
        proxy,
        f"/users/{_segment(user)}/repos?sort=updated&per_page=100&type=owner",
        f"Repositories for @{user}",
    )
    return _validate(_REPO_LIST, payload)


async def fetch_user_events(proxy: GitHubProxy, user: str) -> list[GitHubEvent]:
    payload = await fetch_json(
        proxy,
        f"/users/{_segment(user)}/events/public?per_page=30",
        f"Public activity for @{user}",
    )
    return _validate(_EVENT_LIST, payload)


async def fetch_contribution_history(
    client: httpx.AsyncClient,
    url_template: str,
    handle: str,
) -> ContributionHistory:
    """Fetch the contribution calendar for a user from the contributions host."""

    resource = f"Contribution history for @{handle}"
    url = url_template.format(handle=_segment(handle))
    try:
        response = await client.get(url, headers={"Accept": "application/json"})
    except httpx.HTTPError as exc:
        logger.warning("Contribution history request failed: %s", exc)
        raise UnexpectedLoadError() from exc

    raise_for_status(response, resource)
    return parse_contribution_history(_decode_json(response))


def parse_contribution_history(payload: Any) -> ContributionHistory:
    """Read `{"contributions": [[day, ...], ...], "totalContributions": n}`."""

    if not isinstance(payload, Mapping):
        raise UnexpectedLoadError("Contribution history response is invalid.")

    raw_weeks = payload.get("contributions")
    if not isinstance(raw_weeks, list):
        raise UnexpectedLoadError("Contribution weeks are missing.")

    weeks: list[list[ContributionDay]] = []
    counted = 0
    for raw_week in raw_weeks:
        if not isinstance(raw_week, list):
            continue
        days: list[ContributionDay] = []
        for item in raw_week:
            if not isinstance(item, Mapping):
                continue
            raw_date = item.get("date")
            raw_count = item.get("contributionCount")
            raw_level = item.get("contributionLevel")
            if not isinstance(raw_date, str) or not isinstance(raw_count, int):
                continue
            try:
                parsed_day = date.fromisoformat(raw_date)
            except ValueError:
                continue
            days.append(
                ContributionDay(
                    day=parsed_day,
                    count=raw_count,
                    level=raw_level if isinstance(raw_level, str) else "NONE",
                )
            )
            counted += raw_count
        weeks.append(days)

    raw_total = payload.get("totalContributions")
    total = raw_total if isinstance(raw_total, int) else counted
    return ContributionHistory(weeks=weeks, total=total)
