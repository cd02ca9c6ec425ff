from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from portfolio.api.dependencies import get_http_client
from portfolio.clients.github_client import GitHubProxy
from portfolio.main import create_app
from portfolio.settings import Settings


ROOT = Path(__file__).resolve().parent.parent
API_HOST = "api.github.com"
CONTRIB_HOST = "github-contributions-api.deno.dev"
CONTRIB_TEMPLATE = f"https://{CONTRIB_HOST}/{{handle}}.json"


def user_payload(login: str = "Ada", **overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "login": login,
        "name": "Ada Lovelace",
        "bio": "Writes programs for engines.",
        "html_url": f"https://github.com/{login}",
        "public_repos": 12,
        "public_gists": 3,
        "followers": 42,
        "following": 7,
    }
    payload.update(overrides)
    return payload


def org_payload(login: str = "Babbage", **overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "login": login,
        "name": "Babbage Engines",
        "description": "Difference and analytical engines.",
        "html_url": f"https://github.com/{login}",
        "public_repos": 5,
        "followers": 100,
    }
    payload.update(overrides)
    return payload


def repo_payload(
    repo_id: int, name: str, pushed_at: str | None, fork: bool = False, **overrides: object
) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": repo_id,
        "name": name,
        "html_url": f"https://github.com/Ada/{name}",
        "description": f"{name} description",
        "language": "Python",
        "stargazers_count": repo_id,
        "forks_count": 1,
        "pushed_at": pushed_at,
        "fork": fork,
    }
    payload.update(overrides)
    return payload


def event_payload(
    event_type: str,
    created_at: str,
    repo: str = "Ada/engine",
    payload: dict[str, object] | None = None,
) -> dict[str, object]:
    return {
        "id": created_at,
        "type": event_type,
        "created_at": created_at,
        "repo": {"name": repo, "url": f"https://api.github.com/repos/{repo}"},
        "payload": payload or {},
    }


def contributions_payload(weeks: int = 2, total: int = 9) -> dict[str, object]:
    days = []
    for week in range(weeks):
        days.append(
            [
                {
                    "date": f"2025-01-{week * 7 + day + 1:02d}",
                    "contributionCount": day,
                    "contributionLevel": "FIRST_QUARTILE" if day else "NONE",
                }
                for day in range(7)
            ]
        )
    return {"contributions": days, "totalContributions": total}


def default_routes(user: str = "Ada", org: str = "Babbage") -> dict[str, object]:
    return {
        f"{API_HOST}/orgs/{org}": httpx.Response(200, json=org_payload(org)),
        f"{API_HOST}/orgs/{org}/repos": httpx.Response(
            200, json=[repo_payload(1, "analytical", "2025-01-02T00:00:00Z")]
        ),
        f"{API_HOST}/users/{user}": httpx.Response(200, json=user_payload(user)),
        f"{API_HOST}/users/{user}/repos": httpx.Response(
            200,
            json=[
                repo_payload(2, "notes", "2025-02-01T00:00:00Z"),
                repo_payload(3, "forked", "2025-03-01T00:00:00Z", fork=True),
            ],
        ),
        f"{API_HOST}/users/{user}/events/public": httpx.Response(
            200, json=[event_payload("PushEvent", "2025-02-03T10:00:00Z")]
        ),
        f"{CONTRIB_HOST}/{user}.json": httpx.Response(200, json=contributions_payload()),
    }


class FakeUpstream:
    """MockTransport handler routing by host and path.

    A route value may be an `httpx.Response` or an exception to raise.
    Unknown routes answer 404.
    """

    def __init__(self, routes: dict[str, object] | None = None) -> None:
        self.routes = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.routes.get(f"{request.url.host}{request.url.path}")
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, httpx.Response):
            return httpx.Response(
                outcome.status_code,
                content=outcome.content,
                headers=outcome.headers,
            )
        return httpx.Response(404, json={"message": "Not Found"})

    def paths(self) -> list[str]:
        return [f"{request.url.host}{request.url.path}" for request in self.requests]


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream(default_routes())


@pytest.fixture
def settings() -> Settings:
    return Settings(
        github_token=None,
        contributions_url_template=CONTRIB_TEMPLATE,
        static_dir=str(ROOT / "static"),
        dist_dir=str(ROOT / "dist-missing"),
        content_dir=str(ROOT / "content"),
        resume_url=None,
        sentry_dsn=None,
    )


@pytest.fixture
def make_http_client() -> Callable[[FakeUpstream], httpx.AsyncClient]:
    def factory(handler: FakeUpstream) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def proxy_factory(settings: Settings) -> Callable[[httpx.AsyncClient], GitHubProxy]:
    def factory(client: httpx.AsyncClient, token: str | None = None) -> GitHubProxy:
        return GitHubProxy(
            client,
            api_base_url=settings.github_api_base_url,
            token=token,
            user_agent=settings.user_agent,
        )

    return factory


@pytest.fixture
def app_client(settings: Settings, upstream: FakeUpstream, make_http_client) -> TestClient:
    app = create_app(settings)
    http_client = make_http_client(upstream)
    app.dependency_overrides[get_http_client] = lambda: http_client

    yield TestClient(app)

    app.dependency_overrides.clear()
