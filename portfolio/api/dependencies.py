import httpx
from fastapi import Depends
from fastapi import Request

from portfolio.clients.github_client import GitHubProxy
from portfolio.services.session_service import SequencerRegistry
from portfolio.settings import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the application-wide client opened by the lifespan handler."""

    return request.app.state.http_client


def get_github_proxy(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> GitHubProxy:
    return GitHubProxy(
        client,
        api_base_url=settings.github_api_base_url,
        token=settings.github_token,
        user_agent=settings.user_agent,
    )


def get_load_sequencers(request: Request) -> SequencerRegistry:
    return request.app.state.load_sequencers
