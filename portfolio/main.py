import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from portfolio.api.routes import github_proxy
from portfolio.api.routes import pages
from portfolio.api.routes import profiles
from portfolio.core.middleware import ProxyRateLimitMiddleware
from portfolio.core.observability import configure_logging
from portfolio.core.observability import init_sentry
from portfolio.services.session_service import SequencerRegistry
from portfolio.settings import Settings


logger = logging.getLogger(__name__)


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build the portfolio application from settings."""

    settings = app_settings or Settings()
    configure_logging(settings)
    init_sentry(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with httpx.AsyncClient(
            timeout=settings.request_timeout_seconds,
            follow_redirects=True,
        ) as client:
            app.state.http_client = client
            logger.info("Portfolio ready; GitHub API at %s", settings.github_api_base_url)
            yield

    app = FastAPI(title="GitHub Portfolio", lifespan=lifespan)
    app.state.settings = settings
    app.state.load_sequencers = SequencerRegistry()
    app.add_middleware(
        ProxyRateLimitMiddleware,
        requests_per_window=settings.rate_limit_per_minute,
        window_seconds=settings.rate_limit_window_seconds,
    )

    app.include_router(profiles.router)
    app.include_router(github_proxy.router)
    # The page router ends in a catch-all path and must be registered last.
    app.include_router(pages.router)
    return app


app = create_app()
