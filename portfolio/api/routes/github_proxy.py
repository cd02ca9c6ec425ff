import logging

import httpx
from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query
from fastapi.responses import JSONResponse
from starlette.responses import Response

from portfolio.api.dependencies import get_github_proxy
from portfolio.clients.github_client import GitHubProxy
from portfolio.core.middleware import PROXY_PATH
from portfolio.core.security import is_valid_endpoint


logger = logging.getLogger(__name__)

router = APIRouter()

NO_STORE = {"cache-control": "no-store"}
DEFAULT_CONTENT_TYPE = "application/json; charset=utf-8"


@router.get(PROXY_PATH)
async def proxy_github(
    endpoint: str | None = Query(default=None),
    proxy: GitHubProxy = Depends(get_github_proxy),
) -> Response:
    """Forward a GET to the GitHub REST API and relay its answer verbatim."""

    if not is_valid_endpoint(endpoint):
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid GitHub endpoint."},
            headers=NO_STORE,
        )

    try:
        upstream = await proxy.get(endpoint)
    except httpx.HTTPError as exc:
        logger.warning("Proxy request for %s failed: %s", endpoint, exc)
        return JSONResponse(
            status_code=502,
            content={"message": "GitHub API request failed."},
            headers=NO_STORE,
        )

    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type=upstream.headers.get("content-type", DEFAULT_CONTENT_TYPE),
        headers=NO_STORE,
    )
