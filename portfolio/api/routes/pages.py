import asyncio
from pathlib import Path

import httpx
from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query
from fastapi import Request
from fastapi.responses import FileResponse
from fastapi.responses import HTMLResponse

from portfolio.api.dependencies import get_github_proxy
from portfolio.api.dependencies import get_http_client
from portfolio.api.dependencies import get_load_sequencers
from portfolio.api.dependencies import get_settings
from portfolio.clients.github_client import GitHubProxy
from portfolio.core.storage import CookieJar
from portfolio.core.storage import PreferenceStore
from portfolio.rendering.view import PortfolioView
from portfolio.rendering.view import apply_resume
from portfolio.rendering.view import clear_sections
from portfolio.rendering.view import read_template
from portfolio.rendering.view import render_document
from portfolio.rendering.view import resolve_view
from portfolio.services.resume_service import load_resume
from portfolio.services.resume_service import resume_path
from portfolio.services.session_service import PortfolioSession
from portfolio.services.session_service import SequencerRegistry
from portfolio.settings import Settings


router = APIRouter()

INDEX_TEMPLATE = "index.html"


def _serve_file(
    path: Path, media_type: str, headers: dict[str, str] | None = None
) -> FileResponse:
    if not path.is_file():
        raise HTTPException(status_code=404, detail="Not Found")
    return FileResponse(path, media_type=media_type, headers=headers)


@router.get("/styles.css")
def get_stylesheet(settings: Settings = Depends(get_settings)) -> FileResponse:
    return _serve_file(
        Path(settings.static_dir) / "styles.css", "text/css; charset=utf-8"
    )


@router.get("/main.js")
def get_client_script(settings: Settings = Depends(get_settings)) -> FileResponse:
    """Serve the built bundle when present, otherwise the source script."""

    built = Path(settings.dist_dir) / "main.js"
    source = built if built.is_file() else Path(settings.static_dir) / "main.js"
    return _serve_file(
        source,
        "application/javascript; charset=utf-8",
        headers={"cache-control": "no-store"},
    )


@router.get("/resume.md")
def get_resume_document(settings: Settings = Depends(get_settings)) -> FileResponse:
    return _serve_file(resume_path(settings.content_dir), "text/markdown; charset=utf-8")


def _previous_load(store: PreferenceStore) -> str:
    snapshot = store.read_snapshot()
    if not snapshot:
        return ""
    user, org = snapshot.get("user"), snapshot.get("org")
    if not isinstance(user, str) or not isinstance(org, str):
        return ""
    return f"Previously loaded @{user} and @{org}."


@router.get("/{full_path:path}", response_class=HTMLResponse)
async def get_page(
    request: Request,
    full_path: str,
    user: str | None = Query(default=None),
    org: str | None = Query(default=None),
    submitted: bool = Query(default=False),
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
    proxy: GitHubProxy = Depends(get_github_proxy),
    sequencers: SequencerRegistry = Depends(get_load_sequencers),
) -> HTMLResponse:
    """Render the root document with the view selected by the path."""

    view_name = resolve_view(f"/{full_path}")
    template_path = Path(settings.static_dir) / INDEX_TEMPLATE
    if view_name is None or not template_path.is_file():
        raise HTTPException(status_code=404, detail="Not Found")

    cookies = CookieJar(request.cookies)
    store = PreferenceStore(cookies)
    view = PortfolioView(active_view=view_name, previous_load=_previous_load(store))
    sequencer = sequencers.for_client(store.client_id())
    session = PortfolioSession(view, proxy, client, settings, store, sequencer)

    if submitted:
        portfolio_load = session.submit(user, org)
    else:
        portfolio_load = session.load_initial(user, org)

    load, resume, template_text = await asyncio.gather(
        portfolio_load,
        load_resume(client, settings.content_dir, settings.resume_url),
        read_template(template_path),
    )
    if load is None and session.superseded:
        view.set_status("A newer load from this browser replaced this one.", "default")
        clear_sections(view, "Superseded by a newer load.")
    elif load is None:
        view.user_input = user or ""
        view.org_input = org or ""
        clear_sections(view, "Enter both a GitHub user and organization to load this section.")
    apply_resume(view, resume)

    response = HTMLResponse(render_document(view, template_text))
    cookies.apply(response)
    return response
