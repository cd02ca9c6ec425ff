import asyncio
import logging
from pathlib import Path

import httpx

from portfolio.clients.github_client import fetch_text
from portfolio.models import LoadOutcome
from portfolio.services.portfolio_service import settle


logger = logging.getLogger(__name__)

RESUME_FILENAME = "resume.md"


def resume_path(content_dir: str) -> Path:
    return Path(content_dir) / RESUME_FILENAME


async def load_resume(
    client: httpx.AsyncClient,
    content_dir: str,
    resume_url: str | None = None,
) -> LoadOutcome[str]:
    """Read the markdown resume from `resume_url` when set, else from disk."""

    if resume_url:
        return await settle(fetch_text(client, resume_url, "Resume document"))

    path = resume_path(content_dir)
    try:
        source = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except OSError as exc:
        logger.warning("Resume document %s could not be read: %s", path, exc)
        return LoadOutcome.failure("Resume document was not found.", kind="not_found")
    return LoadOutcome.success(source)
