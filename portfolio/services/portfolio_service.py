import asyncio
import logging
from collections.abc import Awaitable
from datetime import UTC
from datetime import datetime

import httpx

from portfolio.clients.github_client import GitHubProxy
from portfolio.clients.github_client import fetch_contribution_history
from portfolio.clients.github_client import fetch_org
from portfolio.clients.github_client import fetch_org_repos
from portfolio.clients.github_client import fetch_user
from portfolio.clients.github_client import fetch_user_events
from portfolio.clients.github_client import fetch_user_repos
from portfolio.errors import PortfolioLoadError
from portfolio.models import ContributionHistory
from portfolio.models import GitHubEvent
from portfolio.models import GitHubRepo
from portfolio.models import GitHubUser
from portfolio.models import LoadOutcome
from portfolio.models import LoadStatus
from portfolio.models import PortfolioLoad
from portfolio.models import Subject


logger = logging.getLogger(__name__)

MAX_REPOS = 12
MAX_EVENTS = 8

_OLDEST = datetime.min.replace(tzinfo=UTC)


def normalize_repos(repos: list[GitHubRepo]) -> list[GitHubRepo]:
    """Drop forks and keep the most recently pushed repositories."""

    owned = [repo for repo in repos if not repo.fork]
    owned.sort(key=lambda repo: repo.pushed_at or _OLDEST, reverse=True)
    return owned[:MAX_REPOS]


def recent_events(events: list[GitHubEvent]) -> list[GitHubEvent]:
    ordered = sorted(events, key=lambda event: event.created_at, reverse=True)
    return ordered[:MAX_EVENTS]


async def settle(operation: Awaitable) -> LoadOutcome:
    """Await one read and capture its result or failure as a value."""

    try:
        return LoadOutcome.success(await operation)
    except PortfolioLoadError as exc:
        return LoadOutcome.failure(exc.message, kind=exc.kind)


async def _load_user_and_contributions(
    proxy: GitHubProxy,
    client: httpx.AsyncClient,
    contributions_url_template: str,
    user: str,
) -> tuple[LoadOutcome[GitHubUser], LoadOutcome[ContributionHistory]]:
    user_outcome = await settle(fetch_user(proxy, user))
    if not user_outcome.ok:
        return user_outcome, LoadOutcome.failure(
            "GitHub contribution chart unavailable.", kind="skipped"
        )

    # The contributions host is keyed by the login GitHub resolved, not the input.
    resolved_login = user_outcome.value.login
    contributions = await settle(
        fetch_contribution_history(client, contributions_url_template, resolved_login)
    )
    return user_outcome, contributions


async def load_portfolio(
    subject: Subject,
    proxy: GitHubProxy,
    client: httpx.AsyncClient,
    contributions_url_template: str,
) -> PortfolioLoad:
    """Run the fan-out for one subject and wait for every read to settle."""

    logger.info("Loading portfolio for @%s and @%s", subject.user, subject.org)

    (
        org_profile,
        org_repos,
        (user_profile, contributions),
        user_repos,
        events,
    ) = await asyncio.gather(
        settle(fetch_org(proxy, subject.org)),
        settle(fetch_org_repos(proxy, subject.org)),
        _load_user_and_contributions(
            proxy, client, contributions_url_template, subject.user
        ),
        settle(fetch_user_repos(proxy, subject.user)),
        settle(fetch_user_events(proxy, subject.user)),
    )

    resolved_org = org_profile.value.login if org_profile.ok else subject.org
    resolved_user = user_profile.value.login if user_profile.ok else subject.user

    if org_repos.ok:
        org_repos = LoadOutcome.success(normalize_repos(org_repos.value))
    if user_repos.ok:
        user_repos = LoadOutcome.success(normalize_repos(user_repos.value))
    if events.ok:
        events = LoadOutcome.success(recent_events(events.value))

    warnings = collect_warnings(
        org_profile=org_profile,
        org_repos=org_repos,
        user_profile=user_profile,
        user_repos=user_repos,
        events=events,
        contributions=contributions,
    )
    status = summarize_status(
        resolved_user,
        resolved_org,
        warnings,
        both_profiles_failed=not user_profile.ok and not org_profile.ok,
        rate_limited=any(
            outcome.kind == "rate_limited"
            for outcome in (org_profile, org_repos, user_profile, user_repos, events)
        ),
    )
    if warnings:
        logger.warning("Portfolio loaded with %d warning(s): %s", len(warnings), warnings)

    return PortfolioLoad(
        requested=subject,
        user=resolved_user,
        org=resolved_org,
        org_profile=org_profile,
        org_repos=org_repos,
        user_profile=user_profile,
        user_repos=user_repos,
        events=events,
        contributions=contributions,
        status=status,
        warnings=warnings,
    )


def collect_warnings(
    *,
    org_profile: LoadOutcome,
    org_repos: LoadOutcome,
    user_profile: LoadOutcome,
    user_repos: LoadOutcome,
    events: LoadOutcome,
    contributions: LoadOutcome,
) -> list[str]:
    labelled = [
        ("Org error", org_profile),
        ("Org repos", org_repos),
        ("User error", user_profile),
        ("User repos", user_repos),
        ("Activity", events),
    ]
    warnings = [f"{label}: {outcome.error}" for label, outcome in labelled if not outcome.ok]
    # A skipped chart is already explained by the user profile warning.
    if not contributions.ok and contributions.kind != "skipped":
        warnings.append(f"Contributions: {contributions.error}")
    return warnings


def summarize_status(
    user: str,
    org: str,
    warnings: list[str],
    both_profiles_failed: bool = False,
    rate_limited: bool = False,
) -> LoadStatus:
    """Derive the single status line for a finished load."""

    if not warnings:
        return LoadStatus(message=f"Loaded @{user} and @{org}.")

    if both_profiles_failed:
        prefix, tone = "Failed to load GitHub profiles.", "error"
    else:
        prefix, tone = "Loaded with warnings.", "warning"
    return LoadStatus(
        message=f"{prefix} {' '.join(warnings)}",
        tone=tone,
        rate_limited=rate_limited,
    )
