import httpx
from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query

from portfolio.api.dependencies import get_github_proxy
from portfolio.api.dependencies import get_http_client
from portfolio.api.dependencies import get_settings
from portfolio.api.schemas.portfolio import ActivityItem
from portfolio.api.schemas.portfolio import ContributionDayItem
from portfolio.api.schemas.portfolio import ContributionsItem
from portfolio.api.schemas.portfolio import MonthLabelItem
from portfolio.api.schemas.portfolio import OrgProfileItem
from portfolio.api.schemas.portfolio import PortfolioResponse
from portfolio.api.schemas.portfolio import RepoItem
from portfolio.api.schemas.portfolio import StatusItem
from portfolio.api.schemas.portfolio import UserProfileItem
from portfolio.clients.github_client import GitHubProxy
from portfolio.models import GitHubRepo
from portfolio.models import PortfolioLoad
from portfolio.rendering.formatting import to_repo_url
from portfolio.rendering.sections import event_label
from portfolio.rendering.sections import org_description
from portfolio.services.contribution_service import build_contribution_grid
from portfolio.services.portfolio_service import load_portfolio
from portfolio.services.subject_service import resolve_subject
from portfolio.settings import Settings


router = APIRouter()


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Return liveness probe response for health checks."""

    return {"status": "ok"}


def _repo_items(repos: list[GitHubRepo]) -> list[RepoItem]:
    return [
        RepoItem(
            id=repo.id,
            name=repo.name,
            url=repo.html_url,
            description=repo.description,
            language=repo.language,
            stars=repo.stargazers_count,
            forks=repo.forks_count,
            pushed_at=repo.pushed_at,
        )
        for repo in repos
    ]


def build_portfolio_response(load: PortfolioLoad, settings: Settings) -> PortfolioResponse:
    user_profile = None
    if load.user_profile.ok:
        user = load.user_profile.value
        user_profile = UserProfileItem(
            login=user.login,
            name=user.name or user.login,
            bio=user.bio,
            url=user.html_url,
            public_repos=user.public_repos,
            public_gists=user.public_gists,
            followers=user.followers,
            following=user.following,
        )

    org_profile = None
    if load.org_profile.ok:
        org = load.org_profile.value
        org_profile = OrgProfileItem(
            login=org.login,
            name=org.name or org.login,
            description=org_description(org),
            url=org.html_url,
            public_repos=org.public_repos,
            followers=org.followers,
        )

    activity = None
    if load.events.ok:
        activity = [
            ActivityItem(
                kind=event.type,
                label=event_label(event),
                url=to_repo_url(
                    event.repo.url,
                    settings.github_api_base_url,
                    settings.github_web_base_url,
                ),
                occurred_at=event.created_at,
            )
            for event in load.events.value
        ]

    contributions = None
    if load.contributions.ok:
        grid = build_contribution_grid(load.contributions.value)
        contributions = ContributionsItem(
            total=grid.total,
            weeks=[
                [
                    ContributionDayItem(day=cell.day, count=cell.count, level=cell.level)
                    for cell in week
                ]
                for week in grid.weeks
            ],
            month_labels=[
                MonthLabelItem(week_index=label.week_index, label=label.label)
                for label in grid.month_labels
            ],
        )

    return PortfolioResponse(
        user=load.user,
        org=load.org,
        status=StatusItem(
            message=load.status.message,
            tone=load.status.tone,
            rate_limited=load.status.rate_limited,
        ),
        warnings=load.warnings,
        user_profile=user_profile,
        org_profile=org_profile,
        user_repos=_repo_items(load.user_repos.value) if load.user_repos.ok else None,
        org_repos=_repo_items(load.org_repos.value) if load.org_repos.ok else None,
        activity=activity,
        contributions=contributions,
    )


@router.get("/api/portfolio", response_model=PortfolioResponse)
async def get_portfolio(
    user: str | None = Query(default=None),
    org: str | None = Query(default=None),
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
    proxy: GitHubProxy = Depends(get_github_proxy),
) -> PortfolioResponse:
    """Run one fan-out and return every section as JSON."""

    subject = resolve_subject(
        user, org, None, None, settings.default_user, settings.default_org
    )
    load = await load_portfolio(
        subject, proxy, client, settings.contributions_url_template
    )
    return build_portfolio_response(load, settings)
