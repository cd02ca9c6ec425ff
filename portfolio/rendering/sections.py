"""Pure projections from load outcomes to HTML fragments.

Every function here returns markup for exactly one section of the page and
escapes all upstream text. Failed outcomes produce a named placeholder so a
section never keeps content from a previous load.
"""

from portfolio.models import ContributionHistory
from portfolio.models import GitHubEvent
from portfolio.models import GitHubOrg
from portfolio.models import GitHubRepo
from portfolio.models import GitHubUser
from portfolio.models import LoadOutcome
from portfolio.rendering.formatting import esc
from portfolio.rendering.formatting import format_date
from portfolio.rendering.formatting import to_repo_url
from portfolio.rendering.markdown import render_markdown
from portfolio.services.contribution_service import build_contribution_grid
from portfolio.services.contribution_service import pluralize_contributions


# Descriptions used when GitHub has none for these organizations (keys are lowercase).
ORGANIZATION_DESCRIPTION_OVERRIDES: dict[str, str] = {
    "bytebasherslabs": (
        "Open-source collective building developer tools and small experiments "
        "in the open."
    ),
}
NO_ORG_DESCRIPTION = "No organization description provided."
NO_REPO_DESCRIPTION = "No description provided."
DEFAULT_HEADLINE = "Builder, debugger, and open-source collaborator."


def placeholder(message: str) -> str:
    return f'<p class="placeholder">{esc(message)}</p>'


def metric_card(label: str, value: object) -> str:
    return (
        '<div class="metric">'
        f'<span class="label">{esc(label)}</span>'
        f'<span class="value">{esc(value)}</span>'
        "</div>"
    )


def external_link(href: str, text: str) -> str:
    return f'<a href="{esc(href)}" target="_blank" rel="noreferrer">{esc(text)}</a>'


def render_user_metrics(outcome: LoadOutcome[GitHubUser]) -> str:
    if not outcome.ok:
        return placeholder("Personal profile metrics unavailable right now.")

    user = outcome.value
    return "".join(
        metric_card(label, value)
        for label, value in (
            ("Public Repos", user.public_repos),
            ("Public Gists", user.public_gists),
            ("Followers", user.followers),
            ("Following", user.following),
        )
    )


def org_description(org: GitHubOrg) -> str:
    """GitHub description, then the named override for this handle, then a stock line."""

    if org.description:
        return org.description
    return ORGANIZATION_DESCRIPTION_OVERRIDES.get(org.login.lower(), NO_ORG_DESCRIPTION)


def render_org_summary(outcome: LoadOutcome[GitHubOrg], requested_org: str) -> str:
    if not outcome.ok:
        return placeholder(f"Organization summary unavailable for @{requested_org}.")

    org = outcome.value
    cards = "".join(
        (
            metric_card("Org Name", org.name or org.login),
            metric_card("Public Repos", org.public_repos),
            metric_card("Followers", org.followers),
        )
    )
    return (
        f'<p class="org-heading">Organization Snapshot (@{esc(org.login)})</p>'
        f'<div class="org-summary-grid">{cards}</div>'
        f'<p class="org-description">{esc(org_description(org))}</p>'
    )


def render_repo_card(repo: GitHubRepo) -> str:
    meta = "".join(
        (
            f"<span><strong>{esc(repo.language or 'n/a')}</strong></span>",
            f"<span>Stars: {repo.stargazers_count}</span>",
            f"<span>Forks: {repo.forks_count}</span>",
            f"<span>Updated: {esc(format_date(repo.pushed_at))}</span>",
        )
    )
    return (
        '<article class="repo-card">'
        f"<h3>{external_link(repo.html_url, repo.name)}</h3>"
        f"<p>{esc(repo.description or NO_REPO_DESCRIPTION)}</p>"
        f'<div class="repo-meta">{meta}</div>'
        "</article>"
    )


def render_repo_grid(
    outcome: LoadOutcome[list[GitHubRepo]],
    empty_message: str,
    failure_message: str,
) -> str:
    if not outcome.ok:
        return placeholder(failure_message)
    if not outcome.value:
        return placeholder(empty_message)
    return "".join(render_repo_card(repo) for repo in outcome.value)


def event_label(event: GitHubEvent) -> str:
    repo_name = event.repo.name
    payload = event.payload
    action = payload.action if payload and payload.action else "Updated"

    if event.type == "PushEvent":
        return f"Pushed commits to {repo_name}"
    if event.type == "PullRequestEvent":
        return f"{action} pull request in {repo_name}"
    if event.type == "IssuesEvent":
        return f"{action} issue in {repo_name}"
    if event.type == "IssueCommentEvent":
        return f"Commented on an issue in {repo_name}"
    if event.type == "PullRequestReviewEvent":
        return f"Reviewed a pull request in {repo_name}"
    if event.type == "CreateEvent":
        ref_type = payload.ref_type if payload and payload.ref_type else "item"
        return f"Created {ref_type} in {repo_name}"
    return f"{event.type.removesuffix('Event')} in {repo_name}"


def render_activity(
    outcome: LoadOutcome[list[GitHubEvent]],
    api_base_url: str,
    web_base_url: str,
) -> str:
    if not outcome.ok:
        return placeholder("Personal activity feed unavailable right now.")
    if not outcome.value:
        return placeholder("No recent public activity yet.")

    items = []
    for event in outcome.value:
        href = to_repo_url(event.repo.url, api_base_url, web_base_url)
        items.append(
            '<article class="activity-item">'
            f"{external_link(href, event_label(event))}<br>"
            f'<time datetime="{esc(event.created_at.isoformat())}">'
            f"{esc(format_date(event.created_at))}</time>"
            "</article>"
        )
    return "".join(items)


def render_contribution_graph(
    outcome: LoadOutcome[ContributionHistory], handle: str
) -> str:
    if not outcome.ok:
        message = "GitHub contribution chart unavailable."
        return (
            f'<div class="contrib-graph unavailable" role="img" aria-label="{esc(message)}">'
            f"{placeholder(message)}</div>"
        )

    grid = build_contribution_grid(outcome.value)
    summary = f"{pluralize_contributions(grid.total)} in the last year"

    months = "".join(
        f'<span class="contrib-month" style="grid-column: {label.week_index + 1}">'
        f"{esc(label.label)}</span>"
        for label in grid.month_labels
    )

    weeks = []
    for week in grid.weeks:
        cells = []
        for cell in week:
            if cell.is_empty:
                cells.append('<span class="contrib-cell empty"></span>')
                continue
            tooltip = f"{pluralize_contributions(cell.count)} on {format_date(cell.day)}"
            cells.append(
                f'<span class="contrib-cell level-{cell.level}" '
                f'data-date="{cell.day.isoformat()}" title="{esc(tooltip)}"></span>'
            )
        weeks.append(f'<div class="contrib-week">{"".join(cells)}</div>')

    aria_label = f"GitHub contributions for {handle}: {summary}"
    return (
        f'<div class="contrib-graph" role="img" aria-label="{esc(aria_label)}">'
        f'<p class="contrib-total">{esc(summary)}</p>'
        f'<div class="contrib-months">{months}</div>'
        f'<div class="contrib-grid">{"".join(weeks)}</div>'
        "</div>"
    )


def render_resume(outcome: LoadOutcome[str]) -> str:
    if not outcome.ok:
        return placeholder("Resume unavailable right now.")
    return render_markdown(outcome.value)
