import asyncio
from dataclasses import asdict
from dataclasses import dataclass
from pathlib import Path
from string import Template

from portfolio.models import LoadOutcome
from portfolio.models import PortfolioLoad
from portfolio.rendering.formatting import esc
from portfolio.rendering.formatting import strip_scheme
from portfolio.rendering.sections import DEFAULT_HEADLINE
from portfolio.rendering.sections import placeholder
from portfolio.rendering.sections import render_activity
from portfolio.rendering.sections import render_contribution_graph
from portfolio.rendering.sections import render_org_summary
from portfolio.rendering.sections import render_repo_grid
from portfolio.rendering.sections import render_resume
from portfolio.rendering.sections import render_user_metrics


VIEW_NAMES = ("profile", "projects", "activity", "resume", "contact")
DEFAULT_VIEW = "profile"


def resolve_view(path: str) -> str | None:
    """Return the named view a browsing path selects.

    `/` and `/index.html` select the default view; a path under one of the
    named prefixes selects that view; anything else returns None.
    """

    if path in ("", "/", "/index.html"):
        return DEFAULT_VIEW
    first_segment = path.lstrip("/").split("/", 1)[0]
    if first_segment in VIEW_NAMES:
        return first_segment
    return None


@dataclass
class PortfolioView:
    """Rendering surface for one page.

    Plain fields hold text and are escaped when the document is rendered;
    fields ending in `_html` hold fragments produced by the section renderers.
    """

    active_view: str = DEFAULT_VIEW
    loaded: str = "false"
    status_text: str = ""
    status_tone: str = "default"
    user_input: str = ""
    org_input: str = ""

    display_name_html: str = ""
    headline: str = DEFAULT_HEADLINE
    bio: str = ""
    github_profile_href: str = ""
    github_profile_text: str = ""
    contact_github_href: str = ""
    contact_github_text: str = ""
    org_profile_href: str = ""
    org_profile_text: str = ""
    contact_org_href: str = ""
    contact_org_text: str = ""

    profile_metrics_html: str = ""
    org_summary_html: str = ""
    user_repos_title: str = ""
    org_repos_title: str = ""
    user_repos_grid_html: str = ""
    org_repos_grid_html: str = ""
    activity_title: str = ""
    activity_list_html: str = ""
    contribution_graph_html: str = ""

    resume_html: str = ""
    resume_status_text: str = ""
    resume_status_tone: str = "default"

    previous_load: str = ""

    def set_status(self, message: str, tone: str = "default") -> None:
        self.status_text = message
        self.status_tone = tone

    def set_section_labels(self, user: str, org: str) -> None:
        self.user_repos_title = f"Personal Repositories (@{user})"
        self.org_repos_title = f"Organization Repositories (@{org})"
        self.activity_title = f"Personal Public Activity (@{user})"


def _display_name(name: str) -> str:
    return f'{esc(name)} <span class="cursor">_</span>'


def apply_org_links(view: PortfolioView, org: str, url: str) -> None:
    view.org_profile_href = url
    view.org_profile_text = f"@{org}"
    view.contact_org_href = url
    view.contact_org_text = strip_scheme(url)


def apply_user_links(view: PortfolioView, user: str, url: str) -> None:
    view.github_profile_href = url
    view.github_profile_text = f"GitHub @{user}"
    view.contact_github_href = url
    view.contact_github_text = strip_scheme(url)


def apply_portfolio(
    view: PortfolioView,
    load: PortfolioLoad,
    api_base_url: str,
    web_base_url: str,
) -> None:
    """Write every section of `view` from its own outcome in `load`."""

    web_base = web_base_url.rstrip("/")
    requested = load.requested

    if load.org_profile.ok:
        apply_org_links(view, load.org, load.org_profile.value.html_url)
    else:
        apply_org_links(view, load.org, f"{web_base}/{load.org}")
    view.org_summary_html = render_org_summary(load.org_profile, requested.org)

    view.org_repos_grid_html = render_repo_grid(
        load.org_repos,
        empty_message="No public organization repositories found.",
        failure_message="Organization repositories unavailable right now.",
    )

    if load.user_profile.ok:
        user = load.user_profile.value
        view.display_name_html = _display_name(user.name or user.login)
        view.headline = user.bio or DEFAULT_HEADLINE
        view.bio = (
            f"Tracking public work from @{user.login}, plus open-source builds "
            f"with @{load.org}."
        )
        apply_user_links(view, user.login, user.html_url)
    else:
        view.display_name_html = _display_name(requested.user)
        view.headline = DEFAULT_HEADLINE
        view.bio = (
            f"Unable to load @{requested.user} profile right now. "
            "Organization feed still available below."
        )
        apply_user_links(view, requested.user, f"{web_base}/{requested.user}")
    view.profile_metrics_html = render_user_metrics(load.user_profile)
    view.contribution_graph_html = render_contribution_graph(load.contributions, load.user)

    view.user_repos_grid_html = render_repo_grid(
        load.user_repos,
        empty_message="No public personal repositories found.",
        failure_message="Personal repositories unavailable right now.",
    )
    view.activity_list_html = render_activity(load.events, api_base_url, web_base_url)

    view.set_section_labels(load.user, load.org)
    view.user_input = load.user
    view.org_input = load.org
    view.set_status(load.status.message, load.status.tone)
    view.loaded = "true"


def apply_resume(view: PortfolioView, outcome: LoadOutcome[str]) -> None:
    view.resume_html = render_resume(outcome)
    if outcome.ok:
        view.resume_status_text = "Resume loaded."
        view.resume_status_tone = "default"
    else:
        view.resume_status_text = f"Failed to load resume: {outcome.error}"
        view.resume_status_tone = "error"


def clear_sections(view: PortfolioView, message: str) -> None:
    """Replace every GitHub-backed section with one placeholder message."""

    fragment = placeholder(message)
    view.profile_metrics_html = fragment
    view.org_summary_html = fragment
    view.user_repos_grid_html = fragment
    view.org_repos_grid_html = fragment
    view.activity_list_html = fragment
    view.contribution_graph_html = (
        f'<div class="contrib-graph unavailable" role="img" aria-label="{esc(message)}">'
        f"{fragment}</div>"
    )


async def read_template(template_path: Path) -> str:
    return await asyncio.to_thread(template_path.read_text, encoding="utf-8")


def render_document(view: PortfolioView, template_text: str) -> str:
    """Substitute the view slots into the root HTML document."""

    template = Template(template_text)
    slots = {
        name: value if name.endswith("_html") else esc(value)
        for name, value in asdict(view).items()
    }
    return template.safe_substitute(slots)
