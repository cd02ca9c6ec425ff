from datetime import date

import pytest

from conftest import event_payload
from conftest import org_payload
from conftest import repo_payload
from conftest import user_payload
from portfolio.models import ContributionDay
from portfolio.models import ContributionHistory
from portfolio.models import GitHubEvent
from portfolio.models import GitHubOrg
from portfolio.models import GitHubRepo
from portfolio.models import GitHubUser
from portfolio.models import LoadOutcome
from portfolio.rendering.formatting import format_date
from portfolio.rendering.formatting import to_repo_url
from portfolio.rendering.sections import event_label
from portfolio.rendering.sections import org_description
from portfolio.rendering.sections import render_activity
from portfolio.rendering.sections import render_contribution_graph
from portfolio.rendering.sections import render_org_summary
from portfolio.rendering.sections import render_repo_grid
from portfolio.rendering.sections import render_user_metrics


API = "https://api.github.com"
WEB = "https://github.com"


def _event(event_type: str, payload: dict | None = None) -> GitHubEvent:
    return GitHubEvent.model_validate(
        event_payload(event_type, "2025-02-03T10:00:00Z", repo="Ada/engine", payload=payload)
    )


@pytest.mark.parametrize(
    ("event_type", "payload", "expected"),
    [
        ("PushEvent", None, "Pushed commits to Ada/engine"),
        ("PullRequestEvent", {"action": "opened"}, "opened pull request in Ada/engine"),
        ("PullRequestEvent", None, "Updated pull request in Ada/engine"),
        ("IssuesEvent", {"action": "closed"}, "closed issue in Ada/engine"),
        ("IssueCommentEvent", None, "Commented on an issue in Ada/engine"),
        ("PullRequestReviewEvent", None, "Reviewed a pull request in Ada/engine"),
        ("CreateEvent", {"ref_type": "branch"}, "Created branch in Ada/engine"),
        ("CreateEvent", None, "Created item in Ada/engine"),
        ("FooBarEvent", None, "FooBar in Ada/engine"),
        ("WatchEvent", None, "Watch in Ada/engine"),
    ],
)
def test_event_label(event_type: str, payload, expected: str) -> None:
    assert event_label(_event(event_type, payload)) == expected


def test_to_repo_url_swaps_api_host_for_web_host() -> None:
    assert to_repo_url(f"{API}/repos/Ada/engine", API, WEB) == f"{WEB}/Ada/engine"


def test_format_date() -> None:
    assert format_date(date(2025, 3, 4)) == "Mar 4, 2025"
    assert format_date(None) == "n/a"


def test_render_activity_links_to_web_url() -> None:
    html = render_activity(LoadOutcome.success([_event("PushEvent")]), API, WEB)

    assert f'href="{WEB}/Ada/engine"' in html
    assert "Pushed commits to Ada/engine" in html
    assert 'datetime="2025-02-03T10:00:00+00:00"' in html


def test_render_activity_placeholders() -> None:
    assert "No recent public activity yet." in render_activity(LoadOutcome.success([]), API, WEB)
    assert "Personal activity feed unavailable right now." in render_activity(
        LoadOutcome.failure("boom"), API, WEB
    )


def test_render_user_metrics_cards() -> None:
    html = render_user_metrics(LoadOutcome.success(GitHubUser.model_validate(user_payload())))

    assert html.count('class="metric"') == 4
    assert '<span class="label">Public Gists</span><span class="value">3</span>' in html


def test_render_user_metrics_failure_placeholder() -> None:
    html = render_user_metrics(LoadOutcome.failure("User @Ada was not found."))

    assert html == '<p class="placeholder">Personal profile metrics unavailable right now.</p>'


def test_org_description_override_is_case_insensitive() -> None:
    org = GitHubOrg.model_validate(org_payload("BYTEBASHERSLABS", description=None))

    assert org_description(org).startswith("Open-source collective")


def test_org_description_generic_fallback() -> None:
    org = GitHubOrg.model_validate(org_payload("ByteBashersLabsFork", description=None))

    assert org_description(org) == "No organization description provided."


def test_render_org_summary_escapes_text() -> None:
    org = GitHubOrg.model_validate(org_payload(name="<b>Evil</b>"))

    html = render_org_summary(LoadOutcome.success(org), "Babbage")

    assert "&lt;b&gt;Evil&lt;/b&gt;" in html
    assert "Organization Snapshot (@Babbage)" in html


def test_render_org_summary_failure_names_requested_org() -> None:
    html = render_org_summary(LoadOutcome.failure("gone"), "Babbage")

    assert "Organization summary unavailable for @Babbage." in html


def test_render_repo_grid_cards_and_empty_state() -> None:
    repo = GitHubRepo.model_validate(
        repo_payload(7, "engine", "2025-01-02T00:00:00Z", description=None, language=None)
    )

    html = render_repo_grid(LoadOutcome.success([repo]), "empty", "failed")

    assert '<a href="https://github.com/Ada/engine" target="_blank" rel="noreferrer">engine</a>' in html
    assert "No description provided." in html
    assert "<strong>n/a</strong>" in html
    assert "Stars: 7" in html
    assert "Updated: Jan 2, 2025" in html
    assert render_repo_grid(LoadOutcome.success([]), "empty", "failed") == (
        '<p class="placeholder">empty</p>'
    )
    assert render_repo_grid(LoadOutcome.failure("x"), "empty", "failed") == (
        '<p class="placeholder">failed</p>'
    )


def test_render_contribution_graph_cells() -> None:
    history = ContributionHistory(
        weeks=[
            [
                ContributionDay(day=date(2025, 1, 5), count=0, level="NONE"),
                ContributionDay(day=date(2025, 1, 6), count=1, level="SECOND_QUARTILE"),
                ContributionDay(day=date(2025, 1, 7), count=5, level="FOURTH_QUARTILE"),
            ]
        ],
        total=6,
    )

    html = render_contribution_graph(LoadOutcome.success(history), "Ada")

    assert 'title="no contributions on Jan 5, 2025"' in html
    assert 'class="contrib-cell level-2"' in html
    assert 'title="5 contributions on Jan 7, 2025"' in html
    assert html.count('class="contrib-cell empty"') == 4
    assert "6 contributions in the last year" in html
    assert ">Jan</span>" in html


def test_render_contribution_graph_failure_is_accessible() -> None:
    html = render_contribution_graph(LoadOutcome.failure("down"), "Ada")

    assert 'role="img"' in html
    assert 'aria-label="GitHub contribution chart unavailable."' in html
    assert "contrib-cell" not in html
