from dataclasses import dataclass
from datetime import date

from portfolio.models import ContributionDay
from portfolio.models import ContributionHistory


VISIBLE_WEEKS = 53
DAYS_PER_WEEK = 7

CONTRIBUTION_LEVELS: dict[str, int] = {
    "NONE": 0,
    "FIRST_QUARTILE": 1,
    "SECOND_QUARTILE": 2,
    "THIRD_QUARTILE": 3,
    "FOURTH_QUARTILE": 4,
}


@dataclass(frozen=True)
class ContributionCell:
    day: date | None
    count: int
    level: int

    @property
    def is_empty(self) -> bool:
        return self.day is None


@dataclass(frozen=True)
class MonthLabel:
    week_index: int
    label: str


@dataclass(frozen=True)
class ContributionGrid:
    weeks: list[list[ContributionCell]]
    month_labels: list[MonthLabel]
    total: int


EMPTY_CELL = ContributionCell(day=None, count=0, level=0)


def contribution_level(level: str | None) -> int:
    """Map a quartile level name to a heatmap bucket in range 0..4."""

    if level is None:
        return 0
    return CONTRIBUTION_LEVELS.get(level, 0)


def pluralize_contributions(count: int) -> str:
    if count <= 0:
        return "no contributions"
    if count == 1:
        return "1 contribution"
    return f"{count} contributions"


def _to_cell(day: ContributionDay) -> ContributionCell:
    return ContributionCell(day=day.day, count=day.count, level=contribution_level(day.level))


def build_contribution_grid(history: ContributionHistory) -> ContributionGrid:
    """Keep the most recent weeks and pad short weeks to seven cells."""

    weeks: list[list[ContributionCell]] = []
    for raw_week in history.weeks[-VISIBLE_WEEKS:]:
        cells = [_to_cell(day) for day in raw_week[:DAYS_PER_WEEK]]
        cells.extend([EMPTY_CELL] * (DAYS_PER_WEEK - len(cells)))
        weeks.append(cells)

    return ContributionGrid(
        weeks=weeks,
        month_labels=month_labels(weeks),
        total=history.total,
    )


def month_labels(weeks: list[list[ContributionCell]]) -> list[MonthLabel]:
    """Label each week whose first real day starts a month name not yet shown."""

    labels: list[MonthLabel] = []
    previous = ""
    for index, week in enumerate(weeks):
        first_day = next((cell.day for cell in week if cell.day is not None), None)
        if first_day is None:
            continue
        name = first_day.strftime("%b")
        if name != previous:
            labels.append(MonthLabel(week_index=index, label=name))
            previous = name
    return labels
