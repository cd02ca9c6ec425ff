from datetime import date
from datetime import datetime

from pydantic import BaseModel


class StatusItem(BaseModel):
    """Aggregate status line for one load."""

    message: str
    tone: str
    rate_limited: bool = False


class UserProfileItem(BaseModel):
    login: str
    name: str
    bio: str | None
    url: str
    public_repos: int
    public_gists: int
    followers: int
    following: int


class OrgProfileItem(BaseModel):
    login: str
    name: str
    description: str
    url: str
    public_repos: int
    followers: int


class RepoItem(BaseModel):
    id: int
    name: str
    url: str
    description: str | None
    language: str | None
    stars: int
    forks: int
    pushed_at: datetime | None


class ActivityItem(BaseModel):
    kind: str
    label: str
    url: str
    occurred_at: datetime


class ContributionDayItem(BaseModel):
    """Single day cell of the contribution graph; `day` is null for padding."""

    day: date | None
    count: int
    level: int


class MonthLabelItem(BaseModel):
    week_index: int
    label: str


class ContributionsItem(BaseModel):
    total: int
    weeks: list[list[ContributionDayItem]]
    month_labels: list[MonthLabelItem]


class PortfolioResponse(BaseModel):
    """JSON rendition of one fan-out; a null section means it failed to load."""

    user: str
    org: str
    status: StatusItem
    warnings: list[str]
    user_profile: UserProfileItem | None
    org_profile: OrgProfileItem | None
    user_repos: list[RepoItem] | None
    org_repos: list[RepoItem] | None
    activity: list[ActivityItem] | None
    contributions: ContributionsItem | None
