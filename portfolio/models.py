from dataclasses import dataclass
from dataclasses import field
from datetime import date
from typing import Generic
from typing import TypeVar

from pydantic import AwareDatetime
from pydantic import BaseModel
from pydantic import ConfigDict


T = TypeVar("T")


class GitHubUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    login: str
    name: str | None = None
    bio: str | None = None
    html_url: str
    public_repos: int = 0
    public_gists: int = 0
    followers: int = 0
    following: int = 0


class GitHubOrg(BaseModel):
    model_config = ConfigDict(extra="ignore")

    login: str
    name: str | None = None
    description: str | None = None
    html_url: str
    public_repos: int = 0
    followers: int = 0


class GitHubRepo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    html_url: str
    description: str | None = None
    language: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    pushed_at: AwareDatetime | None = None
    fork: bool = False


class EventRepo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    url: str


class EventPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    action: str | None = None
    ref_type: str | None = None


class GitHubEvent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    created_at: AwareDatetime
    repo: EventRepo
    payload: EventPayload | None = None


@dataclass(frozen=True)
class ContributionDay:
    day: date
    count: int
    level: str


@dataclass(frozen=True)
class ContributionHistory:
    """Weeks of seven (or fewer) days as returned by the contributions host."""

    weeks: list[list[ContributionDay]]
    total: int


@dataclass(frozen=True)
class Subject:
    user: str
    org: str


@dataclass(frozen=True)
class LoadOutcome(Generic[T]):
    """Success or failure of a single section read."""

    value: T | None = None
    error: str | None = None
    kind: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "LoadOutcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, message: str, kind: str = "error") -> "LoadOutcome[T]":
        return cls(error=message, kind=kind)


@dataclass
class LoadStatus:
    message: str
    tone: str = "default"
    rate_limited: bool = False


@dataclass
class PortfolioLoad:
    """Every outcome of one fan-out plus the handles it resolved."""

    requested: Subject
    user: str
    org: str
    org_profile: LoadOutcome[GitHubOrg]
    org_repos: LoadOutcome[list[GitHubRepo]]
    user_profile: LoadOutcome[GitHubUser]
    user_repos: LoadOutcome[list[GitHubRepo]]
    events: LoadOutcome[list[GitHubEvent]]
    contributions: LoadOutcome[ContributionHistory]
    status: LoadStatus
    warnings: list[str] = field(default_factory=list)
