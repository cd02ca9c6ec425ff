import logging
from collections import OrderedDict

import httpx

from portfolio.clients.github_client import GitHubProxy
from portfolio.core.storage import ORG_KEY
from portfolio.core.storage import USER_KEY
from portfolio.core.storage import PreferenceStore
from portfolio.errors import SubjectValidationError
from portfolio.models import PortfolioLoad
from portfolio.models import Subject
from portfolio.rendering.view import PortfolioView
from portfolio.rendering.view import apply_portfolio
from portfolio.services.portfolio_service import load_portfolio
from portfolio.services.subject_service import require_subject
from portfolio.services.subject_service import resolve_subject
from portfolio.settings import Settings


logger = logging.getLogger(__name__)


class LoadSequencer:
    """Hands out increasing generation numbers so stale loads can be dropped."""

    def __init__(self) -> None:
        self._generation = 0

    @property
    def current(self) -> int:
        return self._generation

    def begin(self) -> int:
        self._generation += 1
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation


class SequencerRegistry:
    """One sequencer per browser, so a newer page load supersedes an older one."""

    def __init__(self, max_clients: int = 1024) -> None:
        self.max_clients = max(1, max_clients)
        self._sequencers: OrderedDict[str, LoadSequencer] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sequencers)

    def for_client(self, client_id: str) -> LoadSequencer:
        sequencer = self._sequencers.pop(client_id, None) or LoadSequencer()
        self._sequencers[client_id] = sequencer
        while len(self._sequencers) > self.max_clients:
            self._sequencers.popitem(last=False)
        return sequencer


class PortfolioSession:
    """Drives loads into one view, applying only the newest load's results."""

    def __init__(
        self,
        view: PortfolioView,
        proxy: GitHubProxy,
        client: httpx.AsyncClient,
        settings: Settings,
        store: PreferenceStore,
        sequencer: LoadSequencer | None = None,
    ) -> None:
        self.view = view
        self.proxy = proxy
        self.client = client
        self.settings = settings
        self.store = store
        self.sequencer = sequencer or LoadSequencer()
        self.superseded = False

    async def load_initial(
        self, query_user: str | None, query_org: str | None
    ) -> PortfolioLoad | None:
        subject = resolve_subject(
            query_user,
            query_org,
            self.store.get(USER_KEY),
            self.store.get(ORG_KEY),
            self.settings.default_user,
            self.settings.default_org,
        )
        return await self._run(subject)

    async def submit(self, user: str | None, org: str | None) -> PortfolioLoad | None:
        try:
            subject = require_subject(user, org)
        except SubjectValidationError as exc:
            self.view.set_status(exc.message, "error")
            return None
        return await self._run(subject)

    async def _run(self, subject: Subject) -> PortfolioLoad | None:
        generation = self.sequencer.begin()
        self.view.set_section_labels(subject.user, subject.org)
        self.view.user_input = subject.user
        self.view.org_input = subject.org
        self.view.set_status(f"Loading @{subject.user} and @{subject.org}...", "loading")

        load = await load_portfolio(
            subject,
            self.proxy,
            self.client,
            self.settings.contributions_url_template,
        )

        if not self.sequencer.is_current(generation):
            logger.debug(
                "Discarding load %d for @%s; load %d is newer",
                generation,
                subject.user,
                self.sequencer.current,
            )
            self.superseded = True
            return None

        apply_portfolio(
            self.view,
            load,
            api_base_url=self.settings.github_api_base_url,
            web_base_url=self.settings.github_web_base_url,
        )
        self.store.remember(load)
        return load
