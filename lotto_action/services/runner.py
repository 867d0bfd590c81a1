"""Sequences one scheduled run: bootstrap, check waiting tickets, buy a new batch."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from opentelemetry import trace

from lotto_action.core.actions import set_failed
from lotto_action.core.clock import ClockConfig
from lotto_action.core.config import Settings
from lotto_action.errors import BootstrapError
from lotto_action.lotto.playwright_session import PlaywrightLottoSession
from lotto_action.lotto.session import LottoSession, SessionConfig
from lotto_action.tickets.models import Ticket
from lotto_action.tickets.repository import TicketStore

from .browser import install_browser
from .checker import CheckReport, ResultChecker
from .purchaser import PurchaseOrchestrator

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

SessionFactory = Callable[[SessionConfig], LottoSession]
BrowserInstaller = Callable[[str], Awaitable[None]]


def session_config_from(settings: Settings) -> SessionConfig:
    return SessionConfig(
        driver=settings.browser_driver,
        headless=settings.browser_headless,
        log_level=logging.DEBUG,
        launch_args=tuple(settings.browser_args),
    )


async def bootstrap(
    settings: Settings,
    store: TicketStore,
    *,
    session_factory: SessionFactory = PlaywrightLottoSession,
    browser_installer: BrowserInstaller = install_browser,
) -> LottoSession:
    """Prepare the label taxonomy and one signed-in automation session."""

    session: LottoSession | None = None
    try:
        await store.ensure_label_taxonomy()
        if settings.install_browser:
            await browser_installer(settings.browser_driver)
        session = session_factory(session_config_from(settings))
        if settings.has_credentials:
            await session.sign_in(settings.lotto_id, settings.lotto_password)
        else:
            logger.warning("No lottery credentials configured, continuing without signing in")
    except Exception as exc:
        if session is not None:
            await session.release()
        if isinstance(exc, BootstrapError):
            raise
        raise BootstrapError(f"Environment setup failed: {exc}") from exc
    return session


@dataclass(slots=True)
class RunOutcome:
    """What a run did, and why it failed if it did."""

    check_report: CheckReport | None = None
    ticket: Ticket | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


class RunController:
    """Runs bootstrap, checking and purchasing strictly one after another."""

    def __init__(
        self,
        settings: Settings,
        store: TicketStore,
        *,
        clock: ClockConfig | None = None,
        session_factory: SessionFactory = PlaywrightLottoSession,
        browser_installer: BrowserInstaller = install_browser,
        report_failure: Callable[[str], None] = set_failed,
    ) -> None:
        self._settings = settings
        self._store = store
        self._clock = clock or ClockConfig(timezone=settings.timezone)
        self._session_factory = session_factory
        self._browser_installer = browser_installer
        self._report_failure = report_failure

    async def run(self) -> RunOutcome:
        outcome = RunOutcome()
        try:
            with tracer.start_as_current_span("lotto.bootstrap"):
                logger.info("Preparing the environment and signing in")
                session = await bootstrap(
                    self._settings,
                    self._store,
                    session_factory=self._session_factory,
                    browser_installer=self._browser_installer,
                )

            with tracer.start_as_current_span("lotto.check") as span:
                outcome.check_report = await ResultChecker(self._store, session).check_all()
                span.set_attribute("lotto.check.failures", outcome.check_report.failure_count)

            with tracer.start_as_current_span("lotto.purchase"):
                purchaser = PurchaseOrchestrator(self._store, session, clock=self._clock)
                outcome.ticket = await purchaser.purchase(self._settings.purchase_amount)

            # the failure path is released by the purchaser
            await session.release()
        except Exception as exc:
            logger.exception("Lotto run failed")
            outcome.error = str(exc)
            self._report_failure(outcome.error)
        return outcome
