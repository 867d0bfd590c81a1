"""Checks waiting tickets against published draw results."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from lotto_action.errors import CheckError
from lotto_action.lotto.session import LottoSession
from lotto_action.tickets.codec import decode
from lotto_action.tickets.labels import labels_for_ranks
from lotto_action.tickets.models import Ticket
from lotto_action.tickets.repository import TicketStore
from lotto_action.tickets.state import TicketStateMachine, TicketStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CheckReport:
    """Outcome of one checking pass over every waiting ticket."""

    checked: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    failures: list[CheckError] = field(default_factory=list)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def success(self) -> bool:
        return not self.failures


class ResultChecker:
    """Moves waiting tickets to checked once their round has a result.

    Every ticket is processed in its own pipeline and all pipelines run
    concurrently; a failing ticket is recorded in the report and stays
    waiting, without affecting the others.
    """

    def __init__(self, store: TicketStore, session: LottoSession) -> None:
        self._store = store
        self._session = session

    async def check_all(self) -> CheckReport:
        report = CheckReport()
        tickets = list(await self._store.list_awaiting_tickets())
        if not tickets:
            logger.info("No waiting tickets to check")
            return report

        logger.info("Checking %d waiting tickets", len(tickets))
        outcomes = await asyncio.gather(
            *(self._run_pipeline(ticket) for ticket in tickets),
            return_exceptions=True,
        )

        for ticket, outcome in zip(tickets, outcomes):
            if isinstance(outcome, CheckError):
                logger.warning("Could not check ticket #%d: %s", ticket.id, outcome.__cause__ or outcome)
                report.failures.append(outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            elif outcome:
                report.checked.append(ticket.id)
            else:
                report.skipped.append(ticket.id)

        if report.failures:
            logger.error("%d of %d tickets could not be checked", report.failure_count, len(tickets))
        return report

    async def _run_pipeline(self, ticket: Ticket) -> bool:
        try:
            return await self._check_ticket(ticket)
        except Exception as exc:
            raise CheckError(ticket.id, str(exc)) from exc

    async def _check_ticket(self, ticket: Ticket) -> bool:
        TicketStateMachine.assert_transition(ticket.status, TicketStatus.CHECKED)
        if not ticket.body:
            logger.info("Ticket #%d has an empty body, skipping", ticket.id)
            return False

        content = decode(ticket.body)
        if content.numbers:
            results = await asyncio.gather(
                *(self._session.check(combination, content.round) for combination in content.numbers)
            )
            labels = labels_for_ranks(result.rank for result in results)
        else:
            logger.info("Ticket #%d has no numbers, closing it without a rank", ticket.id)
            labels = frozenset()
        await self._store.mark_checked(ticket.id, labels)
        return True
