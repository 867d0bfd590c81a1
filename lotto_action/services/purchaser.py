from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from lotto_action.core.clock import ClockConfig, current_round, today
from lotto_action.core.config import clamp_purchase_amount
from lotto_action.errors import PurchaseError
from lotto_action.lotto.session import LottoSession
from lotto_action.tickets.codec import encode
from lotto_action.tickets.models import Ticket, TicketContent
from lotto_action.tickets.repository import TicketStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def release_on_failure(session: LottoSession) -> AsyncIterator[LottoSession]:
    """Release the session if the wrapped block raises; leave it open otherwise."""

    try:
        yield session
    except Exception:
        try:
            await session.release()
        except Exception:
            logger.exception("Releasing the automation session failed")
        raise


class PurchaseOrchestrator:
    """Buys a batch of tickets and records it as a new waiting ticket."""

    def __init__(
        self,
        store: TicketStore,
        session: LottoSession,
        *,
        clock: ClockConfig | None = None,
        round_provider: Callable[[ClockConfig], int] = current_round,
    ) -> None:
        self._store = store
        self._session = session
        self._clock = clock or ClockConfig()
        self._round_provider = round_provider

    async def purchase(self, amount: int | str) -> Ticket:
        count = clamp_purchase_amount(amount)
        purchased_on = today(self._clock)
        logger.info("Buying %d tickets", count)

        try:
            async with release_on_failure(self._session) as session:
                numbers = await session.purchase(count)
                if len(numbers) != count:
                    raise PurchaseError(f"Expected {count} combinations, got {len(numbers)}")
                logger.info("Purchase complete")

                target_round = self._round_provider(self._clock) + 1
                link = session.checking_link(target_round, numbers)
                body = encode(TicketContent(date=purchased_on, round=target_round, numbers=numbers, link=link))
                ticket = await self._store.create_ticket(purchased_on, body)
        except PurchaseError:
            raise
        except Exception as exc:
            raise PurchaseError(f"Lotto purchase failed: {exc}") from exc

        logger.info("Recorded purchase for round %d as ticket #%d", target_round, ticket.id)
        return ticket
