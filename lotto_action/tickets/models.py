from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import IntEnum
from typing import Sequence

from .state import TicketStatus

Combination = Sequence[int]


class LottoRank(IntEnum):
    """Prize tier a single combination reached for a round."""

    NONE = 0
    FIRST = 1
    SECOND = 2
    THIRD = 3
    FOURTH = 4
    FIFTH = 5


@dataclass(slots=True)
class Ticket:
    """A purchase batch as stored in the ticket store."""

    id: int
    title: str
    body: str | None
    status: TicketStatus
    rank_labels: frozenset[str] = frozenset()
    created_at: datetime | None = None


@dataclass(slots=True)
class TicketContent:
    """Decoded ticket body: what was bought, for which round, and how to verify it."""

    date: date
    round: int
    numbers: list[list[int]] = field(default_factory=list)
    link: str = ""
