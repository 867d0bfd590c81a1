"""Ticket domain models, body codec and the issue-backed store."""

from .codec import TicketBodyError, decode, encode
from .labels import rank_to_label
from .models import LottoRank, Ticket, TicketContent
from .repository import GitHubTicketStore, TicketStore, TicketStoreError
from .state import TicketStateMachine, TicketStatus

__all__ = [
    "GitHubTicketStore",
    "LottoRank",
    "Ticket",
    "TicketBodyError",
    "TicketContent",
    "TicketStateMachine",
    "TicketStatus",
    "TicketStore",
    "TicketStoreError",
    "decode",
    "encode",
    "rank_to_label",
]
