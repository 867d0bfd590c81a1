from __future__ import annotations

from enum import Enum


class TicketStatus(str, Enum):
    """Supported states for a ticket's lifecycle."""

    AWAITING = "awaiting"
    CHECKED = "checked"


class TicketStateMachine:
    """Validate ticket lifecycle transitions."""

    _TRANSITIONS: dict[TicketStatus, set[TicketStatus]] = {
        TicketStatus.AWAITING: {TicketStatus.CHECKED},
        TicketStatus.CHECKED: set(),
    }

    @classmethod
    def initial_state(cls) -> TicketStatus:
        return TicketStatus.AWAITING

    @classmethod
    def can_transition(cls, current: TicketStatus, new: TicketStatus) -> bool:
        return new in cls._TRANSITIONS.get(current, set())

    @classmethod
    def assert_transition(cls, current: TicketStatus, new: TicketStatus) -> None:
        if not cls.can_transition(current, new):
            raise ValueError(f"Invalid ticket status transition: {current.value} -> {new.value}")
