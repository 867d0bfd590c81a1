from __future__ import annotations


class LottoActionError(RuntimeError):
    """Base error for failures raised by the action."""


class BootstrapError(LottoActionError):
    """Raised when the run environment could not be prepared."""


class CheckError(LottoActionError):
    """Raised when a single ticket could not be checked."""

    def __init__(self, ticket_id: int, message: str) -> None:
        super().__init__(f"Ticket #{ticket_id}: {message}")
        self.ticket_id = ticket_id


class PurchaseError(LottoActionError):
    """Raised when buying or recording a new ticket failed."""
