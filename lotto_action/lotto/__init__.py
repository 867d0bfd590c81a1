"""Lottery site automation: session contract, draw results and the Playwright driver."""

from .results import DrawResultClient, WinningNumbers, rank_combination
from .session import (
    CheckResult,
    DrawNotAnnouncedError,
    LottoSession,
    PurchaseRejectedError,
    SessionConfig,
    SessionError,
    SignInError,
)

__all__ = [
    "CheckResult",
    "DrawNotAnnouncedError",
    "DrawResultClient",
    "LottoSession",
    "PurchaseRejectedError",
    "SessionConfig",
    "SessionError",
    "SignInError",
    "WinningNumbers",
    "rank_combination",
]
