from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

from lotto_action.tickets.models import Combination, LottoRank


class SessionError(RuntimeError):
    """Base error raised by an automation session."""


class SignInError(SessionError):
    """Raised when the lottery site rejects the credentials."""


class DrawNotAnnouncedError(SessionError):
    """Raised when a round has no published result yet."""


class PurchaseRejectedError(SessionError):
    """Raised when the lottery site refuses or aborts a purchase."""


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Construction options for an automation session."""

    driver: str = "chromium"
    headless: bool = True
    log_level: int = logging.DEBUG
    launch_args: tuple[str, ...] = ("--no-sandbox",)


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of checking one combination against one round."""

    rank: LottoRank
    matched: tuple[int, ...] = ()


class LottoSession(Protocol):
    """Stateful capability that signs in, checks, and buys tickets."""

    async def sign_in(self, user_id: str, password: str) -> None:
        ...

    async def check(self, combination: Combination, round_number: int) -> CheckResult:
        ...

    async def purchase(self, amount: int) -> list[list[int]]:
        ...

    def checking_link(self, round_number: int, combinations: Sequence[Combination]) -> str:
        ...

    async def release(self) -> None:
        ...
