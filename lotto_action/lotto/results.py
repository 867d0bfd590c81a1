"""Published draw results and the rank rules of the 6/45 game."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from lotto_action.tickets.models import Combination, LottoRank

from .session import CheckResult, DrawNotAnnouncedError, SessionError

logger = logging.getLogger(__name__)

RESULT_API_URL = "https://www.dhlottery.co.kr/common.do"
NUMBERS_PER_COMBINATION = 6
MIN_NUMBER = 1
MAX_NUMBER = 45


@dataclass(frozen=True, slots=True)
class WinningNumbers:
    """Numbers drawn for a round, including the bonus ball."""

    round: int
    numbers: frozenset[int]
    bonus: int

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "WinningNumbers":
        if payload.get("returnValue") != "success":
            raise DrawNotAnnouncedError(f"Round {payload.get('drwNo', '?')} has no published result")
        try:
            numbers = frozenset(int(payload[f"drwtNo{index}"]) for index in range(1, NUMBERS_PER_COMBINATION + 1))
            return cls(round=int(payload["drwNo"]), numbers=numbers, bonus=int(payload["bnusNo"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise SessionError(f"Malformed draw result payload: {exc}") from exc


def validate_combination(combination: Combination) -> tuple[int, ...]:
    values = tuple(int(number) for number in combination)
    if len(values) != NUMBERS_PER_COMBINATION or len(set(values)) != NUMBERS_PER_COMBINATION:
        raise ValueError(f"A combination needs six distinct numbers, got {list(values)}")
    if any(not MIN_NUMBER <= number <= MAX_NUMBER for number in values):
        raise ValueError(f"Numbers must be between {MIN_NUMBER} and {MAX_NUMBER}, got {list(values)}")
    return values


def rank_combination(combination: Combination, winning: WinningNumbers) -> CheckResult:
    """Compute the prize tier of a combination for a drawn round."""

    values = validate_combination(combination)
    matched = tuple(sorted(number for number in values if number in winning.numbers))
    hits = len(matched)
    if hits == 6:
        rank = LottoRank.FIRST
    elif hits == 5 and winning.bonus in values:
        rank = LottoRank.SECOND
    elif hits == 5:
        rank = LottoRank.THIRD
    elif hits == 4:
        rank = LottoRank.FOURTH
    elif hits == 3:
        rank = LottoRank.FIFTH
    else:
        rank = LottoRank.NONE
    return CheckResult(rank=rank, matched=matched)


class DrawResultClient:
    """Fetches published results, sharing one request per round between concurrent callers."""

    def __init__(self, client: httpx.AsyncClient | None = None, *, url: str = RESULT_API_URL) -> None:
        self._client = client
        self._url = url
        self._pending: dict[int, asyncio.Task[WinningNumbers]] = {}

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=10.0)
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._pending.clear()

    async def winning_numbers(self, round_number: int) -> WinningNumbers:
        task = self._pending.get(round_number)
        if task is None or (task.done() and (task.cancelled() or task.exception() is not None)):
            task = asyncio.ensure_future(self._fetch(round_number))
            self._pending[round_number] = task
        return await task

    async def _fetch(self, round_number: int) -> WinningNumbers:
        client = self._ensure_client()
        logger.debug("Fetching draw result for round %d", round_number)
        try:
            response = await client.get(self._url, params={"method": "getLottoNumber", "drwNo": round_number})
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise SessionError(f"Could not fetch result for round {round_number}: {exc}") from exc
        return WinningNumbers.from_payload(payload)
