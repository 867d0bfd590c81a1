"""Render ticket contents into an issue body and read them back."""

from __future__ import annotations

import datetime
import re

from pydantic import BaseModel, Field, ValidationError

from .models import TicketContent

_PAYLOAD_MARKER = "lotto-action"
_PAYLOAD_RE = re.compile(rf"<!--\s*{_PAYLOAD_MARKER}:(?P<payload>.*?)\s*-->", re.DOTALL)
_SLOT_NAMES = "ABCDE"


class TicketBodyError(ValueError):
    """Raised when an issue body does not carry a readable ticket payload."""


class TicketPayload(BaseModel):
    """Machine-readable part of the issue body."""

    date: datetime.date
    round: int = Field(ge=1)
    numbers: list[list[int]]
    link: str = ""


def encode(content: TicketContent) -> str:
    """Build the issue body for a purchased ticket."""

    payload = TicketPayload(
        date=content.date,
        round=content.round,
        numbers=[list(combination) for combination in content.numbers],
        link=content.link,
    )
    rows = [
        f"| {_SLOT_NAMES[index] if index < len(_SLOT_NAMES) else index + 1} | "
        f"{' '.join(f'{number:02d}' for number in combination)} |"
        for index, combination in enumerate(payload.numbers)
    ]
    lines = [
        f"## Round {payload.round}",
        "",
        f"- Purchased: {payload.date.isoformat()}",
        f"- Check the result: {payload.link}",
        "",
        "| Slot | Numbers |",
        "| --- | --- |",
        *rows,
        "",
        f"<!-- {_PAYLOAD_MARKER}:{payload.model_dump_json()} -->",
    ]
    return "\n".join(lines)


def decode(text: str) -> TicketContent:
    """Extract the ticket contents from an issue body produced by :func:`encode`."""

    match = _PAYLOAD_RE.search(text or "")
    if match is None:
        raise TicketBodyError("Issue body has no ticket payload")
    try:
        payload = TicketPayload.model_validate_json(match.group("payload"))
    except ValidationError as exc:
        raise TicketBodyError(f"Invalid ticket payload: {exc}") from exc
    return TicketContent(
        date=payload.date,
        round=payload.round,
        numbers=[list(combination) for combination in payload.numbers],
        link=payload.link,
    )
