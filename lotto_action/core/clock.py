"""Calendar and draw-round arithmetic in the lottery's home timezone."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "Asia/Seoul"

# Round 1 was drawn on Saturday 2002-12-07 at 20:45 KST; one draw every week since.
_FIRST_DRAW = (2002, 12, 7, 20, 45)
_DRAW_INTERVAL = timedelta(days=7)


@dataclass(frozen=True, slots=True)
class ClockConfig:
    """Timezone configuration passed to every date computation."""

    timezone: str = DEFAULT_TIMEZONE

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def now(self) -> datetime:
        return datetime.now(self.zone)

    @property
    def first_draw(self) -> datetime:
        return datetime(*_FIRST_DRAW, tzinfo=ZoneInfo(DEFAULT_TIMEZONE))


def today(clock: ClockConfig, now: datetime | None = None) -> date:
    """Return the calendar date in the configured timezone."""

    current = now if now is not None else clock.now()
    return current.astimezone(clock.zone).date()


def current_round(clock: ClockConfig, now: datetime | None = None) -> int:
    """Return the most recent round whose draw has already taken place."""

    current = now if now is not None else clock.now()
    elapsed = current - clock.first_draw
    if elapsed < timedelta(0):
        return 0
    return elapsed // _DRAW_INTERVAL + 1

