"""Display clock for the presentation layer.

A periodic tick source producing the salutation and time-of-day text. It
feeds the presentation only and never touches the state machine.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import AsyncIterator, Callable

from pydantic import BaseModel, ConfigDict

# Hour boundaries (local time) for the salutation
AFTERNOON_STARTS_HOUR = 12
EVENING_STARTS_HOUR = 17


def salutation(hour: int) -> str:
    """Greeting for an hour of the day (0-23)."""
    if hour < AFTERNOON_STARTS_HOUR:
        return "Good Morning"
    if hour < EVENING_STARTS_HOUR:
        return "Good Afternoon"
    return "Good Evening"


class ClockTick(BaseModel):
    """One tick of the display clock."""

    model_config = ConfigDict(frozen=True)

    now: datetime
    salutation: str

    @property
    def display_text(self) -> str:
        """Date and time, e.g. 'Saturday 18 • 09:30 AM'."""
        return self.now.strftime("%A %d • %I:%M %p")


class DisplayClock:
    """Periodic tick producer."""

    def __init__(
        self,
        interval_seconds: float = 1.0,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.interval_seconds = interval_seconds
        self._now = now

    def tick(self) -> ClockTick:
        current = self._now()
        return ClockTick(now=current, salutation=salutation(current.hour))

    async def ticks(self) -> AsyncIterator[ClockTick]:
        """Yield a tick immediately and then every `interval_seconds`."""
        while True:
            yield self.tick()
            await asyncio.sleep(self.interval_seconds)
