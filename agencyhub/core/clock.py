"""Clock abstraction so automations can be evaluated against a controllable "now"."""

from datetime import datetime
from typing import Protocol
from zoneinfo import ZoneInfo

from agencyhub.core.config import settings


class Clock(Protocol):
    """Source of the current time for the automation engine."""

    def now(self) -> datetime:
        """Return the current timezone-aware datetime."""
        ...


class SystemClock:
    """Wall clock in the configured automation timezone."""

    def __init__(self, timezone: str | None = None) -> None:
        self._tz = ZoneInfo(timezone or settings.automation_timezone)

    def now(self) -> datetime:
        return datetime.now(self._tz)
