from __future__ import annotations

from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from maintenance_alerts.domain.notifications.ports import Clock


class SystemClock(Clock):
    """Wall clock in the business's timezone; "today" for every classification comes from here."""

    def __init__(self, tz_name: str) -> None:
        try:
            self._tz = ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise RuntimeError(f"Unknown timezone: {tz_name!r}") from e

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(self._tz)
