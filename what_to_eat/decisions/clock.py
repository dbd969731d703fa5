"""
Civil-day arithmetic.

Decisions are bucketed by the calendar date of their timestamp in the
service time zone. All "now" reads go through :class:`Clock` so tests can
pin both the zone and the current instant.
"""
from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Callable
from zoneinfo import ZoneInfo


class Clock:
    """Time-zone aware source of "now".

    ``tz=None`` follows the host's local zone at every read, including DST
    changes. ``now_fn`` overrides the current instant (tests).
    """

    def __init__(
        self,
        tz: tzinfo | None = None,
        now_fn: Callable[[], datetime] | None = None,
    ) -> None:
        self.tz = tz
        self._now_fn = now_fn

    @classmethod
    def from_name(cls, name: str) -> "Clock":
        return cls(ZoneInfo(name) if name else None)

    def now(self) -> datetime:
        if self._now_fn is not None:
            return self.localize(self._now_fn())
        return datetime.now(self.tz) if self.tz else datetime.now().astimezone()

    def localize(self, moment: datetime) -> datetime:
        """Return *moment* as an aware datetime in this clock's zone.

        Naive values are taken to already be wall-clock time in the zone.
        """
        if moment.tzinfo is None:
            return moment.replace(tzinfo=self.tz) if self.tz else moment.astimezone()
        return moment.astimezone(self.tz) if self.tz else moment.astimezone()

    def from_timestamp(self, ts: float) -> datetime:
        return datetime.fromtimestamp(ts, self.tz) if self.tz else datetime.fromtimestamp(ts).astimezone()

    def civil_day(self, moment: datetime) -> date:
        return self.localize(moment).date()
