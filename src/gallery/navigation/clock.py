from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo


class CivilClock:
    """
    Clock pinned to one civil timezone so "today" does not drift with the
    host's local time. ``fixed_today`` freezes the date (demo data, tests).
    """

    def __init__(self, timezone: str = "America/Los_Angeles", fixed_today: Optional[date] = None):
        self.tz = ZoneInfo(timezone)
        self.fixed_today = fixed_today

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        if self.fixed_today is not None:
            return self.fixed_today
        return self.now().date()
