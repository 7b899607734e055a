"""Clock abstraction so time-dependent rules can be tested with a fixed instant"""

from datetime import datetime, timezone


class SystemClock:
    """Current UTC time from the system"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock frozen at a given instant"""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant


def utc_naive(moment: datetime) -> datetime:
    """Naive UTC datetime for storage in DateTime columns"""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)
