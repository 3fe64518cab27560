from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class ZoneResolution:
    """
    Resolution of a zone at a specific instant.
    """

    timezone_name: str
    resolution_time: datetime  # tz-aware UTC
    local_time: datetime  # naive local wall time
    offset_minutes: int | float  # positive west of UTC
    abbreviation: str
    period_index: int
    next_transition: datetime | None = None  # tz-aware UTC

    @property
    def utc_offset(self) -> timedelta:
        return timedelta(minutes=-self.offset_minutes)

    @property
    def utc_offset_secs(self) -> int:
        return round(self.utc_offset.total_seconds())


@dataclass(frozen=True)
class ZonePeriod:
    """
    A rule period: the abbreviation and offset in effect until ``until``
    (epoch milliseconds, ``math.inf`` for the last period).
    """

    abbreviation: str
    offset: int | float
    until: int | float
