import bisect
import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone

from .exceptions import MalformedPackedStringError
from .models import ZonePeriod, ZoneResolution

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)


def to_millis(instant: datetime | int | float) -> int | float:
    """
    Epoch milliseconds for ``instant``. Naive datetimes are taken as UTC.
    """
    if isinstance(instant, datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return (instant - _EPOCH) / _MILLISECOND
    return instant


def from_millis(millis: int | float) -> datetime:
    return _EPOCH + timedelta(milliseconds=millis)


@dataclass(frozen=True)
class ZoneTable:
    """
    Decoded rule periods of a single zone.

    ``offsets`` are minutes with the packed data's sign (positive west of
    UTC, so ``local = utc - offset``). ``transition_instants`` holds the end
    of each period in epoch milliseconds; the last one is ``math.inf``.
    """

    name: str
    abbreviations: tuple[str, ...]
    offsets: tuple[int | float, ...]
    transition_instants: tuple[int | float, ...]
    population: int = 0

    def __post_init__(self) -> None:
        count = len(self.transition_instants)
        if count == 0:
            raise MalformedPackedStringError(
                f"Zone {self.name!r} has no rule periods"
            )
        if not len(self.abbreviations) == len(self.offsets) == count:
            raise MalformedPackedStringError(
                f"Zone {self.name!r} has mismatched lengths: "
                f"{len(self.abbreviations)} abbreviations, "
                f"{len(self.offsets)} offsets, {count} transitions"
            )
        if self.transition_instants[-1] != math.inf:
            raise MalformedPackedStringError(
                f"Zone {self.name!r} does not end with an open period"
            )
        untils = self.transition_instants
        if any(a > b for a, b in zip(untils, untils[1:])):
            raise MalformedPackedStringError(
                f"Zone {self.name!r} has out of order transitions"
            )

    @property
    def periods(self) -> list[ZonePeriod]:
        return [
            ZonePeriod(abbr, offset, until)
            for abbr, offset, until in zip(
                self.abbreviations, self.offsets, self.transition_instants
            )
        ]

    def with_name(self, name: str) -> "ZoneTable":
        return replace(self, name=name)

    def find_period_index(self, instant: datetime | int | float) -> int:
        """
        Index of the period containing the UTC ``instant``: the first period
        whose transition is strictly after it.
        """
        index = bisect.bisect_right(self.transition_instants, to_millis(instant))
        # only reachable for an instant at +inf
        return min(index, len(self.transition_instants) - 1)

    def find_local_period_index(self, instant: datetime | int | float) -> int:
        """
        Index of the period containing ``instant`` when it is a wall-clock
        time expressed as if it were UTC.

        Each boundary is shifted by the larger of the two offsets around it,
        so wall times skipped or repeated by a transition resolve to the
        period on the near side instead of splitting on the UTC instant.
        """
        target = to_millis(instant)
        offsets = self.offsets
        untils = self.transition_instants
        last = len(untils) - 1

        for i in range(last):
            offset = offsets[i]
            offset_next = offsets[i + 1]
            offset_prev = offsets[i - 1 if i else i]

            if offset < offset_next:
                offset = offset_next
            elif offset > offset_prev:
                offset = offset_prev

            if target < untils[i] - offset * 60000:
                return i

        return last

    def offset_for(self, instant: datetime | int | float) -> int | float:
        return self.offsets[self.find_local_period_index(instant)]

    def abbreviation_for(self, instant: datetime | int | float) -> str:
        return self.abbreviations[self.find_local_period_index(instant)]

    def utc_offset_for(self, instant: datetime | int | float) -> int | float:
        return self.offsets[self.find_period_index(instant)]

    def utc_abbreviation_for(self, instant: datetime | int | float) -> str:
        return self.abbreviations[self.find_period_index(instant)]

    def next_transition(self, index: int) -> datetime | None:
        """
        UTC datetime of the next transition after period ``index`` that
        actually changes the offset or abbreviation.
        """
        abbr = self.abbreviations[index]
        offset = self.offsets[index]
        for i in range(index, len(self.transition_instants) - 1):
            if self.abbreviations[i + 1] != abbr or self.offsets[i + 1] != offset:
                return from_millis(self.transition_instants[i])
        return None

    def resolve(self, dt: datetime) -> ZoneResolution:
        """
        Resolve this zone at a given instant.
        Accepts naive (interpreted as UTC) or aware (converted to UTC).
        """
        if dt.tzinfo is None:
            dt_utc = dt.replace(tzinfo=timezone.utc)
        else:
            dt_utc = dt.astimezone(timezone.utc)

        return self._resolution(dt_utc, self.find_period_index(dt_utc))

    def _resolution(self, dt_utc: datetime, index: int) -> ZoneResolution:
        offset = self.offsets[index]
        local = (dt_utc - timedelta(minutes=offset)).replace(tzinfo=None)
        return ZoneResolution(
            self.name,
            dt_utc,
            local,
            offset,
            self.abbreviations[index],
            index,
            next_transition=self.next_transition(index),
        )

    def pack(self) -> str:
        from .packed import pack

        return pack(self)

    def __len__(self) -> int:
        return len(self.transition_instants)
