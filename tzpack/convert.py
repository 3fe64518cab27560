from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from .models import ZoneResolution
from .registry import ZoneRegistry

default_registry = ZoneRegistry()


def load_data(data: Mapping[str, Any]) -> None:
    """Register a packed data bundle with the process-wide registry."""
    default_registry.load_data(data)


def reset() -> None:
    """Forget every zone and link in the process-wide registry."""
    default_registry.clear()


def _wall_clock_as_utc(value: datetime | str) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    elif not isinstance(value, datetime):
        raise TypeError(
            f"Expected a datetime or an ISO 8601 string, got {type(value).__name__}"
        )

    # keep the wall-clock fields, drop whatever zone the value carries
    return value.replace(tzinfo=timezone.utc)


def convert_resolution(
    value: datetime | str, zone_name: str, registry: ZoneRegistry | None = None
) -> ZoneResolution:
    """
    Resolve ``zone_name`` for ``value`` using the DST boundary policy of
    :meth:`ZoneTable.offset_for`.

    The wall-clock fields of ``value`` are read as UTC; a zone carried by an
    aware value is discarded, not applied.
    Raises :class:`UnknownZoneError` for a name the registry cannot resolve.
    """
    utc_equivalent = _wall_clock_as_utc(value)
    if registry is None:
        registry = default_registry
    table = registry.resolve(zone_name)

    return table._resolution(
        utc_equivalent, table.find_local_period_index(utc_equivalent)
    )


def convert(
    value: datetime | str, zone_name: str, registry: ZoneRegistry | None = None
) -> datetime:
    """
    Wall-clock time in ``zone_name`` for ``value``, as a naive datetime.
    """
    return convert_resolution(value, zone_name, registry).local_time
