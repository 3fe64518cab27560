from datetime import datetime, timedelta, timezone

import pytest

from tzpack import UnknownZoneError, ZoneRegistry, convert, convert_resolution


@pytest.mark.parametrize(
    "zone_name, value, expected",
    [
        ("Europe/Paris", datetime(2015, 1, 15, 12), datetime(2015, 1, 15, 13)),
        ("Europe/Paris", datetime(2015, 7, 15, 12), datetime(2015, 7, 15, 14)),
        ("Australia/Sydney", datetime(2015, 1, 15, 12), datetime(2015, 1, 15, 23)),
        ("Australia/Sydney", datetime(2015, 7, 15, 12), datetime(2015, 7, 15, 22)),
        ("Europe/Madrid", datetime(2015, 7, 15, 12), datetime(2015, 7, 15, 14)),
        ("Etc/UTC", datetime(2015, 7, 15, 12), datetime(2015, 7, 15, 12)),
    ],
)
def test_convert(registry, zone_name, value, expected):
    assert convert(value, zone_name, registry) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2015-07-15T12:00:00", datetime(2015, 7, 15, 14)),
        ("2015-07-15 12:00", datetime(2015, 7, 15, 14)),
        ("2015-07-15T12:00:00+05:00", datetime(2015, 7, 15, 14)),
        ("2015-01-15T12:00:00-05:00", datetime(2015, 1, 15, 13)),
    ],
)
def test_convert_parses_strings(registry, value, expected):
    assert convert(value, "Europe/Paris", registry) == expected


@pytest.mark.parametrize("hours", [-5, 0, 5, 9])
def test_convert_discards_carried_zone(registry, hours):
    naive = datetime(2015, 7, 15, 12)
    aware = naive.replace(tzinfo=timezone(timedelta(hours=hours)))

    assert convert(aware, "Europe/Paris", registry) == datetime(2015, 7, 15, 14)
    assert convert(aware, "Europe/Paris", registry) == convert(
        naive, "Europe/Paris", registry
    )


def test_convert_resolution_reads_aware_fields_as_utc(registry):
    value = datetime(2015, 7, 15, 12, tzinfo=timezone(timedelta(hours=5)))

    resolution = convert_resolution(value, "Europe/Paris", registry)

    assert resolution.resolution_time == datetime(2015, 7, 15, 12, tzinfo=timezone.utc)
    assert resolution.local_time == datetime(2015, 7, 15, 14)


def test_convert_applies_boundary_policy(registry):
    # 2015-03-29 01:00 UTC is the spring forward instant in Paris
    assert convert(datetime(2015, 3, 29, 2, 30), "Europe/Paris", registry) == (
        datetime(2015, 3, 29, 3, 30)
    )
    assert convert(datetime(2015, 3, 29, 3), "Europe/Paris", registry) == (
        datetime(2015, 3, 29, 5)
    )


def test_convert_resolution(registry):
    resolution = convert_resolution(
        datetime(2015, 7, 15, 12), "Europe/Madrid", registry
    )

    assert resolution.timezone_name == "Europe/Madrid"
    assert resolution.abbreviation == "CEST"
    assert resolution.offset_minutes == -120
    assert resolution.resolution_time == datetime(2015, 7, 15, 12, tzinfo=timezone.utc)
    assert resolution.local_time == datetime(2015, 7, 15, 14)
    assert resolution.next_transition == datetime(2015, 10, 25, 1, tzinfo=timezone.utc)


def test_convert_unknown_zone(registry):
    with pytest.raises(UnknownZoneError):
        convert(datetime(2015, 7, 15, 12), "Mars/Colony", registry)


def test_convert_with_empty_registry():
    with pytest.raises(UnknownZoneError):
        convert(datetime(2015, 7, 15, 12), "Europe/Paris", ZoneRegistry())


def test_convert_rejects_other_types(registry):
    with pytest.raises(TypeError):
        convert(1436961600000, "Europe/Paris", registry)


def test_convert_rejects_unparsable_strings(registry):
    with pytest.raises(ValueError):
        convert("the fifteenth of July", "Europe/Paris", registry)


def test_convert_uses_default_registry(default_bundle):
    assert convert(datetime(2015, 7, 15, 12), "Europe/Madrid") == datetime(
        2015, 7, 15, 14
    )


def test_default_registry_starts_empty_after_reset(default_bundle):
    from tzpack import default_registry, reset

    reset()

    assert len(default_registry) == 0
    with pytest.raises(UnknownZoneError):
        convert(datetime(2015, 7, 15, 12), "Europe/Paris")


def test_convert_resolution_matches_table_resolution(registry):
    dt = datetime(2015, 7, 15, 12)

    assert convert_resolution(dt, "Europe/Paris", registry) == registry.resolve(
        "Europe/Paris"
    ).resolve(dt)
