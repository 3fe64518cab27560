import pytest

from tzpack import ZoneRegistry, load_data, reset, unpack

PARIS = (
    "Europe/Paris|CET CEST|-10 -20|01010101010101010101010|"
    "1GNB0 1qM0 11A0 1o00 11A0 1o00 11A0 1o00 11A0 1qM0 WM0 1qM0 WM0 1qM0 "
    "11A0 1o00 11A0 1o00 11A0 1qM0 WM0 1qM0|11e6"
)
SYDNEY = (
    "Australia/Sydney|AEDT AEST|-b0 -a0|01010101010101010101010|"
    "1GQg0 1fA0 1cM0 1cM0 1cM0 1cM0 1cM0 1cM0 1cM0 1cM0 1cM0 1cM0 1cM0 1fA0 "
    "1cM0 1cM0 1cM0 1cM0 1cM0 1cM0 1cM0 1cM0|40e5"
)
ABIDJAN = "Africa/Abidjan|LMT GMT|g.8 0|01|-2ldXH.Q|48e5"
UTC = "Etc/UTC|UTC|0|0||"


@pytest.fixture
def packed() -> dict[str, str]:
    return {
        "Europe/Paris": PARIS,
        "Australia/Sydney": SYDNEY,
        "Africa/Abidjan": ABIDJAN,
        "Etc/UTC": UTC,
    }


@pytest.fixture
def bundle(packed) -> dict:
    return {
        "version": "2024a",
        "zones": list(packed.values()),
        "links": ["Europe/Paris|Europe/Madrid"],
    }


@pytest.fixture
def registry(bundle) -> ZoneRegistry:
    registry = ZoneRegistry()
    registry.load_data(bundle)
    return registry


@pytest.fixture
def paris():
    return unpack(PARIS)


@pytest.fixture
def sydney():
    return unpack(SYDNEY)


@pytest.fixture
def default_bundle(bundle):
    load_data(bundle)
    yield
    reset()
