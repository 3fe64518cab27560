from .base60 import pack_base60, unpack_base60
from .convert import convert, convert_resolution, default_registry, load_data, reset
from .exceptions import MalformedPackedStringError, TzPackError, UnknownZoneError
from .models import ZonePeriod, ZoneResolution
from .packed import PackedZone, pack, unpack
from .registry import DecodedZone, RawZone, ZoneRegistry, normalize_name
from .zone import ZoneTable

__all__ = [
    "DecodedZone",
    "MalformedPackedStringError",
    "PackedZone",
    "RawZone",
    "TzPackError",
    "UnknownZoneError",
    "ZonePeriod",
    "ZoneRegistry",
    "ZoneResolution",
    "ZoneTable",
    "convert",
    "convert_resolution",
    "default_registry",
    "load_data",
    "normalize_name",
    "pack",
    "pack_base60",
    "reset",
    "unpack",
    "unpack_base60",
]
