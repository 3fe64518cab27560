import json
import logging
import os
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import IO, Any

from .exceptions import MalformedPackedStringError, UnknownZoneError
from .packed import unpack
from .zone import ZoneTable

logger = logging.getLogger(__name__)

DATA_ENV_VAR = "TZPACK_DATA"


@dataclass(frozen=True)
class RawZone:
    """
    Registry slot holding a packed string that has not been decoded yet.
    """

    packed: str


@dataclass(frozen=True)
class DecodedZone:
    """
    Registry slot holding a decoded zone table.
    """

    table: ZoneTable


def normalize_name(name: str | None) -> str:
    return (name or "").lower().replace("/", "_")


def _as_list(items: str | Iterable[str] | None) -> list[str]:
    if items is None:
        return []
    if isinstance(items, str):
        return [items]
    return list(items)


class ZoneRegistry:
    """
    Store of packed zones and links, keyed by normalized name.

    Packed strings are decoded on first lookup and the resulting table is
    cached in place of the raw entry. Lookups through a link follow a single
    hop and cache a copy of the target carrying the link's display name.
    """

    def __init__(self) -> None:
        self._zones: dict[str, RawZone | DecodedZone] = {}
        self._links: dict[str, str] = {}
        self._names: dict[str, str] = {}
        # tables synthesized through a link, kept apart so that registering
        # the link target again can drop them
        self._linked: dict[str, ZoneTable] = {}
        self._lock = threading.RLock()
        self.version: str | None = None

    def register_zones(self, packed: str | Iterable[str] | None) -> None:
        with self._lock:
            for item in _as_list(packed):
                name = item.split("|", 1)[0]
                normalized = normalize_name(name)
                self._zones[normalized] = RawZone(item)
                self._names[normalized] = name
                self._invalidate_links_to(normalized)

    def register_links(self, links: str | Iterable[str] | None) -> None:
        with self._lock:
            for item in _as_list(links):
                alias = item.split("|")
                if len(alias) != 2 or not all(alias):
                    raise MalformedPackedStringError(
                        "Expected a 'Name|Alias' link", item
                    )
                normal0 = normalize_name(alias[0])
                normal1 = normalize_name(alias[1])

                self._links[normal0] = normal1
                self._names[normal0] = alias[0]

                self._links[normal1] = normal0
                self._names[normal1] = alias[1]

                self._linked.pop(normal0, None)
                self._linked.pop(normal1, None)

    def load_data(self, data: Mapping[str, Any]) -> None:
        """
        Register the ``zones`` and ``links`` of a packed data bundle.
        """
        zones = _as_list(data.get("zones"))
        links = _as_list(data.get("links"))
        with self._lock:
            self.register_zones(zones)
            self.register_links(links)
            if data.get("version") is not None:
                self.version = data["version"]
        logger.debug(
            "Loaded %d zones and %d links (version %s)",
            len(zones),
            len(links),
            self.version,
        )

    def get(self, name: str | None) -> ZoneTable | None:
        normalized = normalize_name(name)
        with self._lock:
            table = self._get_direct(normalized)
            if table is not None:
                return table

            table = self._linked.get(normalized)
            if table is not None:
                return table

            target = self._links.get(normalized)
            if target is None:
                return None

            # single hop: the target must be a zone, not another link
            target_table = self._get_direct(target)
            if target_table is None:
                logger.debug(
                    "Link %r -> %r does not point at a zone",
                    self._names.get(normalized),
                    self._names.get(target),
                )
                return None

            table = target_table.with_name(self._names[normalized])
            self._linked[normalized] = table
            return table

    def resolve(self, name: str | None) -> ZoneTable:
        table = self.get(name)
        if table is None:
            raise UnknownZoneError(name)
        return table

    def _get_direct(self, normalized: str) -> ZoneTable | None:
        match self._zones.get(normalized):
            case DecodedZone(table):
                return table
            case RawZone(packed):
                table = unpack(packed)
                self._zones[normalized] = DecodedZone(table)
                logger.debug(
                    "Decoded zone %r with %d rule periods", table.name, len(table)
                )
                return table
            case _:
                return None

    def _invalidate_links_to(self, normalized: str) -> None:
        self._linked.pop(normalized, None)
        for alias, target in self._links.items():
            if target == normalized:
                self._linked.pop(alias, None)

    def names(self) -> list[str]:
        """Display names of every known zone and link."""
        with self._lock:
            return sorted(self._names.values())

    def clear(self) -> None:
        with self._lock:
            self._zones.clear()
            self._links.clear()
            self._names.clear()
            self._linked.clear()
            self.version = None

    def __contains__(self, name: object) -> bool:
        """
        Whether ``name`` names a zone or a link to one. Nothing is decoded,
        so a malformed packed entry still counts as present.
        """
        if not isinstance(name, str):
            return False
        normalized = normalize_name(name)
        with self._lock:
            if normalized in self._zones:
                return True
            return self._links.get(normalized) in self._zones

    def __len__(self) -> int:
        return len(self._names)

    @classmethod
    def from_fileobj(cls, file: IO[str] | IO[bytes]) -> "ZoneRegistry":
        registry = cls()
        registry.load_data(json.load(file))
        return registry

    @classmethod
    def from_path(cls, path: str) -> "ZoneRegistry":
        """Read a packed JSON data bundle from ``path``."""
        real = os.path.realpath(path)
        with open(real, "rb") as file:
            return cls.from_fileobj(file)

    @classmethod
    def from_environment(cls) -> "ZoneRegistry":
        """
        Registry loaded from the bundle named by ``TZPACK_DATA``, or an
        empty registry when the variable is not set.
        """
        path = os.environ.get(DATA_ENV_VAR)
        if not path:
            return cls()
        return cls.from_path(path)

    def __repr__(self) -> str:
        return (
            f"ZoneRegistry(zones={len(self._zones)}, "
            f"links={len(self._links)}, version={self.version!r})"
        )
