import math
from dataclasses import dataclass, field

from .base60 import BASE60_DIGITS, pack_base60, unpack_base60
from .exceptions import MalformedPackedStringError
from .zone import ZoneTable


def _round_half_up(value: int | float) -> int:
    return math.floor(value + 0.5)


@dataclass
class PackedZone:
    """
    Fields of a packed zone string:
    ``name|abbrs|offsets|pattern|untils[|population]``.
    """

    name: str
    abbreviations: list[str]
    offsets: list[int | float]
    indices: list[int]
    untils: list[int | float]  # minute deltas
    population: int = 0
    packed: str | None = field(default=None, compare=False, repr=False)

    @classmethod
    def read(cls, packed: str) -> "PackedZone":
        fields = packed.split("|")
        if len(fields) not in (5, 6):
            raise MalformedPackedStringError(
                f"Expected 5 or 6 '|' separated fields, got {len(fields)}", packed
            )
        name, abbrs, offsets, pattern, untils, *rest = fields

        if not name:
            raise MalformedPackedStringError("Missing zone name", packed)

        return cls(
            name,
            cls._read_abbreviations(abbrs, packed),
            cls._read_offsets(offsets, packed),
            cls._read_indices(pattern, packed),
            cls._read_untils(untils),
            cls._read_population(rest[0] if rest else "", packed),
            packed=packed,
        )

    @classmethod
    def _read_abbreviations(cls, text: str, packed: str) -> list[str]:
        abbrs = text.split()
        if not abbrs:
            raise MalformedPackedStringError("Empty abbreviation list", packed)
        return abbrs

    @classmethod
    def _read_offsets(cls, text: str, packed: str) -> list[int | float]:
        offsets = [unpack_base60(token) for token in text.split()]
        if not offsets:
            raise MalformedPackedStringError("Empty offset list", packed)
        return offsets

    @classmethod
    def _read_indices(cls, text: str, packed: str) -> list[int]:
        # one base-60 digit per rule period
        indices = [unpack_base60(char) for char in text]
        if not indices:
            raise MalformedPackedStringError("Empty period pattern", packed)
        return indices

    @classmethod
    def _read_untils(cls, text: str) -> list[int | float]:
        return [unpack_base60(token) for token in text.split()]

    @classmethod
    def _read_population(cls, text: str, packed: str) -> int:
        if not text:
            return 0
        try:
            # moment data writes populations like "11e6"
            return int(float(text))
        except (ValueError, OverflowError):
            raise MalformedPackedStringError(
                f"Invalid population {text!r}", packed
            ) from None

    def unpack(self) -> ZoneTable:
        count = len(self.indices)
        if any(i >= len(self.abbreviations) for i in self.indices):
            raise MalformedPackedStringError(
                f"Zone {self.name!r} pattern selects a missing abbreviation",
                self.packed,
            )
        if any(i >= len(self.offsets) for i in self.indices):
            raise MalformedPackedStringError(
                f"Zone {self.name!r} pattern selects a missing offset", self.packed
            )
        if len(self.untils) not in (count - 1, count):
            raise MalformedPackedStringError(
                f"Zone {self.name!r} has {count} periods but "
                f"{len(self.untils)} transitions",
                self.packed,
            )

        try:
            return ZoneTable(
                self.name,
                tuple(self.abbreviations[i] for i in self.indices),
                tuple(self.offsets[i] for i in self.indices),
                self._untils_to_instants(self.untils, count),
                self.population,
            )
        except MalformedPackedStringError as exc:
            if self.packed is None:
                raise
            raise MalformedPackedStringError(str(exc), self.packed) from exc

    @staticmethod
    def _untils_to_instants(
        deltas: list[int | float], count: int
    ) -> tuple[int | float, ...]:
        instants: list[int | float] = []
        previous = 0
        for delta in deltas[: count - 1]:
            previous = _round_half_up(previous + delta * 60000)  # minutes to ms
            instants.append(previous)
        instants.append(math.inf)
        return tuple(instants)

    @classmethod
    def from_table(cls, table: ZoneTable) -> "PackedZone":
        """
        Collect the distinct (abbreviation, offset) pairs of ``table`` in
        first-seen order and express its transitions as minute deltas.
        """
        pairs: list[tuple[str, int | float]] = []
        indices = []
        for pair in zip(table.abbreviations, table.offsets):
            if pair not in pairs:
                pairs.append(pair)
            indices.append(pairs.index(pair))

        if len(pairs) > len(BASE60_DIGITS):
            raise MalformedPackedStringError(
                f"Zone {table.name!r} has more than {len(BASE60_DIGITS)} "
                "distinct rule types"
            )

        untils = []
        previous = 0
        for instant in table.transition_instants[:-1]:
            untils.append((instant - previous) / 60000)
            previous = instant

        return cls(
            table.name,
            [abbr for abbr, _ in pairs],
            [offset for _, offset in pairs],
            indices,
            untils,
            table.population,
        )

    def pack(self) -> str:
        fields = [
            self.name,
            " ".join(self.abbreviations),
            " ".join(pack_base60(offset) for offset in self.offsets),
            "".join(BASE60_DIGITS[i] for i in self.indices),
            " ".join(pack_base60(delta) for delta in self.untils),
        ]
        if self.population:
            fields.append(f"{self.population:d}")
        return "|".join(fields)


def unpack(packed: str) -> ZoneTable:
    """Decode a packed zone string into a :class:`ZoneTable`."""
    return PackedZone.read(packed).unpack()


def pack(table: ZoneTable) -> str:
    return PackedZone.from_table(table).pack()
