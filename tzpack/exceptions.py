class TzPackError(Exception):
    """
    Base class for errors raised by tzpack.
    """


class UnknownZoneError(TzPackError, LookupError):
    """
    Raised when a zone name has no packed entry, no decoded table and no
    directly resolvable link.
    """

    def __init__(self, name: str | None) -> None:
        super().__init__(f"Unknown time zone: {name!r}")
        self.name = name


class MalformedPackedStringError(TzPackError, ValueError):
    """
    Raised when a packed zone string (or link) does not have the expected
    structure.
    """

    def __init__(self, message: str, packed: str | None = None) -> None:
        super().__init__(message if packed is None else f"{message}: {packed!r}")
        self.packed = packed
