import string

from .exceptions import MalformedPackedStringError

BASE60_DIGITS = string.digits + string.ascii_lowercase + string.ascii_uppercase[:24]
_DIGIT_VALUES = {char: value for value, char in enumerate(BASE60_DIGITS)}


def _digit_value(char: str, token: str) -> int:
    try:
        return _DIGIT_VALUES[char]
    except KeyError:
        raise MalformedPackedStringError(
            f"Invalid base-60 digit {char!r}", token
        ) from None


def unpack_base60(token: str) -> int | float:
    """
    Decode a base-60 token such as ``"1GNB0"``, ``"-10"`` or ``"g.8"``.

    Whole digits accumulate as ``value * 60 + digit``; the k-th digit after
    the ``.`` contributes ``digit / 60**k``. Integral tokens decode to int.
    """
    if not token:
        raise MalformedPackedStringError("Empty base-60 token", token)

    sign = 1
    body = token
    if body[0] == "-":
        sign = -1
        body = body[1:]

    whole, dot, fractional = body.partition(".")
    if not whole and not fractional:
        raise MalformedPackedStringError("Base-60 token has no digits", token)
    if "." in fractional:
        raise MalformedPackedStringError("Base-60 token has more than one '.'", token)

    value = 0
    for char in whole:
        value = value * 60 + _digit_value(char, token)

    if not dot:
        return sign * value

    out = float(value)
    multiplier = 1.0
    for char in fractional:
        multiplier /= 60
        out += _digit_value(char, token) * multiplier

    return sign * out


def pack_base60(value: int | float, precision: int = 6) -> str:
    """
    Encode ``value`` as a base-60 token, inverse of :func:`unpack_base60`.

    At most ``precision`` fractional digits are emitted; trailing zero
    digits are dropped.
    """
    sign = "-" if value < 0 else ""
    value = abs(value)
    whole = int(value)
    scale = 60**precision
    scaled = round((value - whole) * scale)
    if scaled >= scale:
        whole += 1
        scaled = 0

    digits = ""
    while whole:
        whole, remainder = divmod(whole, 60)
        digits = BASE60_DIGITS[remainder] + digits
    digits = digits or "0"

    fractional = ""
    for _ in range(precision):
        scaled, remainder = divmod(scaled, 60)
        fractional = BASE60_DIGITS[remainder] + fractional
    fractional = fractional.rstrip("0")

    if fractional:
        return f"{sign}{digits}.{fractional}"
    if digits == "0":
        return "0"
    return f"{sign}{digits}"
