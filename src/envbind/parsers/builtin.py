"""Built-in parsers for booleans and numbers.

Numeric parsing is locale-invariant: ``.`` is the decimal point and ``,`` is
only ever a thousands separator. Surrounding whitespace and a leading sign
are accepted; Python-only spellings such as ``1_000`` or ``0x10`` are not.
"""

from __future__ import annotations

import math
import re
import struct
from decimal import Decimal, InvalidOperation

from envbind.parsers.base import TypedValueParser, ValueParser
from envbind.types import INTEGER_TYPES, Float32, Float64

_INTEGER = re.compile(r"^[+-]?\d[\d,]*$", re.ASCII)
_FLOAT = re.compile(r"^[+-]?(?:\d[\d,]*(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$", re.ASCII)
_FLOAT_SPECIALS: dict[str, float] = {
    "infinity": float("inf"),
    "+infinity": float("inf"),
    "-infinity": float("-inf"),
    "nan": float("nan"),
}


def _strip_thousands(text: str) -> str:
    return text.replace(",", "")


class IntegerParser(TypedValueParser[int]):
    """``int`` and the fixed-width types from :mod:`envbind.types`."""

    def convert(self, value: str) -> int:
        text = value.strip()
        if not _INTEGER.match(text):
            msg = f"{value!r} is not a valid integer"
            raise ValueError(msg)
        number = int(_strip_thousands(text))
        low = getattr(self.target, "min_value", None)
        high = getattr(self.target, "max_value", None)
        if low is not None and high is not None and not low <= number <= high:
            msg = f"{number} is outside the range of {self.target.__name__} [{low}, {high}]"
            raise ValueError(msg)
        return self.target(number)


class BoolParser(TypedValueParser[bool]):
    """``true``/``false``, case-insensitive."""

    def __init__(self) -> None:
        super().__init__(bool)

    def convert(self, value: str) -> bool:
        text = value.strip().lower()
        if text == "true":
            return True
        if text == "false":
            return False
        msg = f"{value!r} is not a valid boolean (expected 'true' or 'false')"
        raise ValueError(msg)


class FloatParser(TypedValueParser[float]):
    """``float``, :class:`Float32` and :class:`Float64`.

    Accepts exponents and the ``Infinity``/``NaN`` symbols. ``Float32`` values
    are rounded to single precision; finite values beyond its range are
    rejected.
    """

    def convert(self, value: str) -> float:
        text = value.strip()
        special = _FLOAT_SPECIALS.get(text.lower())
        if special is not None:
            number = special
        elif _FLOAT.match(text):
            number = float(_strip_thousands(text))
        else:
            msg = f"{value!r} is not a valid number"
            raise ValueError(msg)

        if issubclass(self.target, Float32):
            try:
                (single,) = struct.unpack("f", struct.pack("f", number))
            except OverflowError:
                single = math.inf
            if math.isinf(single) and not math.isinf(number):
                msg = f"{value!r} is outside the range of Float32"
                raise ValueError(msg)
            number = single
        return self.target(number)


class DecimalParser(TypedValueParser[Decimal]):
    """Arbitrary-precision :class:`~decimal.Decimal`."""

    def __init__(self) -> None:
        super().__init__(Decimal)

    def convert(self, value: str) -> Decimal:
        text = value.strip()
        if not _FLOAT.match(text):
            msg = f"{value!r} is not a valid decimal"
            raise ValueError(msg)
        try:
            return Decimal(_strip_thousands(text))
        except InvalidOperation as exc:
            msg = f"{value!r} is not a valid decimal"
            raise ValueError(msg) from exc


def default_parsers() -> list[ValueParser]:
    """Return the bootstrap parsers in registration order.

    ``int`` precedes its fixed-width subclasses and ``bool`` so that neither
    captures plain ``int`` targets; likewise ``float`` precedes ``Float32``.
    """
    parsers: list[ValueParser] = [IntegerParser(int)]
    parsers.extend(IntegerParser(t) for t in INTEGER_TYPES)
    parsers.append(BoolParser())
    parsers.extend(FloatParser(t) for t in (float, Float32, Float64))
    parsers.append(DecimalParser())
    return parsers
