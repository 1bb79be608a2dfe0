"""Fixed-width numeric types.

Python integers are unbounded, so width-restricted targets are expressed as
``int``/``float`` subclasses. The built-in parsers range-check them; instances
behave exactly like their base type.
"""

from __future__ import annotations

from typing import ClassVar


class _FixedInt(int):
    min_value: ClassVar[int]
    max_value: ClassVar[int]


class Int8(_FixedInt):
    min_value = -(2**7)
    max_value = 2**7 - 1


class UInt8(_FixedInt):
    min_value = 0
    max_value = 2**8 - 1


class Int16(_FixedInt):
    min_value = -(2**15)
    max_value = 2**15 - 1


class UInt16(_FixedInt):
    min_value = 0
    max_value = 2**16 - 1


class Int32(_FixedInt):
    min_value = -(2**31)
    max_value = 2**31 - 1


class UInt32(_FixedInt):
    min_value = 0
    max_value = 2**32 - 1


class Int64(_FixedInt):
    min_value = -(2**63)
    max_value = 2**63 - 1


class UInt64(_FixedInt):
    min_value = 0
    max_value = 2**64 - 1


class Float32(float):
    """Single-precision float; values are rounded to the nearest float32."""


class Float64(float):
    """Double-precision float (same range as ``float``)."""


INTEGER_TYPES: tuple[type[_FixedInt], ...] = (
    Int8,
    UInt8,
    Int16,
    UInt16,
    Int32,
    UInt32,
    Int64,
    UInt64,
)
