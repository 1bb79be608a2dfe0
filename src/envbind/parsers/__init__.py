"""Value parsers: string to typed value conversion."""

from envbind.parsers.base import EnumParser, FunctionParser, TypedValueParser, ValueParser
from envbind.parsers.builtin import (
    BoolParser,
    DecimalParser,
    FloatParser,
    IntegerParser,
    default_parsers,
)
from envbind.parsers.registry import ParserRegistry

__all__ = [
    "BoolParser",
    "DecimalParser",
    "EnumParser",
    "FloatParser",
    "FunctionParser",
    "IntegerParser",
    "ParserRegistry",
    "TypedValueParser",
    "ValueParser",
    "default_parsers",
]
