"""Value parser contracts.

A parser declares which targets it can produce (its *capability*) and
converts a raw string into a value. Parsers compare by capability rather
than identity, so registering a second parser with the same class and target
is a no-op.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Hashable
from enum import Enum
from types import GenericAlias
from typing import Any, Generic, TypeVar

from envbind.errors import type_name

T = TypeVar("T")


def is_class(target: Any) -> bool:
    """True for real classes; parameterized generics such as ``list[str]`` are not."""
    return isinstance(target, type) and not isinstance(target, GenericAlias)


class ValueParser(ABC):
    """Converts strings into values of the types it can parse into."""

    @abstractmethod
    def can_parse_into(self, target: Any) -> bool:
        """Return True if this parser can produce a value for *target*."""

    @abstractmethod
    def parse(self, value: str, target: Any) -> Any:
        """Convert *value* for *target*; raise ``ValueError`` on bad input."""

    def capability(self) -> Hashable:
        """Key used for equality between parsers."""
        return type(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValueParser):
            return NotImplemented
        return self.capability() == other.capability()

    def __hash__(self) -> int:
        return hash(self.capability())


class TypedValueParser(ValueParser, Generic[T]):
    """Parser producing a single concrete type.

    Its capability is "assignable to *target*": it can parse into any type
    that ``self.target`` is a subclass of.
    """

    target: type[T]

    def __init__(self, target: type[T]) -> None:
        self.target = target

    @abstractmethod
    def convert(self, value: str) -> T:
        """Convert *value* into ``self.target``."""

    def can_parse_into(self, target: Any) -> bool:
        return is_class(target) and is_class(self.target) and issubclass(self.target, target)

    def parse(self, value: str, target: Any) -> T:
        return self.convert(value)

    def capability(self) -> Hashable:
        return (type(self), self.target)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({type_name(self.target)})"


class FunctionParser(TypedValueParser[T]):
    """Wraps a plain ``str -> T`` callable."""

    def __init__(self, target: type[T], func: Callable[[str], T]) -> None:
        super().__init__(target)
        self.func = func

    def convert(self, value: str) -> T:
        return self.func(value)


class EnumParser(ValueParser):
    """Parses any :class:`~enum.Enum` subclass.

    Matches member names case-insensitively first, then member values by
    their string form. Not part of the default registry.
    """

    def can_parse_into(self, target: Any) -> bool:
        return is_class(target) and issubclass(target, Enum)

    def parse(self, value: str, target: Any) -> Any:
        text = value.strip()
        for member in target:
            if member.name.lower() == text.lower():
                return member
        for member in target:
            if str(member.value) == text:
                return member
        choices = ", ".join(m.name for m in target)
        msg = f"{value!r} is not a member of {target.__name__} ({choices})"
        raise ValueError(msg)

    def __repr__(self) -> str:
        return "EnumParser()"
