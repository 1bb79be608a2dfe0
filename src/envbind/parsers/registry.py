"""Ordered, append-only value parser registry.

INVARIANT: Registration order is the tie-break. ``resolve`` returns the
first parser whose capability test passes; later registrations never shadow
earlier ones.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from typing import Any, TypeVar

from envbind.parsers.base import FunctionParser, ValueParser
from envbind.parsers.builtin import default_parsers

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ParserRegistry:
    """Holds the parsers available to one binder.

    Appends take a lock; lookups iterate a snapshot, so concurrent
    registration never exposes a half-updated list.
    """

    def __init__(self, parsers: Iterable[ValueParser] = ()) -> None:
        self._lock = threading.Lock()
        self._parsers: tuple[ValueParser, ...] = ()
        self.register_many(parsers)

    @classmethod
    def with_defaults(cls) -> ParserRegistry:
        """Registry pre-loaded with the built-in boolean and numeric parsers."""
        return cls(default_parsers())

    def register(self, parser: ValueParser) -> bool:
        """Append *parser*. Returns False if a capability-equal parser exists."""
        with self._lock:
            if parser in self._parsers:
                return False
            self._parsers = (*self._parsers, parser)
        logger.debug("Registered parser: %r", parser)
        return True

    def register_function(self, target: type[T], func: Callable[[str], T]) -> bool:
        """Register a ``str -> T`` callable for targets assignable from *target*."""
        return self.register(FunctionParser(target, func))

    def register_many(self, parsers: Iterable[ValueParser]) -> int:
        """Register each parser in order; returns how many were new."""
        return sum(1 for parser in parsers if self.register(parser))

    def can_parse(self, target: Any) -> bool:
        return self.resolve(target) is not None

    def resolve(self, target: Any) -> ValueParser | None:
        for parser in self._parsers:
            if parser.can_parse_into(target):
                return parser
        return None

    def __iter__(self) -> Iterator[ValueParser]:
        return iter(self._parsers)

    def __len__(self) -> int:
        return len(self._parsers)

    def __contains__(self, parser: object) -> bool:
        return parser in self._parsers
