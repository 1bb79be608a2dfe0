"""envbind: bind environment variables to typed Python objects.

Module-level functions operate on a lazily created default :class:`Binder`
reading ``os.environ``; create your own ``Binder`` for isolation.

    from typing import Annotated

    import envbind
    from envbind import Required

    @dataclass
    class Database:
        host: Annotated[str, Required()]
        port: int = 5432

    db = envbind.bind(Database, prefix="db")   # DB_HOST, DB_PORT
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, TypeVar

from envbind.binder import Binder
from envbind.config.settings import EnvBindSettings, MissingPolicy
from envbind.errors import (
    EnvBindError,
    InvalidMember,
    MissingRequiredVariable,
    NoParserAvailable,
    NoSuitableConstructor,
    ParseFailure,
)
from envbind.keys import EnvVars, canonical, full_name
from envbind.markers import Discovery, Ignore, Include, Parser, Required, constructor, discovery
from envbind.parsers import (
    EnumParser,
    FunctionParser,
    ParserRegistry,
    TypedValueParser,
    ValueParser,
)
from envbind.result import BindError, BindResult
from envbind.sources import EnvironSource, KeySource, MappingSource

T = TypeVar("T")

_default_binder: Binder | None = None
_default_lock = threading.Lock()


def get_binder() -> Binder:
    """Return the default binder, creating it on first use."""
    global _default_binder
    if _default_binder is None:
        with _default_lock:
            if _default_binder is None:
                _default_binder = Binder.from_settings()
    return _default_binder


def set_default_binder(binder: Binder | None) -> None:
    """Replace the default binder; ``None`` recreates it lazily on next use."""
    global _default_binder
    with _default_lock:
        _default_binder = binder


def bind(cls: type[T], prefix: str | None = None) -> T:
    return get_binder().bind(cls, prefix)


def try_bind(cls: type[T], prefix: str | None = None) -> BindResult:
    return get_binder().try_bind(cls, prefix)


def register_parser(parser: ValueParser) -> bool:
    return get_binder().register_parser(parser)


def register_function(target: type[T], func: Callable[[str], T]) -> bool:
    return get_binder().register_function(target, func)


def can_parse(target: Any) -> bool:
    return get_binder().can_parse(target)


def env_vars(prefix: str | None = None) -> EnvVars:
    """Key context over the default binder's source."""
    return get_binder().vars(prefix)


__all__ = [
    "BindError",
    "BindResult",
    "Binder",
    "Discovery",
    "EnumParser",
    "EnvBindError",
    "EnvBindSettings",
    "EnvVars",
    "EnvironSource",
    "FunctionParser",
    "Ignore",
    "Include",
    "InvalidMember",
    "KeySource",
    "MappingSource",
    "MissingPolicy",
    "MissingRequiredVariable",
    "NoParserAvailable",
    "NoSuitableConstructor",
    "ParseFailure",
    "Parser",
    "ParserRegistry",
    "Required",
    "TypedValueParser",
    "ValueParser",
    "bind",
    "can_parse",
    "canonical",
    "constructor",
    "discovery",
    "env_vars",
    "full_name",
    "get_binder",
    "register_function",
    "register_parser",
    "set_default_binder",
    "try_bind",
]
