"""Binding markers and annotation reading.

Markers ride on ``typing.Annotated`` metadata, either as instances or bare
classes::

    @discovery(Discovery.OPT_IN)
    class Settings:
        host: Annotated[str, Include(), Required()]
        port: Annotated[int, Include]
        tags: Annotated[list[str], Include, Parser(lambda s: s.split(","))]
        scratch: str = ""          # ignored under OPT_IN

Alternate constructors are class methods decorated with :func:`constructor`.
"""

from __future__ import annotations

import types
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Annotated, Any, TypeVar, Union, get_args, get_origin

from envbind.parsers.base import FunctionParser, ValueParser, is_class

C = TypeVar("C", bound=type)

DISCOVERY_ATTR = "__envbind_discovery__"
CONSTRUCTOR_ATTR = "__envbind_constructor__"


class Discovery(StrEnum):
    """Member selection policy for a class."""

    OPT_OUT = "opt_out"
    OPT_IN = "opt_in"


def discovery(policy: Discovery | str) -> Callable[[C], C]:
    """Class decorator selecting the member discovery policy."""
    resolved = Discovery(policy)

    def decorate(cls: C) -> C:
        setattr(cls, DISCOVERY_ATTR, resolved)
        return cls

    return decorate


def discovery_policy(cls: type) -> Discovery:
    """Policy declared on *cls* itself; subclasses do not inherit it."""
    return cls.__dict__.get(DISCOVERY_ATTR, Discovery.OPT_OUT)


def constructor(func: Callable[..., Any]) -> classmethod:
    """Mark *func* as an alternate constructor and wrap it in ``classmethod``."""
    setattr(func, CONSTRUCTOR_ATTR, True)
    return classmethod(func)


def is_constructor(attr: Any) -> bool:
    return isinstance(attr, classmethod) and getattr(attr.__func__, CONSTRUCTOR_ATTR, False)


@dataclass(frozen=True)
class Include:
    """Opt a member in (``Discovery.OPT_IN``)."""


@dataclass(frozen=True)
class Ignore:
    """Opt a member out (``Discovery.OPT_OUT``)."""


@dataclass(frozen=True)
class Required:
    """Key must be present, regardless of nullability or defaults."""


@dataclass(frozen=True)
class Parser:
    """Attach an explicit parser to a member or constructor parameter.

    *parser* may be a :class:`ValueParser` instance, a ``ValueParser``
    subclass (instantiated with no arguments), or a ``str -> T`` callable.
    """

    parser: Any

    def resolve(self, value_type: Any) -> ValueParser:
        parser = self.parser
        if isinstance(parser, ValueParser):
            return parser
        if is_class(parser) and issubclass(parser, ValueParser):
            return parser()
        if callable(parser):
            return FunctionParser(value_type, parser)
        msg = f"Parser marker expects a ValueParser or callable, got {parser!r}"
        raise TypeError(msg)


@dataclass(frozen=True)
class AnnotationInfo:
    """What an annotation says about binding.

    ``declared_type`` is the annotation without ``Annotated`` metadata;
    ``value_type`` additionally drops ``None`` from optional unions.
    """

    declared_type: Any
    value_type: Any
    nullable: bool = False
    required: bool = False
    include: bool = False
    ignore: bool = False
    parser: ValueParser | None = None


def _split_annotated(hint: Any) -> tuple[Any, tuple[Any, ...]]:
    if get_origin(hint) is Annotated:
        return hint.__origin__, tuple(hint.__metadata__)
    return hint, ()


def _has(metadata: tuple[Any, ...], marker: type) -> bool:
    return any(m is marker or isinstance(m, marker) for m in metadata)


def read_annotation(hint: Any) -> AnnotationInfo:
    """Interpret a resolved type hint, markers included."""
    declared, metadata = _split_annotated(hint)
    value_type = declared
    nullable = False

    if get_origin(declared) in (Union, types.UnionType):
        args = get_args(declared)
        rest = tuple(a for a in args if a is not type(None))
        nullable = len(rest) != len(args)
        if len(rest) == 1:
            value_type, inner = _split_annotated(rest[0])
            metadata += inner
        else:
            value_type = Union[rest]  # noqa: UP007

    parser_marker = next((m for m in metadata if isinstance(m, Parser)), None)
    return AnnotationInfo(
        declared_type=declared,
        value_type=value_type,
        nullable=nullable,
        required=_has(metadata, Required),
        include=_has(metadata, Include),
        ignore=_has(metadata, Ignore),
        parser=parser_marker.resolve(value_type) if parser_marker else None,
    )
