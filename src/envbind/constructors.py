"""Constructor resolution.

A class's constructors are, in declaration order, the class itself (its
``__init__`` signature) followed by the class methods in its body that are
decorated with :func:`~envbind.markers.constructor`. Abstract classes have
none.

Selection is deterministic:

1. the first parameterless constructor, if any;
2. otherwise the first constructor whose non-optional parameters can all be
   bound (``str``, a registered parser, or an explicit ``Parser`` marker);
3. otherwise :class:`~envbind.errors.NoSuitableConstructor`.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from envbind.errors import NoSuitableConstructor
from envbind.markers import AnnotationInfo, is_constructor, read_annotation
from envbind.members import is_bindable
from envbind.parsers.registry import ParserRegistry

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True)
class ParameterDescriptor:
    name: str
    annotation: AnnotationInfo
    kind: inspect._ParameterKind
    default: Any = inspect.Parameter.empty

    @property
    def declared_type(self) -> Any:
        return self.annotation.declared_type

    @property
    def value_type(self) -> Any:
        return self.annotation.value_type

    @property
    def has_default(self) -> bool:
        return self.default is not inspect.Parameter.empty

    @property
    def is_optional(self) -> bool:
        """Has a default and is not marked ``Required``."""
        return self.has_default and not self.annotation.required

    @property
    def is_nullable(self) -> bool:
        return self.annotation.nullable

    @property
    def parser(self) -> Any:
        return self.annotation.parser


@dataclass(frozen=True)
class ConstructorDescriptor:
    name: str
    factory: Callable[..., Any]
    parameters: tuple[ParameterDescriptor, ...]

    @property
    def is_parameterless(self) -> bool:
        return not self.parameters

    @property
    def parameter_names(self) -> frozenset[str]:
        return frozenset(p.name for p in self.parameters)

    def invoke(self, arguments: Mapping[str, Any]) -> Any:
        """Call the factory with *arguments* keyed by parameter name.

        Omitted keyword-capable parameters fall back to the factory's own
        defaults; omitted positional-only ones receive their declared default.
        """
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for param in self.parameters:
            if param.kind is inspect.Parameter.POSITIONAL_ONLY:
                args.append(arguments.get(param.name, param.default))
            elif param.name in arguments:
                kwargs[param.name] = arguments[param.name]
        return self.factory(*args, **kwargs)


def _describe(
    name: str, factory: Callable[..., Any], signature: inspect.Signature
) -> ConstructorDescriptor:
    empty = inspect.Parameter.empty
    params = tuple(
        ParameterDescriptor(
            name=p.name,
            annotation=read_annotation(Any if p.annotation is empty else p.annotation),
            kind=p.kind,
            default=p.default,
        )
        for p in signature.parameters.values()
        if p.kind not in _VARIADIC
    )
    return ConstructorDescriptor(name=name, factory=factory, parameters=params)


def list_constructors(cls: type) -> list[ConstructorDescriptor]:
    """Every public constructor of *cls*, in declaration order."""
    if inspect.isabstract(cls):
        return []

    constructors: list[ConstructorDescriptor] = []
    try:
        signature = inspect.signature(cls, eval_str=True)
    except (TypeError, ValueError):
        signature = None
    if signature is not None:
        constructors.append(_describe("__init__", cls, signature))

    for name, attr in cls.__dict__.items():
        if name.startswith("_") or not is_constructor(attr):
            continue
        factory = getattr(cls, name)
        constructors.append(_describe(name, factory, inspect.signature(factory, eval_str=True)))

    return constructors


def resolve_constructor(cls: type, registry: ParserRegistry) -> ConstructorDescriptor:
    """Pick the constructor used to instantiate *cls*.

    Explicit ``Parser`` markers on parameters are registered into *registry*
    first, so they count towards qualification.
    """
    constructors = list_constructors(cls)
    for ctor in constructors:
        for param in ctor.parameters:
            if param.parser is not None:
                registry.register(param.parser)

    for ctor in constructors:
        if ctor.is_parameterless:
            return ctor

    for ctor in constructors:
        if all(is_bindable(p.annotation, registry) for p in ctor.parameters if not p.is_optional):
            return ctor

    raise NoSuitableConstructor(cls)
