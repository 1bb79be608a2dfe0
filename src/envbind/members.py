"""Member discovery.

Candidates are the public annotated attributes of a class (``FieldMember``)
and its public properties whose getter declares a return type
(``PropertyMember``). The class's :class:`~envbind.markers.Discovery`
policy then decides which candidates take part in binding.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, get_origin

from envbind.errors import InvalidMember
from envbind.markers import AnnotationInfo, Discovery, discovery_policy, read_annotation
from envbind.parsers.registry import ParserRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Member(ABC):
    """A bindable attribute of ``owner``."""

    name: str
    owner: type
    annotation: AnnotationInfo
    writable: bool

    @property
    def declared_type(self) -> Any:
        return self.annotation.declared_type

    @property
    def value_type(self) -> Any:
        return self.annotation.value_type

    @property
    def is_required(self) -> bool:
        return self.annotation.required

    @property
    def is_nullable(self) -> bool:
        return self.annotation.nullable

    @property
    def is_opted_in(self) -> bool:
        return self.annotation.include

    @property
    def is_opted_out(self) -> bool:
        return self.annotation.ignore

    @property
    def parser(self) -> Any:
        return self.annotation.parser

    @abstractmethod
    def get(self, obj: Any) -> Any: ...

    @abstractmethod
    def set(self, obj: Any, value: Any) -> None: ...


@dataclass(frozen=True)
class FieldMember(Member):
    """Plain annotated attribute."""

    def get(self, obj: Any) -> Any:
        return getattr(obj, self.name)

    def set(self, obj: Any, value: Any) -> None:
        if not self.writable:
            raise InvalidMember(self.owner, self.name)
        setattr(obj, self.name, value)


@dataclass(frozen=True)
class PropertyMember(Member):
    """``property`` with a typed getter; writable only with a setter."""

    prop: property

    def get(self, obj: Any) -> Any:
        return self.prop.__get__(obj, type(obj))

    def set(self, obj: Any, value: Any) -> None:
        if self.prop.fset is None:
            raise InvalidMember(self.owner, self.name)
        self.prop.__set__(obj, value)


_CLASS_LEVEL_PREFIXES = ("ClassVar", "typing.ClassVar", "InitVar", "dataclasses.InitVar")


def _is_class_level(hint: Any) -> bool:
    if isinstance(hint, str):
        return hint.startswith(_CLASS_LEVEL_PREFIXES)
    if hint is ClassVar or get_origin(hint) is ClassVar:
        return True
    return hint is dataclasses.InitVar or isinstance(hint, dataclasses.InitVar)


def _may_carry_markers(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return "Annotated" in annotation
    return get_origin(annotation) is Annotated


def _fields_frozen(cls: type) -> bool:
    if issubclass(cls, tuple):
        return True
    if dataclasses.is_dataclass(cls):
        return bool(cls.__dataclass_params__.frozen)  # type: ignore[attr-defined]
    config = getattr(cls, "model_config", None)
    return isinstance(config, dict) and bool(config.get("frozen"))


def collect_candidates(cls: type) -> dict[str, Member]:
    """Introspect every public field and typed property of *cls*.

    The most-derived definition of a name wins; within one class body a
    property shadows an annotation of the same name. A property that does not
    qualify still hides an inherited field of the same name.
    """
    frozen = _fields_frozen(cls)
    candidates: dict[str, Member] = {}

    for klass in reversed(cls.__mro__):
        if klass is object:
            continue

        names = [
            name
            for name, raw in inspect.get_annotations(klass).items()
            if not name.startswith("_") and not _is_class_level(raw)
        ]
        hints = inspect.get_annotations(klass, eval_str=True) if names else {}
        for name in names:
            hint = hints[name]
            if _is_class_level(hint):
                continue
            candidates[name] = FieldMember(
                name=name,
                owner=cls,
                annotation=read_annotation(hint),
                writable=not frozen,
            )

        for name, attr in klass.__dict__.items():
            if name.startswith("_") or not isinstance(attr, property):
                continue
            raw = inspect.get_annotations(attr.fget).get("return") if attr.fget else None
            if raw is None or (attr.fset is None and not _may_carry_markers(raw)):
                candidates.pop(name, None)
                continue
            hint = inspect.get_annotations(attr.fget, eval_str=True)["return"]
            candidates[name] = PropertyMember(
                name=name,
                owner=cls,
                annotation=read_annotation(hint),
                writable=attr.fset is not None,
                prop=attr,
            )

    return candidates


def is_bindable(annotation: AnnotationInfo, registry: ParserRegistry) -> bool:
    """Strings pass through; everything else needs a parser."""
    if annotation.value_type is str or annotation.parser is not None:
        return True
    return registry.can_parse(annotation.value_type)


def discover_members(
    cls: type,
    registry: ParserRegistry,
    policy: Discovery | None = None,
) -> dict[str, Member]:
    """Return the binding candidates of *cls*, keyed by member name.

    Explicit ``Parser(...)`` markers are registered into *registry* before the
    eligibility check. Members that cannot be parsed are dropped silently, as
    are non-writable ones unless a marker explicitly selects them (the plan
    builder rejects those).
    """
    policy = policy or discovery_policy(cls)
    selected: dict[str, Member] = {}

    for name, member in collect_candidates(cls).items():
        if policy is Discovery.OPT_OUT and member.is_opted_out:
            continue
        if policy is Discovery.OPT_IN and not member.is_opted_in:
            continue
        if member.parser is not None:
            registry.register(member.parser)
        if not is_bindable(member.annotation, registry):
            logger.debug(
                "Skipping %s.%s: no parser for %r", cls.__qualname__, name, member.value_type
            )
            continue
        if not member.writable and not (member.is_opted_in or member.is_required):
            continue
        selected[name] = member

    return selected
