"""Tests for member discovery."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, ClassVar

import pytest
from pydantic import BaseModel

from envbind.errors import InvalidMember
from envbind.markers import Discovery, Ignore, Include, Parser, Required, discovery
from envbind.members import FieldMember, PropertyMember, collect_candidates, discover_members
from envbind.parsers.registry import ParserRegistry


class Opaque:
    """No parser exists for this type."""


class Mixed:
    name: str = ""
    port: int = 0
    ratio: float | None = None
    handle: Opaque | None = None
    secret: Annotated[str, Ignore()] = ""
    limit: ClassVar[int] = 10
    _private: str = ""

    def __init__(self) -> None:
        self._level = 0

    @property
    def level(self) -> int:
        return self._level

    @level.setter
    def level(self, value: int) -> None:
        self._level = value

    @property
    def computed(self) -> str:
        return "computed"

    @property
    def untyped(self):  # noqa: ANN201
        return None


@discovery(Discovery.OPT_IN)
class OptIn:
    foo: Annotated[str, Include(), Required()] = ""
    doesnt_exist1: str = "bar"
    doesnt_exist2: str | None = None


class Base:
    shared: str = "base"


class Derived(Base):
    shared: int = 0  # type: ignore[assignment]
    extra: bool = False


@dataclass(frozen=True)
class Frozen:
    name: str
    derived: int = field(init=False, default=0)


@dataclass(frozen=True)
class FrozenRequired:
    name: str
    derived: Annotated[int, Required()] = field(init=False, default=0)


@discovery(Discovery.OPT_IN)
class ReadOnlyIncluded:
    @property
    def value(self) -> Annotated[str, Include()]:
        return "x"


class FieldBase:
    level: int
    label: str


class ComputedLevel(FieldBase):
    @property
    def level(self) -> int:
        return 7


class UntypedLevel(FieldBase):
    @property
    def level(self):  # noqa: ANN201
        return 7


class WithParser:
    tags: Annotated[list[str], Parser(lambda raw: [t.strip() for t in raw.split(",")])] = []


class PydanticModel(BaseModel):
    host: str
    port: int = 8080


class TestCollectCandidates:
    def test_fields_and_typed_properties(self) -> None:
        candidates = collect_candidates(Mixed)
        assert set(candidates) == {"name", "port", "ratio", "handle", "secret", "level"}
        assert isinstance(candidates["name"], FieldMember)
        assert isinstance(candidates["level"], PropertyMember)

    def test_skips_classvar_private_and_untyped(self) -> None:
        candidates = collect_candidates(Mixed)
        assert "limit" not in candidates
        assert "_private" not in candidates
        assert "untyped" not in candidates

    def test_read_only_property_without_markers_skipped(self) -> None:
        assert "computed" not in collect_candidates(Mixed)

    def test_most_derived_annotation_wins(self) -> None:
        candidates = collect_candidates(Derived)
        assert candidates["shared"].value_type is int
        assert set(candidates) == {"shared", "extra"}

    @pytest.mark.parametrize("cls", [ComputedLevel, UntypedLevel])
    def test_non_candidate_property_hides_inherited_field(self, cls: type) -> None:
        assert set(collect_candidates(cls)) == {"label"}

    def test_nullability(self) -> None:
        candidates = collect_candidates(Mixed)
        assert candidates["ratio"].is_nullable
        assert candidates["ratio"].value_type is float
        assert not candidates["port"].is_nullable

    def test_frozen_dataclass_fields_not_writable(self) -> None:
        assert not collect_candidates(Frozen)["derived"].writable

    def test_pydantic_model_fields(self) -> None:
        candidates = collect_candidates(PydanticModel)
        assert set(candidates) == {"host", "port"}


class TestDiscoverOptOut:
    def test_drops_opted_out_and_unparseable(self, registry: ParserRegistry) -> None:
        members = discover_members(Mixed, registry)
        assert set(members) == {"name", "port", "ratio", "level"}

    def test_explicit_parser_is_registered(self, registry: ParserRegistry) -> None:
        members = discover_members(WithParser, registry)
        assert "tags" in members
        assert members["tags"].parser in registry
        assert members["tags"].parser.parse("a, b", list[str]) == ["a", "b"]

    def test_non_writable_dropped_silently(self, registry: ParserRegistry) -> None:
        assert "derived" not in discover_members(Frozen, registry)

    def test_non_writable_kept_when_required(self, registry: ParserRegistry) -> None:
        members = discover_members(FrozenRequired, registry)
        assert "derived" in members
        assert not members["derived"].writable


class TestDiscoverOptIn:
    def test_only_included_members(self, registry: ParserRegistry) -> None:
        assert set(discover_members(OptIn, registry)) == {"foo"}

    def test_policy_override(self, registry: ParserRegistry) -> None:
        members = discover_members(OptIn, registry, Discovery.OPT_OUT)
        assert set(members) == {"foo", "doesnt_exist1", "doesnt_exist2"}

    def test_included_read_only_property_kept_for_rejection(self, registry: ParserRegistry) -> None:
        members = discover_members(ReadOnlyIncluded, registry)
        assert "value" in members
        with pytest.raises(InvalidMember):
            members["value"].set(ReadOnlyIncluded(), "y")


class TestMemberAccess:
    def test_field_get_set(self, registry: ParserRegistry) -> None:
        member = discover_members(Mixed, registry)["port"]
        obj = Mixed()
        member.set(obj, 8080)
        assert member.get(obj) == 8080

    def test_property_get_set(self, registry: ParserRegistry) -> None:
        member = discover_members(Mixed, registry)["level"]
        obj = Mixed()
        member.set(obj, 3)
        assert obj.level == 3
        assert member.get(obj) == 3
