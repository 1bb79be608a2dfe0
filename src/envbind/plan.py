"""Binding plans and the per-binder plan cache.

INVARIANT: A plan is immutable once cached and is never evicted. Build
failures are not cached, so registering a missing parser and binding again
retries the build.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from envbind.constructors import ConstructorDescriptor, resolve_constructor
from envbind.errors import InvalidMember
from envbind.markers import Discovery, discovery_policy
from envbind.members import Member, discover_members
from envbind.parsers.registry import ParserRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BindingPlan:
    """How to construct and populate one class from external keys.

    Attributes:
        target: The bound class.
        constructor: Selected constructor.
        members: Members still to be set after construction, excluding any
            name supplied by a constructor parameter.
        policy: Discovery policy the members were selected with.
    """

    target: type
    constructor: ConstructorDescriptor
    members: Mapping[str, Member]
    policy: Discovery


def build_plan(cls: type, registry: ParserRegistry) -> BindingPlan:
    """Resolve the constructor, discover members, drop constructor-supplied names."""
    constructor = resolve_constructor(cls, registry)
    policy = discovery_policy(cls)
    discovered = discover_members(cls, registry, policy)

    members: dict[str, Member] = {}
    for name, member in discovered.items():
        if name in constructor.parameter_names:
            continue
        if not member.writable:
            raise InvalidMember(cls, name)
        members[name] = member

    return BindingPlan(
        target=cls,
        constructor=constructor,
        members=MappingProxyType(members),
        policy=policy,
    )


class PlanCache:
    """Lazily built, never-evicted plans keyed by class identity.

    Builds run outside the lock. When two threads race on the same class the
    first inserted plan wins and both callers receive it.
    """

    def __init__(self, registry: ParserRegistry) -> None:
        self._registry = registry
        self._plans: dict[type, BindingPlan] = {}
        self._lock = threading.Lock()

    def get(self, cls: type) -> BindingPlan | None:
        return self._plans.get(cls)

    def get_or_build(self, cls: type) -> BindingPlan:
        plan = self._plans.get(cls)
        if plan is not None:
            return plan

        built = build_plan(cls, self._registry)
        with self._lock:
            plan = self._plans.setdefault(cls, built)
        if plan is built:
            logger.debug(
                "plan.built",
                extra={
                    "target": cls.__qualname__,
                    "constructor": built.constructor.name,
                    "parameters": [p.name for p in built.constructor.parameters],
                    "members": list(built.members),
                    "policy": str(built.policy),
                },
            )
        return plan

    def __contains__(self, cls: object) -> bool:
        return cls in self._plans

    def __len__(self) -> int:
        return len(self._plans)
