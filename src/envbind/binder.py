"""The binder: materializes typed objects from a key source.

A :class:`Binder` owns one parser registry, one plan cache, one key source
and its settings. Independent binders share nothing, which keeps tests and
concurrent callers isolated; the module-level facade in :mod:`envbind` wraps
a lazily created default binder.

Bind order: constructor parameters first (declaration order), then the
remaining plan members. The first failure propagates to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from envbind.config.logging import configure_logging
from envbind.config.settings import EnvBindSettings, MissingPolicy
from envbind.errors import (
    EnvBindError,
    MissingRequiredVariable,
    NoParserAvailable,
    ParseFailure,
    type_name,
)
from envbind.keys import EnvVars
from envbind.markers import AnnotationInfo
from envbind.parsers.base import ValueParser
from envbind.parsers.registry import ParserRegistry
from envbind.plan import BindingPlan, PlanCache
from envbind.result import BindResult
from envbind.sources import EnvironSource, KeySource

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Binder:
    """Binds classes to values read from a :class:`KeySource`.

    Usage::

        binder = Binder(source=MappingSource({"APP_PORT": "8080"}))
        config = binder.bind(AppConfig, prefix="app")
    """

    def __init__(
        self,
        *,
        registry: ParserRegistry | None = None,
        source: KeySource | None = None,
        settings: EnvBindSettings | None = None,
    ) -> None:
        self.settings = settings if settings is not None else EnvBindSettings()
        self.registry = registry if registry is not None else ParserRegistry.with_defaults()
        self.source: KeySource = source if source is not None else EnvironSource()
        self.plans = PlanCache(self.registry)

    @classmethod
    def from_settings(
        cls,
        settings: EnvBindSettings | None = None,
        *,
        source: KeySource | None = None,
    ) -> Binder:
        """Build a binder from *settings*.

        Installs the envbind log handler when ``enable_logging`` is set and
        registers parsers from installed plugins when ``load_plugins`` is set.
        """
        binder = cls(settings=settings, source=source)
        if binder.settings.enable_logging:
            configure_logging(binder.settings)
        if binder.settings.load_plugins:
            from envbind.plugins.manager import PluginManager

            manager = PluginManager()
            manager.discover_and_load()
            manager.apply(binder.registry)
        return binder

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def register_parser(self, parser: ValueParser) -> bool:
        return self.registry.register(parser)

    def register_function(self, target: type[T], func: Callable[[str], T]) -> bool:
        return self.registry.register_function(target, func)

    def can_parse(self, target: Any) -> bool:
        return self.registry.can_parse(target)

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    def vars(self, prefix: str | None = None) -> EnvVars:
        """Key context over this binder's source using its separator."""
        return EnvVars(prefix, source=self.source, separator=self.settings.prefix_separator)

    def plan_for(self, cls: type) -> BindingPlan:
        return self.plans.get_or_build(cls)

    def bind(self, cls: type[T], prefix: str | None = None) -> T:
        """Construct and populate an instance of *cls*.

        Raises:
            NoSuitableConstructor: No constructor of *cls* can be satisfied.
            InvalidMember: A selected member has no usable setter.
            MissingRequiredVariable: A required key is unset.
            NoParserAvailable: A value is set but nothing parses its type.
            ParseFailure: The parser rejected the value.
        """
        plan = self.plans.get_or_build(cls)
        env = self.vars(prefix)

        arguments: dict[str, Any] = {}
        for param in plan.constructor.parameters:
            key = env.full_name(param.name)
            raw = self.source.get(key)
            if raw is not None:
                arguments[param.name] = self._convert(key, raw, param.annotation)
            elif param.is_optional:
                continue
            elif param.is_nullable and not param.annotation.required:
                arguments[param.name] = None
            else:
                raise MissingRequiredVariable(key)

        instance = plan.constructor.invoke(arguments)

        for name, member in plan.members.items():
            key = env.full_name(name)
            raw = self.source.get(key)
            if raw is None:
                if member.is_required:
                    raise MissingRequiredVariable(key)
                if member.is_nullable:
                    if not hasattr(instance, name):
                        member.set(instance, None)
                    continue
                if self.settings.missing_policy is MissingPolicy.LENIENT:
                    continue
                raise MissingRequiredVariable(key)
            member.set(instance, self._convert(key, raw, member.annotation))

        logger.debug(
            "bind.complete",
            extra={"target": cls.__qualname__, "prefix": prefix, "arguments": sorted(arguments)},
        )
        return instance

    def try_bind(self, cls: type[T], prefix: str | None = None) -> BindResult:
        """Like :meth:`bind`, but report binding failures as a :class:`BindResult`."""
        try:
            value = self.bind(cls, prefix)
        except EnvBindError as exc:
            logger.debug("bind.failed", extra={"target": cls.__qualname__, "code": exc.code})
            return BindResult(ok=False, target=type_name(cls), error=exc.to_error())
        return BindResult(ok=True, target=type_name(cls), value=value)

    def _convert(self, key: str, raw: str, annotation: AnnotationInfo) -> Any:
        target = annotation.value_type
        parser = annotation.parser
        if parser is None:
            if target is str:
                return raw
            parser = self.registry.resolve(target)
            if parser is None:
                raise NoParserAvailable(target, key=key)

        try:
            value = parser.parse(raw, target)
        except Exception as exc:
            raise ParseFailure(key, target, exc) from exc

        if value is None and not annotation.nullable:
            name = type_name(target)
            raise MissingRequiredVariable(
                key,
                reason=f"Failed to parse environment variable '{key}' into type '{name}'.",
            )
        return value
