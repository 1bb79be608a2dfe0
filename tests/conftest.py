"""Shared pytest fixtures for envbind tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest

import envbind
from envbind.binder import Binder
from envbind.config.settings import EnvBindSettings
from envbind.parsers.registry import ParserRegistry
from envbind.sources import EnvironSource, MappingSource


@pytest.fixture
def source() -> MappingSource:
    """Empty in-memory key source, isolated from ``os.environ``."""
    return MappingSource()


@pytest.fixture
def registry() -> ParserRegistry:
    """Registry with the built-in parsers."""
    return ParserRegistry.with_defaults()


@pytest.fixture
def settings() -> EnvBindSettings:
    return EnvBindSettings(load_plugins=False)


@pytest.fixture
def binder(source: MappingSource, registry: ParserRegistry, settings: EnvBindSettings) -> Binder:
    """Binder over the in-memory source; plugins are never loaded."""
    return Binder(registry=registry, source=source, settings=settings)


@pytest.fixture
def default_binder(binder: Binder) -> Generator[Binder]:
    """Install *binder* as the module-level default for facade tests."""
    envbind.set_default_binder(binder)
    try:
        yield binder
    finally:
        envbind.set_default_binder(None)


@pytest.fixture
def environ_binder(registry: ParserRegistry, settings: EnvBindSettings) -> Binder:
    """Binder over ``os.environ``; pair with ``monkeypatch.setenv``."""
    return Binder(registry=registry, source=EnvironSource(), settings=settings)
