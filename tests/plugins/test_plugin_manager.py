"""Tests for PluginManager: registration, parser collection, and registry wiring."""

from __future__ import annotations

from pathlib import Path

import pytest

from envbind.binder import Binder
from envbind.config.settings import EnvBindSettings
from envbind.parsers.base import EnumParser, FunctionParser, ValueParser
from envbind.parsers.registry import ParserRegistry
from envbind.plugins import PluginManager, hookimpl
from envbind.sources import MappingSource


class _PathPlugin:
    @hookimpl
    def envbind_value_parsers(self) -> list[ValueParser]:
        return [FunctionParser(Path, Path)]


class _EnumPlugin:
    @hookimpl
    def envbind_value_parsers(self) -> list[ValueParser]:
        return [EnumParser()]


class _SloppyPlugin:
    @hookimpl
    def envbind_value_parsers(self) -> list[object]:
        return ["not a parser", EnumParser()]


class _BrokenPlugin:
    @hookimpl
    def envbind_value_parsers(self) -> list[ValueParser]:
        raise RuntimeError("boom")


class TestPluginManager:
    def test_hook_relay_accessible(self) -> None:
        pm = PluginManager()
        assert hasattr(pm.hook, "envbind_value_parsers")

    def test_register_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_PathPlugin(), name="paths")
        assert "paths" in pm.list_plugin_names()

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_PathPlugin())
        assert "_PathPlugin" in pm.list_plugin_names()

    def test_unregister_plugin(self) -> None:
        pm = PluginManager()
        plugin = _PathPlugin()
        pm.register_plugin(plugin, name="paths")
        pm.unregister(plugin)
        assert "paths" not in pm.list_plugin_names()

    def test_is_loaded_false_before_discover(self) -> None:
        assert PluginManager().is_loaded is False

    def test_discover_marks_loaded(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_PathPlugin(), name="paths")
        names = pm.discover_and_load()
        assert pm.is_loaded is True
        assert "paths" in names


class TestCollectParsers:
    def test_registration_order_preserved(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_PathPlugin(), name="paths")
        pm.register_plugin(_EnumPlugin(), name="enums")
        assert pm.collect_parsers() == [FunctionParser(Path, Path), EnumParser()]

    def test_non_parsers_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm.register_plugin(_SloppyPlugin(), name="sloppy")
        with caplog.at_level("WARNING"):
            parsers = pm.collect_parsers()
        assert parsers == [EnumParser()]
        assert "Ignoring non-parser plugin contribution" in caplog.text

    def test_failing_plugin_is_a_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm.register_plugin(_BrokenPlugin(), name="broken")
        with caplog.at_level("WARNING"):
            assert pm.collect_parsers() == []
        assert "raised while providing parsers" in caplog.text


class TestApply:
    def test_apply_appends_after_builtins(self, registry: ParserRegistry) -> None:
        before = len(registry)
        pm = PluginManager()
        pm.register_plugin(_PathPlugin(), name="paths")
        assert pm.apply(registry) == 1
        assert len(registry) == before + 1
        assert registry.can_parse(Path)

    def test_apply_skips_duplicates(self, registry: ParserRegistry) -> None:
        pm = PluginManager()
        pm.register_plugin(_EnumPlugin(), name="enums")
        pm.register_plugin(_SloppyPlugin(), name="sloppy")
        assert pm.apply(registry) == 1

    def test_binder_from_settings_loads_plugins(
        self, monkeypatch: pytest.MonkeyPatch, source: MappingSource
    ) -> None:
        def fake_discover(self: PluginManager) -> list[str]:
            self.register_plugin(_PathPlugin(), name="paths")
            return self.list_plugin_names()

        monkeypatch.setattr(PluginManager, "discover_and_load", fake_discover)

        enabled = Binder.from_settings(EnvBindSettings(load_plugins=True), source=source)
        disabled = Binder.from_settings(EnvBindSettings(load_plugins=False), source=source)

        assert enabled.can_parse(Path)
        assert not disabled.can_parse(Path)
