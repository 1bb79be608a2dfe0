"""Tests for key sources."""

from __future__ import annotations

import os

import pytest

from envbind.sources import EnvironSource, KeySource, MappingSource


class TestMappingSource:
    def test_get_missing_is_none(self) -> None:
        assert MappingSource().get("NOPE") is None

    def test_set_and_get(self) -> None:
        source = MappingSource()
        source.set("KEY", "value")
        assert source.get("KEY") == "value"
        assert len(source) == 1

    def test_set_none_deletes(self) -> None:
        source = MappingSource({"KEY": "value"})
        source.set("KEY", None)
        assert "KEY" not in source

    def test_set_none_on_missing_is_noop(self) -> None:
        source = MappingSource()
        source.set("KEY", None)
        assert len(source) == 0

    def test_wraps_given_mapping(self) -> None:
        data = {"A": "1"}
        source = MappingSource(data)
        source.set("B", "2")
        assert data == {"A": "1", "B": "2"}

    def test_satisfies_protocol(self) -> None:
        assert isinstance(MappingSource(), KeySource)


class TestEnvironSource:
    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVBIND_SOURCE_TEST", "yes")
        assert EnvironSource().get("ENVBIND_SOURCE_TEST") == "yes"

    def test_set_and_delete(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ENVBIND_SOURCE_TEST", raising=False)
        source = EnvironSource()
        source.set("ENVBIND_SOURCE_TEST", "on")
        try:
            assert os.environ["ENVBIND_SOURCE_TEST"] == "on"
        finally:
            source.set("ENVBIND_SOURCE_TEST", None)
        assert "ENVBIND_SOURCE_TEST" not in os.environ
