"""Pluggy hook specifications for envbind parser plugins.

A plugin contributes value parsers at binder set-up time; they are appended
to the registry after the built-in parsers, so built-ins keep precedence for
the types they already cover.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from envbind.parsers.base import ValueParser

PROJECT_NAME = "envbind"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class EnvBindHookSpec:
    """Hook specifications for the envbind plugin system."""

    @hookspec
    def envbind_value_parsers(self) -> list[ValueParser]:
        """Return value parsers to register, in priority order."""
