"""Key sources: where external string values come from.

The binder only ever calls :meth:`KeySource.get`. ``set`` exists so tests and
applications can seed values through the same naming rules
(see :class:`envbind.keys.EnvVars`).
"""

from __future__ import annotations

import os
from collections.abc import MutableMapping
from typing import Protocol, runtime_checkable


@runtime_checkable
class KeySource(Protocol):
    """Exact-key string store."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str | None) -> None: ...


class MappingSource:
    """Key source backed by a mutable mapping.

    Defaults to a private dict, which keeps tests and independent binders
    isolated from the process environment.
    """

    def __init__(self, data: MutableMapping[str, str] | None = None) -> None:
        self._data: MutableMapping[str, str] = {} if data is None else data

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str | None) -> None:
        if value is None:
            self._data.pop(key, None)
        else:
            self._data[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._data)!r})"


class EnvironSource(MappingSource):
    """Key source backed by the process environment (``os.environ``).

    Setting a key to ``None`` removes the variable.
    """

    def __init__(self) -> None:
        super().__init__(os.environ)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
