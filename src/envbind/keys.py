"""External key naming.

Member and parameter names are turned into ``UPPER_SNAKE`` keys and joined
to an optional prefix::

    full_name("requiredProperty", prefix="MyApp")  -> "MY_APP_REQUIRED_PROPERTY"
    full_name("port", prefix="db", separator="__") -> "DB__PORT"
    full_name("port", prefix="db", separator=None) -> "DBPORT"
"""

from __future__ import annotations

import re

from envbind.sources import EnvironSource, KeySource

DEFAULT_SEPARATOR = "_"

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALNUM = re.compile(r"[^0-9A-Za-z]+")


def canonical(name: str) -> str:
    """Convert *name* (camelCase, PascalCase, snake, kebab, dotted) to UPPER_SNAKE."""
    text = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    text = _WORD_BOUNDARY.sub(r"\1_\2", text)
    text = _NON_ALNUM.sub("_", text).strip("_")
    return text.upper()


def full_name(
    name: str,
    prefix: str | None = None,
    separator: str | None = DEFAULT_SEPARATOR,
) -> str:
    """Build the external key for *name* under *prefix*.

    The separator is inserted verbatim between the canonical prefix and the
    canonical name. A ``None`` separator concatenates without joining; an
    empty or missing prefix yields just the canonical name.
    """
    key = canonical(name)
    if not prefix:
        return key
    head = canonical(prefix)
    if separator is None:
        return f"{head}{key}"
    return f"{head}{separator}{key}"


class EnvVars:
    """Prefix/key context over a :class:`KeySource`.

    Reads and writes go through :meth:`full_name`, so ``vars["foo"]`` with
    prefix ``"app"`` addresses ``APP_FOO``. Assigning ``None`` removes the key.
    """

    def __init__(
        self,
        prefix: str | None = None,
        *,
        source: KeySource | None = None,
        separator: str | None = DEFAULT_SEPARATOR,
    ) -> None:
        self._prefix = prefix
        self._source: KeySource = source if source is not None else EnvironSource()
        self._separator = separator

    @property
    def prefix(self) -> str | None:
        return self._prefix

    @property
    def source(self) -> KeySource:
        return self._source

    def full_name(self, name: str) -> str:
        return full_name(name, self._prefix, self._separator)

    def get(self, name: str) -> str | None:
        return self._source.get(self.full_name(name))

    def set(self, name: str, value: str | None) -> None:
        self._source.set(self.full_name(name), value)

    def with_prefix(self, prefix: str | None) -> EnvVars:
        """Return a context over the same source with a different prefix."""
        return EnvVars(prefix, source=self._source, separator=self._separator)

    def __getitem__(self, name: str) -> str | None:
        return self.get(name)

    def __setitem__(self, name: str, value: str | None) -> None:
        self.set(name, value)

    def __delitem__(self, name: str) -> None:
        self.set(name, None)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __repr__(self) -> str:
        return f"EnvVars(prefix={self._prefix!r}, separator={self._separator!r})"
