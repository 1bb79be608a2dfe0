"""Binding error taxonomy.

Every failure surfaced by the binder derives from :class:`EnvBindError` and
carries a stable ``code`` plus a ``detail`` payload so callers can either
catch the exception or consume it as a :class:`~envbind.result.BindError`.

Plan-build errors (``NoSuitableConstructor``, ``InvalidMember``) are raised
the first time a class is bound. Bind-time errors (``MissingRequiredVariable``,
``NoParserAvailable``, ``ParseFailure``) are raised on every failing call.
Nothing is retried and nothing is cached as a negative result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from envbind.result import BindError


def type_name(target: Any) -> str:
    """Return a readable, fully-qualified name for *target*."""
    if isinstance(target, type):
        if target.__module__ == "builtins":
            return target.__qualname__
        return f"{target.__module__}.{target.__qualname__}"
    return repr(target)


class EnvBindError(Exception):
    """Base class for every binding failure."""

    code: str = "ENVBIND_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail

    def to_error(self) -> BindError:
        """Convert into the structured error payload used by ``try_bind``."""
        from envbind.result import BindError

        return BindError(code=self.code, message=self.message, detail=self.detail)


class NoSuitableConstructor(EnvBindError, TypeError):
    """No constructor of the target class can be satisfied."""

    code = "NO_SUITABLE_CONSTRUCTOR"

    def __init__(self, target: type) -> None:
        super().__init__(
            f"No suitable constructor found for type '{type_name(target)}'.",
            target=type_name(target),
        )
        self.target = target


class InvalidMember(EnvBindError, TypeError):
    """A selected member cannot be written to."""

    code = "INVALID_MEMBER"

    def __init__(self, target: type, member: str) -> None:
        super().__init__(
            f"Member '{member}' of type '{type_name(target)}' has no usable setter.",
            target=type_name(target),
            member=member,
        )
        self.target = target
        self.member = member


class MissingRequiredVariable(EnvBindError, LookupError):
    """A required external key is not set (or produced no usable value)."""

    code = "MISSING_REQUIRED_VARIABLE"

    def __init__(self, key: str, *, reason: str | None = None) -> None:
        message = reason or f"Required environment variable '{key}' is not set."
        super().__init__(message, key=key)
        self.key = key


class NoParserAvailable(EnvBindError, ValueError):
    """A value is present but nothing can convert it to the target type."""

    code = "NO_PARSER_AVAILABLE"

    def __init__(self, target: Any, *, key: str | None = None) -> None:
        name = type_name(target)
        super().__init__(
            f"No suitable parser found for type '{name}'. "
            "Register one with register_parser() or attach Parser(...) to the member.",
            target=name,
            key=key,
        )
        self.target = target
        self.key = key


class ParseFailure(EnvBindError, ValueError):
    """A parser was found but raised while converting the value.

    The underlying conversion error is chained as ``__cause__``.
    """

    code = "PARSE_FAILURE"

    def __init__(self, key: str, target: Any, cause: BaseException) -> None:
        name = type_name(target)
        super().__init__(
            f"Failed to parse environment variable '{key}' into type '{name}': {cause}",
            key=key,
            target=name,
            cause=str(cause),
        )
        self.key = key
        self.target = target
        self.cause = cause
