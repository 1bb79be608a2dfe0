"""BindResult and BindError: the explicit-result form of a bind.

``Binder.try_bind`` never raises for binding failures; it returns a
:class:`BindResult` whose ``error`` carries the same code and detail as the
exception ``Binder.bind`` would have raised.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class BindError(BaseModel):
    """Structured error payload within a BindResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class BindResult(BaseModel):
    """Outcome of a single bind.

    Attributes:
        ok: Whether the bind succeeded.
        op: Name of the operation (``"bind"``).
        target: Fully-qualified name of the bound type.
        value: The populated instance on success.
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str = "bind"
    target: str
    value: Any = None
    error: BindError | None = None

    def unwrap(self) -> Any:
        """Return ``value`` or raise ``ValueError`` describing ``error``."""
        if not self.ok:
            assert self.error is not None
            msg = f"{self.error.code}: {self.error.message}"
            raise ValueError(msg)
        return self.value
