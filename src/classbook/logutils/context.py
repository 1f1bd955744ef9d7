"""Per-operation logging context carried in a ContextVar.

Each repository call or service flow may run inside ``with_context(...)`` so
every record it emits shares one correlation id.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from typing import Any


def _new_correlation_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass
class LogContext:
    """Fields attached to every record logged while the context is active."""

    correlation_id: str = field(default_factory=_new_correlation_id)
    operation: str | None = None
    user_id: int | None = None
    entity: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"correlation_id": self.correlation_id}
        if self.operation:
            result["operation"] = self.operation
        if self.user_id is not None:
            result["user_id"] = self.user_id
        if self.entity:
            result["entity"] = self.entity
        result.update(self.extra)
        return result


_log_context: ContextVar[LogContext | None] = ContextVar("classbook_log_context", default=None)


def get_context() -> LogContext:
    """Return the active context, creating one on first use."""
    ctx = _log_context.get()
    if ctx is None:
        ctx = LogContext()
        _log_context.set(ctx)
    return ctx


def clear_context() -> None:
    _log_context.set(None)


def get_correlation_id() -> str:
    return get_context().correlation_id


def update_context(**fields: Any) -> None:
    """Set known fields on the active context; unknown names go to ``extra``."""
    ctx = get_context()
    for key, value in fields.items():
        if key != "extra" and hasattr(ctx, key):
            setattr(ctx, key, value)
        else:
            ctx.extra[key] = value


class ContextScope:
    """Installs a LogContext for the duration of a ``with`` block."""

    def __init__(self, context: LogContext) -> None:
        self.context = context
        self._token: Token[LogContext | None] | None = None

    def __enter__(self) -> LogContext:
        self._token = _log_context.set(self.context)
        return self.context

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._token is not None:
            _log_context.reset(self._token)
            self._token = None


def with_context(
    operation: str | None = None,
    user_id: int | None = None,
    entity: str | None = None,
    correlation_id: str | None = None,
    **extra: Any,
) -> ContextScope:
    """Scope log records to one logical operation.

    Usage:
        with with_context(operation="authenticate", entity="User"):
            logger.info("Checking credentials")
    """
    return ContextScope(
        LogContext(
            correlation_id=correlation_id or _new_correlation_id(),
            operation=operation,
            user_id=user_id,
            entity=entity,
            extra=extra,
        )
    )
