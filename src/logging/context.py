# src/logging/context.py — v2
"""Contextual logging support — attach the running command and resource kind to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per CLI command.
_command: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "command", default=None
)
_kind: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "kind", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    command: str | None = None
    kind: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(command=_command.get(), kind=_kind.get())


def set_command_context(command: str) -> None:
    """Set command-level context (called once per CLI invocation)."""
    _command.set(command)


def set_kind_context(kind: str | None) -> None:
    """Set the resource kind a command operates on (None for every kind)."""
    _kind.set(kind)


def clear_context() -> None:
    """Reset all context variables."""
    _command.set(None)
    _kind.set(None)
