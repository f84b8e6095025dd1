"""Exceptions used in pivotgrid.

The base exception :class:`PivotError` carries an optional context
dictionary which is rendered together with the message.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "PivotError",
    "UserError",
    "InternalError",
    "ConfigurationError",
    "ModelError",
    "ArgumentError",
    "NoSuchAttributeError",
    "SortResolutionError",
]


class PivotError(Exception):
    """Generic error class with context preservation."""

    def __init__(
        self,
        message: str = "",
        *,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.context = context or {}
        self.cause = cause

    def add_context(self, key: str, value: Any) -> PivotError:
        """Fluent interface for adding context."""
        self.context[key] = value
        return self

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base_msg} (context: {context_str})"
        return base_msg


class UserError(PivotError):
    """Superclass for all errors caused by the callers of pivotgrid, such as
    grid state that does not match the current query."""


class InternalError(PivotError):
    """Superclass for all errors that happened internally: configuration
    issues or inconsistent execution data."""


class ConfigurationError(InternalError):
    """Raised when there is a problem with the pivot configuration."""


class ModelError(PivotError):
    """Execution data contains an object that can not be adapted."""


class ArgumentError(UserError):
    """Invalid argument passed to a pivotgrid function."""


class NoSuchAttributeError(UserError):
    """Raised when an unknown attribute, measure or header is referenced."""


class SortResolutionError(UserError):
    """Raised when a grid column id or sort item can not be resolved against
    the current execution."""

    def __init__(self, message: str, *, col_id: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        if col_id is not None:
            self.add_context("col_id", col_id)
