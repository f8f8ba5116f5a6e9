"""Custom exception types for the GEM layout engine."""

from __future__ import annotations

from typing import Any


class GemLayoutError(Exception):
    """Base class for domain-specific errors."""


class InvalidGraphError(GemLayoutError):
    """Raised when a graph snapshot cannot be turned into a layout."""

    def __init__(
        self,
        message: str,
        *,
        node_id: Any | None = None,
        edge: tuple[Any, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.node_id = node_id
        self.edge = edge


class ConfigurationError(GemLayoutError):
    """Raised when layout parameters are out of range or inconsistent."""

    def __init__(self, key: str, value: Any, message: str | None = None) -> None:
        if message is None:
            message = f"Invalid value {value!r} for layout parameter '{key}'."
        super().__init__(message)
        self.key = key
        self.value = value


__all__ = ["GemLayoutError", "InvalidGraphError", "ConfigurationError"]
