"""Exceptions raised by the editing layer."""

from __future__ import annotations


class EditorError(Exception):
    """Base class for editor failures that callers are expected to handle."""


class InvalidDatasetFormat(EditorError):
    """Raised when import text is not a dataset-shaped JSON document."""

    user_message = "Invalid JSON format"

    def __init__(self, detail: str) -> None:
        super().__init__(f"{self.user_message}: {detail}")
        self.detail = detail


class NoRouteSelected(EditorError):
    """Raised when a waypoint operation is requested without an active route."""

    def __init__(self) -> None:
        super().__init__("Select a route first to manage waypoints.")


class IndexOutOfRange(EditorError, IndexError):
    """Raised when a route or waypoint position does not exist."""

    def __init__(self, kind: str, index: int, size: int) -> None:
        if size:
            message = f"{kind} index {index} out of range (0..{size - 1})"
        else:
            message = f"{kind} index {index} out of range (no {kind}s)"
        super().__init__(message)
        self.kind = kind
        self.index = index
        self.size = size
