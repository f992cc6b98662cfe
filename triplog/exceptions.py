"""Error types raised by the TripLog core."""

from typing import Any, Optional


class TripLogError(Exception):
    """Base class for TripLog errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidCoordinate(TripLogError, ValueError):
    """A coordinate is not a finite number inside the valid lat/lon range."""

    def __init__(self, message: str, value: Any = None) -> None:
        super().__init__(message)
        self.value = value


class MalformedDocument(TripLogError, ValueError):
    """A trip document is not valid JSON or lacks the top-level meta/days fields."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Malformed trip document: {reason}")
        self.reason = reason


class IndexOutOfRange(TripLogError, IndexError):
    """A day index does not exist in the document (strict mode only)."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Day index {index} out of range for {size} day(s)")
        self.index = index
        self.size = size


class InsufficientGeometry(TripLogError):
    """Fewer than two coordinates where an explicit route build needs two."""

    def __init__(self, count: int, message: Optional[str] = None) -> None:
        super().__init__(message or f"At least 2 points are needed to build a route, got {count}")
        self.count = count
