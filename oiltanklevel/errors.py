"""
Exceptions raised while measuring a tank level.
"""

from typing import Optional, Tuple


class TankLevelError(Exception):
    """Base class for all tank level measurement failures."""


class ParseError(TankLevelError):
    """A line of the brightness dump did not match the expected format."""

    def __init__(self, line_number: int, line: str):
        self.line_number = line_number
        self.line = line
        super().__init__(
            f"Unparseable brightness dump line {line_number}: {line.rstrip()!r}"
        )


class NoTransitionFound(TankLevelError):
    """The liquid edge could not be located in the brightness profile."""

    def __init__(self, message: str, search_start: Optional[int] = None):
        self.search_start = search_start
        super().__init__(message)


class OutOfCalibrationRange(TankLevelError):
    """The detected pixel cannot be bracketed by the calibration mapping."""

    def __init__(
        self,
        message: str,
        pixel: Optional[float] = None,
        span: Optional[Tuple[float, float]] = None
    ):
        self.pixel = pixel
        self.span = span
        super().__init__(message)


class CaptureError(TankLevelError):
    """Snapshot download or image preprocessing failed."""
