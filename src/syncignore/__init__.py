"""syncignore — gitignore-style path filtering for synchronization scans."""

from __future__ import annotations

__version__ = "0.1.0"


class InvalidPatternError(ValueError):
    """Ignore pattern rejected at compile time.

    Raised for empty patterns, separator-only root forms, and malformed
    glob syntax. Evaluation never raises this; it only surfaces while
    compiling a pattern or building an ignorer.

    Attributes:
        pattern: The offending pattern text.
        reason: Short description of what is wrong with it.
        index: Position of the pattern in the list passed to
            ``new_ignorer``, or ``None`` when compiled on its own.
    """

    def __init__(self, pattern: str, reason: str, index: int | None = None) -> None:
        self.pattern = pattern
        self.reason = reason
        self.index = index
        where = f" at index {index}" if index is not None else ""
        super().__init__(f"invalid ignore pattern {pattern!r}{where}: {reason}")
