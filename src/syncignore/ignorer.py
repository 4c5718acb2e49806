"""Ordered ignore-rule evaluation with last-match-wins precedence."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable

from pathspec.util import normalize_file

from syncignore import InvalidPatternError
from syncignore.pattern import SEPARATOR, Pattern, compile_pattern

logger = logging.getLogger(__name__)


class Ignorer:
    """Decide whether root-relative paths are ignored.

    Holds compiled patterns in the order they were supplied. Every
    pattern is tested for each query; the last one that matches decides
    the verdict, and a negated match un-ignores the path. Instances are
    immutable and safe to share between threads.

    Use :func:`new_ignorer` to build one from raw pattern text.
    """

    __slots__ = ("_patterns",)

    def __init__(self, patterns: Iterable[Pattern] = ()) -> None:
        """Initialize from already compiled patterns.

        Args:
            patterns: Compiled patterns, in evaluation order.
        """
        self._patterns: tuple[Pattern, ...] = tuple(patterns)

    @property
    def patterns(self) -> tuple[Pattern, ...]:
        return self._patterns

    def __len__(self) -> int:
        return len(self._patterns)

    def __repr__(self) -> str:
        texts = [p.text for p in self._patterns]
        return f"{type(self).__name__}({texts!r})"

    def ignored(self, path: str, is_dir: bool) -> bool:
        """Return whether *path* is ignored.

        Args:
            path: ``/``-separated path relative to the traversal root,
                without leading or trailing separator. ``""`` is the root,
                which is never ignored.
            is_dir: Whether the path names a directory.

        Returns:
            bool: ``True`` when the last matching pattern is not negated.
        """
        verdict = False
        for pattern in self._patterns:
            if pattern.matches(path, is_dir):
                verdict = not pattern.negated
        return verdict

    evaluate = ignored

    def ignored_path(self, path: str | os.PathLike[str], is_dir: bool) -> bool:
        """Return whether a native relative path is ignored.

        The path is converted to canonical form first: platform separators
        become ``/``, a leading ``/`` or ``./`` and trailing separators are
        dropped, and ``.`` means the root.

        Args:
            path: Path relative to the traversal root.
            is_dir: Whether the path names a directory.

        Returns:
            bool: Same verdict as :meth:`ignored` on the canonical path.
        """
        canonical = normalize_file(path).rstrip(SEPARATOR)
        if canonical == ".":
            canonical = ""
        return self.ignored(canonical, is_dir)


def new_ignorer(patterns: Iterable[str] | None = None) -> Ignorer:
    """Compile pattern lines into an :class:`Ignorer`.

    Construction is all-or-nothing: the first invalid pattern aborts it.

    Args:
        patterns: Pattern lines in evaluation order. ``None`` or an empty
            iterable yields an ignorer that ignores nothing.

    Returns:
        Ignorer: Ignorer over the compiled patterns.

    Raises:
        InvalidPatternError: If any pattern fails to compile. ``index``
            is set to the pattern's position in *patterns*.
    """
    compiled: list[Pattern] = []
    for index, text in enumerate(patterns or ()):
        try:
            compiled.append(compile_pattern(text))
        except InvalidPatternError as exc:
            logger.debug("Rejected ignore pattern #%d %r: %s", index, text, exc.reason)
            raise InvalidPatternError(exc.pattern, exc.reason, index) from exc
    logger.debug("Compiled %d ignore patterns", len(compiled))
    return Ignorer(compiled)


def invalid_patterns(patterns: Iterable[str]) -> list[InvalidPatternError]:
    """Collect every invalid pattern in *patterns*.

    Unlike :func:`new_ignorer`, which stops at the first failure, this
    reports all of them so a caller can show every configuration mistake
    at once.

    Args:
        patterns: Pattern lines to check.

    Returns:
        list[InvalidPatternError]: One error per invalid pattern, with
        ``index`` set, in input order. Empty when all are valid.
    """
    errors: list[InvalidPatternError] = []
    for index, text in enumerate(patterns):
        try:
            compile_pattern(text)
        except InvalidPatternError as exc:
            errors.append(InvalidPatternError(exc.pattern, exc.reason, index))
    return errors
