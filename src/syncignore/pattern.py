"""Ignore pattern compiler: parse one gitignore-style line into a matcher.

A pattern line is split on ``/`` into segments. Each segment is either the
``**`` wildcard (zero or more whole path segments) or a glob made of
literal runs, ``*``, ``?`` and ``[...]`` classes. Globs are compiled into
token tuples and matched directly; no regular expressions are involved.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final, Union

from syncignore import InvalidPatternError

SEPARATOR: Final[str] = "/"
NEGATION: Final[str] = "!"
ESCAPE: Final[str] = "\\"


@dataclass(frozen=True, slots=True)
class Literal:
    """Literal run of characters, escapes already resolved."""

    text: str


@dataclass(frozen=True, slots=True)
class AnyRun:
    """``*``: any run of characters within one segment, including empty."""


@dataclass(frozen=True, slots=True)
class AnyChar:
    """``?``: exactly one character."""


@dataclass(frozen=True, slots=True)
class CharClass:
    """``[...]``: exactly one character from a set of ranges.

    Attributes:
        ranges: Inclusive ``(low, high)`` pairs; single members have
            ``low == high``.
        negated: Whether the class was written ``[!...]`` or ``[^...]``.
    """

    ranges: tuple[tuple[str, str], ...]
    negated: bool = False

    def accepts(self, char: str) -> bool:
        hit = any(low <= char <= high for low, high in self.ranges)
        return hit != self.negated


Token = Union[Literal, AnyRun, AnyChar, CharClass]


@dataclass(frozen=True, slots=True)
class DoubleStar:
    """``**`` as a whole segment: zero or more path segments."""


@dataclass(frozen=True, slots=True)
class GlobSegment:
    """One glob segment, matched against exactly one path component."""

    tokens: tuple[Token, ...]

    def match(self, name: str) -> bool:
        return _match_tokens(self.tokens, name)


Segment = Union[DoubleStar, GlobSegment]

_ANY_RUN: Final = AnyRun()
_ANY_CHAR: Final = AnyChar()
_DOUBLE_STAR: Final = DoubleStar()


@dataclass(frozen=True, slots=True)
class Pattern:
    """A compiled ignore rule.

    Attributes:
        text: Original pattern line.
        negated: Pattern began with ``!``; a match un-ignores the path.
        dir_only: Pattern ended with ``/``; only directories can match.
        anchored: Pattern began with ``/`` or holds an internal ``/``;
            it matches from the traversal root only. Unanchored patterns
            match the basename at any depth.
        segments: Compiled glob segments.
    """

    text: str
    negated: bool
    dir_only: bool
    anchored: bool
    segments: tuple[Segment, ...]

    def matches(self, path: str, is_dir: bool) -> bool:
        """Return whether this pattern matches a root-relative path.

        Args:
            path: ``/``-separated path relative to the traversal root,
                without leading or trailing separator. ``""`` is the root.
            is_dir: Whether the path names a directory.

        Returns:
            bool: ``True`` when the pattern matches, regardless of negation.
        """
        if self.dir_only and not is_dir:
            return False
        # The root itself is never matched.
        if not path:
            return False
        if self.anchored:
            return _match_segments(self.segments, path.split(SEPARATOR))
        basename = path.rpartition(SEPARATOR)[2]
        return _match_segments(self.segments, (basename,))


def compile_pattern(text: str) -> Pattern:
    """Compile one ignore pattern line.

    Args:
        text: Pattern text, e.g. ``"*.py[cod]"``, ``"/build/"`` or
            ``"!keep/**/*.txt"``.

    Returns:
        Pattern: The compiled pattern.

    Raises:
        InvalidPatternError: If the pattern is empty, matches only the
            root (``"/"``, ``"//"`` and their negations), or has malformed
            glob syntax.
    """
    body = text
    negated = body.startswith(NEGATION)
    if negated:
        body = body[len(NEGATION) :]

    if not body:
        raise InvalidPatternError(text, "empty pattern")
    if not body.strip(SEPARATOR):
        raise InvalidPatternError(text, "pattern names only the root")
    _check_escaped_separator(text, body)

    dir_only = body.endswith(SEPARATOR)
    if dir_only:
        body = body[: -len(SEPARATOR)]

    anchored = body.startswith(SEPARATOR)
    if anchored:
        body = body[len(SEPARATOR) :]
    if SEPARATOR in body:
        anchored = True

    segments: list[Segment] = []
    for part in body.split(SEPARATOR):
        if part == "**":
            # Adjacent ** segments are equivalent to one.
            if segments and isinstance(segments[-1], DoubleStar):
                continue
            segments.append(_DOUBLE_STAR)
        else:
            segments.append(GlobSegment(_compile_tokens(text, part)))

    return Pattern(
        text=text,
        negated=negated,
        dir_only=dir_only,
        anchored=anchored,
        segments=tuple(segments),
    )


def is_valid_pattern(text: str) -> bool:
    """Return whether *text* compiles as an ignore pattern."""
    try:
        compile_pattern(text)
    except InvalidPatternError:
        return False
    return True


def _check_escaped_separator(pattern: str, body: str) -> None:
    # Segments are split on raw separators, so "\/" cannot be a literal.
    i = 0
    while i < len(body):
        if body[i] == ESCAPE:
            if body.startswith(SEPARATOR, i + 1):
                raise InvalidPatternError(pattern, "escaped separator")
            i += 2
        else:
            i += 1


def _compile_tokens(pattern: str, segment: str) -> tuple[Token, ...]:
    tokens: list[Token] = []
    literal: list[str] = []

    def flush() -> None:
        if literal:
            tokens.append(Literal("".join(literal)))
            literal.clear()

    i = 0
    while i < len(segment):
        char = segment[i]
        if char == ESCAPE:
            if i + 1 >= len(segment):
                raise InvalidPatternError(pattern, "dangling escape character")
            literal.append(segment[i + 1])
            i += 2
        elif char == "*":
            flush()
            if not tokens or not isinstance(tokens[-1], AnyRun):
                tokens.append(_ANY_RUN)
            i += 1
        elif char == "?":
            flush()
            tokens.append(_ANY_CHAR)
            i += 1
        elif char == "[":
            flush()
            char_class, i = _compile_class(pattern, segment, i + 1)
            tokens.append(char_class)
        else:
            literal.append(char)
            i += 1
    flush()
    return tuple(tokens)


def _compile_class(pattern: str, segment: str, start: int) -> tuple[CharClass, int]:
    """Parse a class body starting just after ``[``.

    Returns:
        tuple[CharClass, int]: The class and the index just past ``]``.
    """
    i = start
    negated = False
    if i < len(segment) and segment[i] in "!^":
        negated = True
        i += 1

    ranges: list[tuple[str, str]] = []
    while True:
        if i >= len(segment):
            raise InvalidPatternError(pattern, "unterminated character class")
        if segment[i] == "]":
            break
        low, i = _class_member(pattern, segment, i)
        high = low
        if i + 1 < len(segment) and segment[i] == "-" and segment[i + 1] != "]":
            high, i = _class_member(pattern, segment, i + 1)
            if low > high:
                raise InvalidPatternError(
                    pattern, f"character range {low}-{high} is out of order"
                )
        ranges.append((low, high))

    if not ranges:
        raise InvalidPatternError(pattern, "empty character class")
    return CharClass(tuple(ranges), negated), i + 1


def _class_member(pattern: str, segment: str, i: int) -> tuple[str, int]:
    if segment[i] == ESCAPE:
        if i + 1 >= len(segment):
            raise InvalidPatternError(pattern, "dangling escape character")
        return segment[i + 1], i + 2
    return segment[i], i + 1


def _consume(token: Token, name: str, ni: int) -> int:
    """Return the offset after *token* matches at *ni*, or ``-1``."""
    if isinstance(token, Literal):
        return ni + len(token.text) if name.startswith(token.text, ni) else -1
    if ni >= len(name):
        return -1
    if isinstance(token, AnyChar) or token.accepts(name[ni]):
        return ni + 1
    return -1


def _match_tokens(tokens: tuple[Token, ...], name: str) -> bool:
    # Only the most recent * is ever resumed: whatever an earlier * could
    # absorb, a later one can too.
    ti = ni = 0
    star_ti, star_ni = -1, 0
    while True:
        if ti < len(tokens):
            token = tokens[ti]
            if isinstance(token, AnyRun):
                star_ti, star_ni = ti, ni
                ti += 1
                continue
            end = _consume(token, name, ni)
            if end >= 0:
                ti, ni = ti + 1, end
                continue
        elif ni == len(name):
            return True
        if star_ti < 0 or star_ni >= len(name):
            return False
        star_ni += 1
        ti, ni = star_ti + 1, star_ni


def _match_segments(segments: tuple[Segment, ...], parts: Sequence[str]) -> bool:
    # Same single resume point as _match_tokens, with ** over whole segments.
    si = pi = 0
    star_si, star_pi = -1, 0
    while True:
        if si < len(segments):
            segment = segments[si]
            if isinstance(segment, DoubleStar):
                star_si, star_pi = si, pi
                si += 1
                continue
            if pi < len(parts) and segment.match(parts[pi]):
                si, pi = si + 1, pi + 1
                continue
        elif pi == len(parts):
            return True
        if star_si < 0 or star_pi >= len(parts):
            return False
        star_pi += 1
        si, pi = star_si + 1, star_pi
