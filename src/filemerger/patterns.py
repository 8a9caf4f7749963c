"""
Ignore-pattern matching for filemerger.

Patterns are shell globs (``*``, ``?``, ``[...]``, ``\\`` escapes) where ``*``
and ``?`` never cross a ``/``. A pattern excludes a path when it matches the
whole relative path, when it matches the path's basename, or, for patterns
ending in ``/``, when the path starts with the pattern text.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Tuple

import pathspec
from pathspec.pattern import RegexPattern
from pathspec.util import register_pattern


def _class_char(pattern: str, i: int) -> Tuple[Optional[str], int]:
    if pattern[i] == "\\":
        if i + 1 >= len(pattern):
            return None, i
        return pattern[i + 1], i + 2
    return pattern[i], i + 1


def _translate_class(pattern: str, i: int) -> Tuple[Optional[str], int]:
    """Translate the bracket expression starting just after ``[`` at *i*."""
    n = len(pattern)
    negate = False
    if i < n and pattern[i] in "^!":
        negate = True
        i += 1

    items: List[str] = []
    while True:
        if i >= n:
            return None, i  # unterminated
        if pattern[i] == "]" and items:
            i += 1
            break
        lo, i = _class_char(pattern, i)
        if lo is None:
            return None, i
        hi = lo
        if i + 1 < n and pattern[i] == "-" and pattern[i + 1] != "]":
            hi, i = _class_char(pattern, i + 1)
            if hi is None or hi < lo:
                return None, i
        if lo == hi:
            items.append(re.escape(lo))
        else:
            items.append(f"{re.escape(lo)}-{re.escape(hi)}")

    body = "".join(items)
    if negate:
        return f"[^/{body}]", i
    return f"(?!/)[{body}]", i


def translate_glob(pattern: str) -> Optional[str]:
    """
    Return a regex source for *pattern*, anchored at the end, or ``None`` if
    the pattern is malformed.
    """
    out: List[str] = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        i += 1
        if c == "*":
            while i < n and pattern[i] == "*":
                i += 1
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "\\":
            if i >= n:
                return None
            out.append(re.escape(pattern[i]))
            i += 1
        elif c == "[":
            cls, i = _translate_class(pattern, i)
            if cls is None:
                return None
            out.append(cls)
        else:
            out.append(re.escape(c))
    out.append(r"\Z")
    return "".join(out)


class IgnorePattern(RegexPattern):
    """
    A single line of an ``.ignore`` file compiled for :class:`pathspec.PathSpec`.

    Every compiled pattern is an exclusion (``include`` is ``True``); blank
    patterns, and malformed globs without a trailing ``/``, compile to null
    patterns that never match.
    """

    __slots__ = ()

    @classmethod
    def pattern_to_regex(cls, pattern: str) -> Tuple[Optional[str], Optional[bool]]:
        if not pattern:
            return None, None

        alternatives: List[str] = []
        glob = translate_glob(pattern)
        if glob is not None:
            if "/" in pattern:
                alternatives.append(glob)
            else:
                # whole path or basename
                alternatives.append("(?:.*/)?" + glob)
        if pattern.endswith("/"):
            alternatives.append(re.escape(pattern))

        if not alternatives:
            return None, None
        return "(?s)^(?:" + "|".join(alternatives) + ")", True


register_pattern("ignoreglob", IgnorePattern)


def matches(pattern: str, path: str) -> bool:
    """Return ``True`` if *pattern* excludes the relative POSIX *path*."""
    return IgnorePattern(pattern).match_file(path) is not None


def compile_patterns(patterns: Iterable[str]) -> "pathspec.PathSpec":
    return pathspec.PathSpec.from_lines("ignoreglob", patterns)


def should_ignore(rel_path: str, patterns: Iterable[str]) -> bool:
    """Return ``True`` if any of *patterns* excludes *rel_path*."""
    return compile_patterns(patterns).match_file(rel_path)
