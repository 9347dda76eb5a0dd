"""Exclusion pattern matching.

Extension rules look at the filename only. A pattern that starts with ``.``
is a literal suffix; anything else is a glob where ``*`` matches any run of
characters and ``?`` matches exactly one. Directory rules compare whole path
segments, never substrings.
"""

from __future__ import annotations

from typing import Sequence

from .models import DirectoryRule, ExtensionRule, RuleSet


def glob_match(name: str, pattern: str) -> bool:
    """Return True when ``name`` matches the ``*``/``?`` glob ``pattern`` in full."""
    n_idx = p_idx = 0
    star_idx = -1
    star_match = 0
    while n_idx < len(name):
        if p_idx < len(pattern) and pattern[p_idx] == "*":
            star_idx = p_idx
            star_match = n_idx
            p_idx += 1
        elif p_idx < len(pattern) and pattern[p_idx] in ("?", name[n_idx]):
            n_idx += 1
            p_idx += 1
        elif star_idx != -1:
            # Backtrack: let the last star swallow one more character.
            star_match += 1
            n_idx = star_match
            p_idx = star_idx + 1
        else:
            return False
    while p_idx < len(pattern) and pattern[p_idx] == "*":
        p_idx += 1
    return p_idx == len(pattern)


def _filename(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def matches_extension(path: str, rule: ExtensionRule) -> bool:
    filename = _filename(path)
    if rule.pattern.startswith("."):
        return filename.endswith(rule.pattern)
    return glob_match(filename, rule.pattern)


def matches_directory(segments: Sequence[str], rule: DirectoryRule) -> bool:
    return rule.name in segments


def is_excluded_file(relative_path: str, rules: RuleSet) -> bool:
    """Check a file's relative path against every extension rule."""
    return any(matches_extension(relative_path, rule) for rule in rules.extensions)


def is_excluded_directory(segments: Sequence[str], rules: RuleSet) -> bool:
    """Check a directory's path segments against every directory rule."""
    return any(matches_directory(segments, rule) for rule in rules.directories)


__all__ = [
    "glob_match",
    "is_excluded_directory",
    "is_excluded_file",
    "matches_directory",
    "matches_extension",
]
