"""Deterministic, exclusion-aware traversal of the digest root."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List

from .config import CONFIG_FILENAME
from .logging import get_logger
from .matcher import is_excluded_directory, is_excluded_file
from .models import FileEntry, RuleSet

logger = get_logger("scanner")


class TraversalError(OSError):
    """A single entry that could not be read; the walk carries on without it."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class RepoScanner:
    """Walks the root and yields the files that survive the exclusion rules.

    Entries of each directory are visited in sorted name order, files and
    subdirectories interleaved, and a subdirectory is descended where it falls
    in that order. Directories matching a directory rule are pruned before
    descent, so nothing beneath them is listed or opened. The root's own
    ``.digest.toml`` is never yielded. Unreadable directories are recorded in
    :attr:`errors` instead of aborting the walk.
    """

    def __init__(self, rules: RuleSet) -> None:
        self.rules = rules
        self.errors: List[TraversalError] = []

    def scan(self, root: Path | str) -> Iterator[FileEntry]:
        root_path = Path(root)
        if not root_path.exists():
            raise FileNotFoundError(f"Directory not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Not a directory: {root}")
        return self._iter_dir(root_path, [])

    def _iter_dir(self, directory: Path, segments: List[str]) -> Iterator[FileEntry]:
        rel_dir = "/".join(segments)
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as exc:
            self.errors.append(TraversalError(rel_dir or ".", exc.strerror or str(exc)))
            return

        for entry in entries:
            rel_path = _join(rel_dir, entry.name)
            if entry.is_dir(follow_symlinks=False):
                if is_excluded_directory([*segments, entry.name], self.rules):
                    logger.debug("Pruning directory %s", rel_path)
                    continue
                yield from self._iter_dir(Path(entry.path), [*segments, entry.name])
                continue
            if not segments and entry.name == CONFIG_FILENAME:
                continue
            if is_excluded_file(rel_path, self.rules):
                continue
            if not entry.is_file():
                logger.debug("Skipping non-regular entry %s", rel_path)
                continue
            yield FileEntry(relative_path=rel_path, absolute_path=Path(entry.path))


def _join(rel_dir: str, name: str) -> str:
    return f"{rel_dir}/{name}" if rel_dir else name


__all__ = ["RepoScanner", "TraversalError"]
