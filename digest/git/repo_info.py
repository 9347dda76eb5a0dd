"""Git repository identity for the digest header."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, Optional

from ..logging import get_logger
from ..models import HeaderKind, RepoHeader

logger = get_logger("git")


class RepoInspector:
    """Reads repository name, branch and ``origin`` remote through the git CLI."""

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner

    def detect(self, root: Path | str) -> Optional[RepoHeader]:
        """Return a repository header, or None when ``root`` is not inside a work tree."""
        repo = Path(root)
        try:
            inside = self._run(["git", "rev-parse", "--is-inside-work-tree"], cwd=repo)
        except (OSError, subprocess.CalledProcessError):
            return None
        if inside.strip() != "true":
            return None

        try:
            toplevel = self._run(["git", "rev-parse", "--show-toplevel"], cwd=repo).strip()
        except subprocess.CalledProcessError:
            toplevel = ""
        name = Path(toplevel).name if toplevel else repo.resolve().name

        return RepoHeader(
            kind=HeaderKind.REPOSITORY,
            name=name,
            branch=self._optional(["git", "rev-parse", "--abbrev-ref", "HEAD"], repo),
            remote_url=self._optional(["git", "remote", "get-url", "origin"], repo),
        )

    # ------------------------------------------------------------------
    # Helpers

    def _optional(self, args: Iterable[str], repo: Path) -> Optional[str]:
        try:
            value = self._run(args, cwd=repo).strip()
        except subprocess.CalledProcessError:
            # Unborn branches and missing remotes both land here.
            return None
        return value or None

    def _run(self, args: Iterable[str], *, cwd: Path) -> str:
        return self._runner(args, cwd=cwd)

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=True,
        )
        return completed.stdout


def resolve_header(root: Path, inspector: RepoInspector) -> RepoHeader:
    """Repository header when available, otherwise a plain directory header."""
    header = inspector.detect(root)
    if header is not None:
        logger.debug("Detected git repository %s", header.name)
        return header
    return RepoHeader(kind=HeaderKind.DIRECTORY, name=root.resolve().name)


__all__ = ["RepoInspector", "resolve_header"]
