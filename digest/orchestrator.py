"""Pipeline orchestration: rules, traversal and assembly for one root."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

from .config import VCS_DIRECTORY, load_config, merge_rules
from .document import DocumentAssembler
from .git.repo_info import RepoInspector, resolve_header
from .logging import get_logger
from .models import RepoHeader, RuleSet
from .repo_scanner import RepoScanner, TraversalError


@dataclass
class DigestOutcome:
    """Result of a digest run."""

    root: Path
    header: RepoHeader
    rules: RuleSet
    document: bytes
    files: List[str] = field(default_factory=list)
    warnings: List[TraversalError] = field(default_factory=list)


class Orchestrator:
    """Runs the digest pipeline for the CLI and the service."""

    def __init__(self, inspector: RepoInspector | None = None) -> None:
        self.inspector = inspector or RepoInspector()
        self.logger = get_logger("orchestrator")

    def run(
        self,
        path: str | Path,
        *,
        exclude_ext: Iterable[str] = (),
        exclude_dir: Iterable[str] = (),
    ) -> DigestOutcome:
        """Build the digest document for ``path``.

        Raises ``FileNotFoundError``/``NotADirectoryError`` for a bad root,
        :class:`~digest.config.UsageError` for an invalid exclusion value and
        :class:`~digest.config.ConfigParseError` for an unreadable config file.
        Unreadable entries never abort the run; they are returned as warnings.
        """
        root = Path(path).expanduser().resolve()
        if not root.exists():
            raise FileNotFoundError(f"Directory not found: {path}")
        if not root.is_dir():
            raise NotADirectoryError(f"Not a directory: {path}")
        self.logger.debug("Starting digest for %s", root)

        header = resolve_header(root, self.inspector)
        config = load_config(root)
        rules = merge_rules(
            exclude_ext,
            exclude_dir,
            config.ext,
            config.dir,
            is_repository=header.is_repository or (root / VCS_DIRECTORY).exists(),
        )
        self.logger.debug(
            "Using %d extension and %d directory rules",
            len(rules.extensions),
            len(rules.directories),
        )

        scanner = RepoScanner(rules)
        assembler = DocumentAssembler()
        document = assembler.assemble(header, scanner.scan(root))
        self.logger.debug("Embedded %d files", len(assembler.included))

        return DigestOutcome(
            root=root,
            header=header,
            rules=rules,
            document=document,
            files=list(assembler.included),
            warnings=[*scanner.errors, *assembler.errors],
        )


__all__ = ["DigestOutcome", "Orchestrator"]
