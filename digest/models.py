"""Core data models shared across digest components."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class ExtensionRule:
    """Excludes files by filename suffix (``.md``) or filename glob (``*.tmp``)."""

    pattern: str


@dataclass(frozen=True)
class DirectoryRule:
    """Excludes every directory whose name equals ``name``, at any depth."""

    name: str


ExclusionRule = Union[ExtensionRule, DirectoryRule]


@dataclass(frozen=True)
class RuleSet:
    """Merged exclusion rules, in source order: defaults, CLI, config file."""

    extensions: Tuple[ExtensionRule, ...] = ()
    directories: Tuple[DirectoryRule, ...] = ()


class HeaderKind(str, Enum):
    REPOSITORY = "repository"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class RepoHeader:
    """Provenance of the scanned root."""

    kind: HeaderKind
    name: str
    branch: Optional[str] = None
    remote_url: Optional[str] = None

    @property
    def is_repository(self) -> bool:
        return self.kind is HeaderKind.REPOSITORY


@dataclass(frozen=True)
class FileEntry:
    """A regular file discovered during traversal."""

    relative_path: str
    absolute_path: Path
