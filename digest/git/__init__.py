"""Git helpers for the digest header."""

from .repo_info import RepoInspector, resolve_header

__all__ = ["RepoInspector", "resolve_header"]
