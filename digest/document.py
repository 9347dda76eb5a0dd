"""Header rendering and document assembly."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from jinja2 import Environment, FileSystemLoader

from .logging import get_logger
from .models import FileEntry, RepoHeader
from .repo_scanner import TraversalError

logger = get_logger("document")

_TEMPLATES_DIR = Path(__file__).with_name("templates")


def _create_env() -> Environment:
    loader = FileSystemLoader(str(_TEMPLATES_DIR))
    return Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


_ENV = _create_env()


def render_header(header: RepoHeader) -> str:
    """Render the provenance block, ending with the ``## Files`` title."""
    return _ENV.get_template("header.j2").render(header=header)


class DocumentAssembler:
    """Concatenates the header and one fenced section per file.

    Files are embedded in the order they are received. Content is decoded as
    UTF-8; invalid sequences become U+FFFD and the file is reported in
    :attr:`errors` rather than dropped. Files that cannot be read at all are
    skipped and reported the same way.
    """

    def __init__(self) -> None:
        self.errors: List[TraversalError] = []
        self.included: List[str] = []
        self._file_template = _ENV.get_template("file.j2")

    def assemble(self, header: RepoHeader, entries: Iterable[FileEntry]) -> bytes:
        segments: List[str] = [render_header(header)]
        for entry in entries:
            content = self._read(entry)
            if content is None:
                continue
            if content and not content.endswith("\n"):
                content += "\n"
            segments.append(self._file_template.render(path=entry.relative_path, content=content))
            self.included.append(entry.relative_path)
        return "".join(segments).encode("utf-8")

    def _read(self, entry: FileEntry) -> str | None:
        try:
            raw = entry.absolute_path.read_bytes()
        except OSError as exc:
            self.errors.append(TraversalError(entry.relative_path, exc.strerror or str(exc)))
            return None
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            self.errors.append(
                TraversalError(entry.relative_path, "not valid UTF-8; invalid bytes replaced")
            )
            return raw.decode("utf-8", errors="replace")


__all__ = ["DocumentAssembler", "render_header"]
