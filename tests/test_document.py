"""Tests for header rendering and document assembly."""

from __future__ import annotations

import os
from pathlib import Path

from digest.document import DocumentAssembler, render_header
from digest.models import FileEntry, HeaderKind, RepoHeader

_DIRECTORY = RepoHeader(kind=HeaderKind.DIRECTORY, name="project")


def _entry(root: Path, rel: str, data: bytes) -> FileEntry:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return FileEntry(relative_path=rel, absolute_path=path)


def test_render_header_for_repository_with_remote() -> None:
    header = RepoHeader(
        kind=HeaderKind.REPOSITORY,
        name="digest",
        branch="main",
        remote_url="git@example.com:team/digest.git",
    )

    assert render_header(header) == (
        "# Repository: digest\n"
        "Current branch: main\n"
        "Remote: git@example.com:team/digest.git\n"
        "\n"
        "## Files\n"
        "\n"
    )


def test_render_header_omits_missing_remote() -> None:
    header = RepoHeader(kind=HeaderKind.REPOSITORY, name="digest", branch="feature/x")

    rendered = render_header(header)

    assert rendered == "# Repository: digest\nCurrent branch: feature/x\n\n## Files\n\n"
    assert "Remote:" not in rendered


def test_render_header_for_plain_directory() -> None:
    rendered = render_header(_DIRECTORY)

    assert rendered == "# Directory: project\n\n## Files\n\n"
    assert "branch" not in rendered


def test_assemble_emits_one_fenced_section_per_file(tmp_path: Path) -> None:
    entries = [
        _entry(tmp_path, "a.go", b"package main\n"),
        _entry(tmp_path, "src/b.py", b"print('hi')\n"),
    ]

    document = DocumentAssembler().assemble(_DIRECTORY, entries)

    assert document == (
        b"# Directory: project\n\n## Files\n\n"
        b"### File: a.go\n```\npackage main\n```\n\n"
        b"### File: src/b.py\n```\nprint('hi')\n```\n\n"
    )


def test_assemble_keeps_closing_fence_on_its_own_line(tmp_path: Path) -> None:
    entries = [
        _entry(tmp_path, "no_newline.txt", b"last line"),
        _entry(tmp_path, "empty.txt", b""),
    ]

    document = DocumentAssembler().assemble(_DIRECTORY, entries).decode("utf-8")

    assert "### File: no_newline.txt\n```\nlast line\n```\n\n" in document
    assert "### File: empty.txt\n```\n```\n\n" in document


def test_assemble_embeds_content_verbatim(tmp_path: Path) -> None:
    content = "{{ not_a_template }} {% raw %}\r\nline two\n"
    entries = [_entry(tmp_path, "tpl.j2", content.encode("utf-8"))]

    document = DocumentAssembler().assemble(_DIRECTORY, entries).decode("utf-8")

    assert f"```\n{content}```\n" in document


def test_assemble_replaces_invalid_utf8_and_reports_it(tmp_path: Path) -> None:
    entries = [_entry(tmp_path, "blob.bin", b"ok\xff\n")]
    assembler = DocumentAssembler()

    document = assembler.assemble(_DIRECTORY, entries).decode("utf-8")

    assert "### File: blob.bin\n```\nok\ufffd\n```\n" in document
    assert assembler.included == ["blob.bin"]
    assert [error.path for error in assembler.errors] == ["blob.bin"]


def test_assemble_skips_unreadable_file(tmp_path: Path, monkeypatch) -> None:
    readable = _entry(tmp_path, "a.txt", b"a\n")
    locked = _entry(tmp_path, "locked.txt", b"secret\n")
    original_read_bytes = Path.read_bytes

    def _read_bytes(self: Path) -> bytes:
        if self.name == "locked.txt":
            raise PermissionError(13, "Permission denied", str(self))
        return original_read_bytes(self)

    monkeypatch.setattr(Path, "read_bytes", _read_bytes)
    assembler = DocumentAssembler()

    document = assembler.assemble(_DIRECTORY, [readable, locked])

    assert b"locked.txt" not in document
    assert assembler.included == ["a.txt"]
    assert [error.path for error in assembler.errors] == ["locked.txt"]


def test_assemble_is_deterministic(tmp_path: Path) -> None:
    entries = [_entry(tmp_path, "a.txt", b"alpha\n"), _entry(tmp_path, "b.txt", b"beta\n")]

    first = DocumentAssembler().assemble(_DIRECTORY, entries)
    os.utime(entries[0].absolute_path, (0, 0))
    second = DocumentAssembler().assemble(_DIRECTORY, entries)

    assert first == second
