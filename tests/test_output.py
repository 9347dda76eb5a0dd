"""Tests for digest.output routing."""

from __future__ import annotations

import io

import pyperclip

from digest import output
from digest.output import CLIPBOARD, STDOUT, NoSinkAvailable, copy_to_clipboard, route

_DOCUMENT = b"# Directory: project\n\n## Files\n\n"


def test_route_copies_to_clipboard_when_interactive() -> None:
    stream = io.BytesIO()
    copied: list[bytes] = []

    result = route(_DOCUMENT, True, stream=stream, sink=copied.append)

    assert result.destination == CLIPBOARD
    assert result.warning is None
    assert copied == [_DOCUMENT]
    assert stream.getvalue() == b""


def test_route_writes_stream_when_piped() -> None:
    stream = io.BytesIO()

    def _sink(_: bytes) -> None:
        raise AssertionError("clipboard must not be touched when output is piped")

    result = route(_DOCUMENT, False, stream=stream, sink=_sink)

    assert result.destination == STDOUT
    assert result.warning is None
    assert stream.getvalue() == _DOCUMENT


def test_route_falls_back_to_stream_without_clipboard() -> None:
    stream = io.BytesIO()

    def _sink(_: bytes) -> None:
        raise NoSinkAvailable("no clipboard")

    result = route(_DOCUMENT, True, stream=stream, sink=_sink)

    assert result.destination == STDOUT
    assert result.warning
    assert stream.getvalue() == _DOCUMENT


def test_copy_to_clipboard_uses_pyperclip(monkeypatch) -> None:
    copied: list[str] = []
    monkeypatch.setattr(output.pyperclip, "copy", copied.append)

    copy_to_clipboard("héllo\n".encode("utf-8"))

    assert copied == ["héllo\n"]


def test_copy_to_clipboard_maps_missing_mechanism(monkeypatch) -> None:
    def _copy(_: str) -> None:
        raise pyperclip.PyperclipException("no copy/paste mechanism")

    monkeypatch.setattr(output.pyperclip, "copy", _copy)

    try:
        copy_to_clipboard(b"data")
    except NoSinkAvailable as exc:
        assert "mechanism" in str(exc)
    else:  # pragma: no cover - defensive guard
        raise AssertionError("Expected NoSinkAvailable when pyperclip has no backend")
