"""Delivery of the finished document: clipboard when interactive, stream otherwise."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Callable, Optional

import pyperclip

from .logging import get_logger

logger = get_logger("output")

CLIPBOARD = "clipboard"
STDOUT = "stdout"


class NoSinkAvailable(RuntimeError):
    """Raised when no clipboard mechanism exists on this system."""


@dataclass(frozen=True)
class RouteResult:
    destination: str
    warning: Optional[str] = None


def copy_to_clipboard(data: bytes) -> None:
    try:
        pyperclip.copy(data.decode("utf-8"))
    except pyperclip.PyperclipException as exc:
        raise NoSinkAvailable(str(exc)) from exc


def route(
    document: bytes,
    is_interactive: bool,
    *,
    stream: BinaryIO,
    sink: Callable[[bytes], None] = copy_to_clipboard,
) -> RouteResult:
    """Deliver ``document`` without altering it; only the channel depends on ``is_interactive``."""
    if not is_interactive:
        _write(stream, document)
        return RouteResult(destination=STDOUT)

    try:
        sink(document)
    except NoSinkAvailable as exc:
        logger.debug("Clipboard unavailable: %s", exc)
        _write(stream, document)
        return RouteResult(
            destination=STDOUT,
            warning="No clipboard utility found; the output is printed instead.",
        )
    return RouteResult(destination=CLIPBOARD)


def _write(stream: BinaryIO, document: bytes) -> None:
    stream.write(document)
    stream.flush()


__all__ = ["CLIPBOARD", "STDOUT", "NoSinkAvailable", "RouteResult", "copy_to_clipboard", "route"]
