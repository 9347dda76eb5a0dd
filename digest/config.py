"""Exclusion configuration: the per-directory ``.digest.toml`` and rule merging."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional

from .logging import get_logger
from .models import DirectoryRule, ExtensionRule, RuleSet

CONFIG_FILENAME = ".digest.toml"
CONFIG_SECTION = "exclude"
VCS_DIRECTORY = ".git"

_EXTENSION_KEY = "ext"
_DIRECTORY_KEY = "dir"

logger = get_logger("config")


class ConfigParseError(RuntimeError):
    """Raised when the config file exists but cannot be read."""


class UsageError(ValueError):
    """Raised for an exclusion value that can never form a valid rule."""


@dataclass
class ConfigExclusions:
    """Raw exclusion lists declared in ``.digest.toml``."""

    ext: List[str] = field(default_factory=list)
    dir: List[str] = field(default_factory=list)


def parse_extension_rule(value: str) -> ExtensionRule:
    pattern = value.strip()
    if not pattern:
        raise UsageError("extension pattern must not be empty")
    return ExtensionRule(pattern=pattern)


def parse_directory_rule(value: str) -> DirectoryRule:
    name = value.strip().rstrip("/\\")
    if not name:
        raise UsageError("directory name must not be empty")
    if "/" in name or "\\" in name:
        raise UsageError(
            f"directory name '{value.strip()}' must be a single path segment"
        )
    return DirectoryRule(name=name)


def load_config(root: Path) -> ConfigExclusions:
    """Load ``.digest.toml`` from ``root``; a missing file means no extra rules."""
    config_file = root / CONFIG_FILENAME
    if not config_file.is_file():
        return ConfigExclusions()

    try:
        text = config_file.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise ConfigParseError(f"Could not read {config_file}: {exc}") from exc

    return _parse_config(text)


def _parse_config(text: str) -> ConfigExclusions:
    exclusions = ConfigExclusions()
    section: Optional[str] = None
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("[") and "=" not in line:
            header = line.split("#", 1)[0].strip()
            section = header[1:-1].strip() if header.endswith("]") else None
            continue
        if section != CONFIG_SECTION:
            continue
        if "=" not in line:
            logger.debug("Ignoring line %d of %s: no '='", lineno, CONFIG_FILENAME)
            continue
        key_part, value_part = line.split("=", 1)
        key = key_part.strip()
        if key not in (_EXTENSION_KEY, _DIRECTORY_KEY):
            logger.debug("Ignoring unknown key '%s' in %s", key, CONFIG_FILENAME)
            continue
        values = _parse_string_list(value_part.strip())
        if values is None:
            logger.debug("Ignoring malformed value for '%s' in %s", key, CONFIG_FILENAME)
            continue
        getattr(exclusions, key).extend(values)
    return exclusions


def _parse_string_list(value: str) -> Optional[List[str]]:
    try:
        loaded: Any = tomllib.loads(f"value = {value}")["value"]
    except tomllib.TOMLDecodeError:
        return None
    if not isinstance(loaded, list):
        return None
    return [item for item in loaded if isinstance(item, str)]


def merge_rules(
    cli_ext: Iterable[str],
    cli_dir: Iterable[str],
    config_ext: Iterable[str],
    config_dir: Iterable[str],
    *,
    is_repository: bool,
) -> RuleSet:
    """Combine built-in, command-line and config-file exclusions into one RuleSet.

    Sources only ever add rules. Invalid CLI values raise :class:`UsageError`;
    invalid config-file values are skipped with a warning. The config file
    itself is left out by the scanner, which knows the root.
    """
    extensions: List[ExtensionRule] = []
    directories: List[DirectoryRule] = []
    if is_repository:
        directories.append(DirectoryRule(VCS_DIRECTORY))

    extensions.extend(parse_extension_rule(value) for value in cli_ext)
    directories.extend(parse_directory_rule(value) for value in cli_dir)

    extensions.extend(_tolerant(parse_extension_rule, config_ext))
    directories.extend(_tolerant(parse_directory_rule, config_dir))

    return RuleSet(extensions=tuple(extensions), directories=tuple(directories))


def _tolerant(parse: Callable[[str], Any], values: Iterable[str]) -> List[Any]:
    rules = []
    for value in values:
        try:
            rules.append(parse(value))
        except UsageError as exc:
            logger.warning("Ignoring entry in %s: %s", CONFIG_FILENAME, exc)
    return rules


__all__ = [
    "CONFIG_FILENAME",
    "VCS_DIRECTORY",
    "ConfigExclusions",
    "ConfigParseError",
    "UsageError",
    "load_config",
    "merge_rules",
    "parse_directory_rule",
    "parse_extension_rule",
]
