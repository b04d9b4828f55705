"""Line normalization and classification for the config parser."""

from __future__ import annotations

from .constants import SCRIPT_CONTENT_INDENT

_TRIM_CHARS = " \t\r\n"


def trim(line: str) -> str:
    return line.strip(_TRIM_CHARS)


def is_skippable(trimmed: str) -> bool:
    """Return True for blank and comment lines."""
    return trimmed == "" or trimmed.startswith("#")


def is_indented(raw_line: str) -> bool:
    return raw_line.startswith((" ", "\t"))


def strip_content_indent(raw_line: str) -> str:
    """Remove exactly one leading two-space indent, if present."""
    if raw_line.startswith(SCRIPT_CONTENT_INDENT):
        return raw_line[len(SCRIPT_CONTENT_INDENT):]
    return raw_line


def parse_section_header(trimmed: str) -> str | None:
    """Return the text between '[' and the first ']', or None if unterminated."""
    if not trimmed.startswith("["):
        return None
    end = trimmed.find("]")
    if end == -1:
        return None
    return trimmed[1:end]


def split_key_value(trimmed: str) -> tuple[str, str] | None:
    key, sep, value = trimmed.partition("=")
    if not sep:
        return None
    return trim(key), trim(value)
