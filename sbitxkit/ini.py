"""Parser for simple INI-style files: [section] headers, name=value pairs and ';' comments."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Iterator
from typing import TextIO, Union

MAX_LINE = 200
MAX_SECTION = 50
MAX_NAME = 50
START_COMMENT_PREFIXES = ";"
INLINE_COMMENT_PREFIXES = ";"

_WHITESPACE = " \t\n\v\f\r"
_BOM = "\ufeff"

Handler = Callable[[str, str, str], object]
PathType = Union[str, "os.PathLike[str]"]


class IniParseError(ValueError):
    """Raised after parsing when a line could not be parsed or was rejected."""

    def __init__(self, lineno: int) -> None:
        super().__init__(f"parse error on line {lineno}")
        self.lineno = lineno


def _find_chars_or_comment(text: str, chars: str | None) -> int:
    """Index of the first of ``chars`` or of an inline comment, else len(text).

    An inline comment only counts when preceded by whitespace.
    """
    was_space = False
    for index, char in enumerate(text):
        if chars and char in chars:
            return index
        if was_space and char in INLINE_COMMENT_PREFIXES:
            return index
        was_space = char in _WHITESPACE
    return len(text)


def _chunks(lines: Iterable[str]) -> Iterator[str]:
    """Split physical lines into pieces no longer than the line buffer holds."""
    limit = MAX_LINE - 1
    for line in lines:
        while len(line) > limit:
            yield line[:limit]
            line = line[limit:]
        if line:
            yield line


def _split_lines(text: str) -> Iterator[str]:
    pieces = text.split("\n")
    for piece in pieces[:-1]:
        yield piece + "\n"
    if pieces[-1]:
        yield pieces[-1]


def _parse_lines(lines: Iterable[str], handler: Handler) -> None:
    section = ""
    prev_name = ""
    error = 0

    def reject(lineno: int) -> None:
        nonlocal error
        if not error:
            error = lineno

    for lineno, line in enumerate(_chunks(lines), start=1):
        offset = 0
        if lineno == 1 and line.startswith(_BOM):
            offset = 1
        body = line[offset:].rstrip(_WHITESPACE)
        text = body.lstrip(_WHITESPACE)
        indented = offset > 0 or len(text) < len(body)

        if not text or text[0] in START_COMMENT_PREFIXES:
            continue

        if prev_name and indented:
            if handler(section, prev_name, text) is False:
                reject(lineno)
        elif text[0] == "[":
            end = _find_chars_or_comment(text[1:], "]") + 1
            if end < len(text) and text[end] == "]":
                section = text[1:end][: MAX_SECTION - 1]
                prev_name = ""
            else:
                reject(lineno)
        else:
            end = _find_chars_or_comment(text, "=")
            if end < len(text) and text[end] == "=":
                name = text[:end].rstrip(_WHITESPACE)
                value = text[end + 1 :]
                value = value[: _find_chars_or_comment(value, None)]
                value = value.strip(_WHITESPACE)
                prev_name = name[: MAX_NAME - 1]
                if handler(section, name, value) is False:
                    reject(lineno)
            else:
                reject(lineno)

    if error:
        raise IniParseError(error)


def parse_string(text: str, handler: Handler) -> None:
    """Parse INI data held in a string.

    ``handler(section, name, value)`` is called for every pair; returning
    ``False`` marks the line as an error. Parsing continues past errors and
    :class:`IniParseError` names the first bad line.
    """
    _parse_lines(_split_lines(text.split("\0", 1)[0]), handler)


def parse_file(file: TextIO, handler: Handler) -> None:
    """Parse INI data from an open text file; the file is left open."""
    _parse_lines(file, handler)


def parse(filename: PathType, handler: Handler) -> None:
    """Parse the INI file at ``filename``; OSError if it cannot be opened."""
    with open(filename, encoding="utf-8") as file:
        parse_file(file, handler)


def load(filename: PathType) -> dict[str, dict[str, str]]:
    """Read an INI file into ``{section: {name: value}}``.

    Repeated names and continuation lines are joined with newlines.
    """
    result: dict[str, dict[str, str]] = {}

    def collect(section: str, name: str, value: str) -> None:
        values = result.setdefault(section, {})
        if name in values:
            values[name] = values[name] + "\n" + value
        else:
            values[name] = value

    parse(filename, collect)
    return result