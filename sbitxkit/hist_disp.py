"""Decorating FT8 console lines with style markup, and the grid list for the web map."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Protocol, Union

HD_MARKUP_CHAR = "#"
TOKEN_MAX = 32
DEFAULT_GRID_LIST = os.path.join(".", "web", "grids.txt")

PathType = Union[str, "os.PathLike[str]"]


class _Lookup(Protocol):
    def caller_exists(self, callsign: str) -> bool: ...

    def grid_exists(self, grid: str) -> bool: ...


class Style(Enum):
    """Display styles for console text and fields."""

    LOG = auto()
    MYCALL = auto()
    CALLER = auto()
    CALLEE = auto()
    GRID = auto()
    FT8_RX = auto()
    FT8_TX = auto()
    FT8_QUEUED = auto()
    FT8_REPLY = auto()
    CW_RX = auto()
    CW_TX = auto()
    FLDIGI_RX = auto()
    FLDIGI_TX = auto()
    TELNET = auto()
    FIELD_LABEL = auto()
    FIELD_VALUE = auto()
    LARGE_FIELD = auto()
    LARGE_VALUE = auto()
    SMALL = auto()
    SMALL_FIELD_VALUE = auto()
    BLACK = auto()


# font index that each style is drawn with
_FONTS = {
    Style.LOG: 5,
    Style.MYCALL: 16,
    Style.CALLER: 17,
    Style.CALLEE: 5,
    Style.GRID: 18,
    Style.FT8_RX: 6,
    Style.FT8_TX: 7,
    Style.FT8_QUEUED: 14,
    Style.FT8_REPLY: 15,
    Style.CW_RX: 9,
    Style.CW_TX: 10,
    Style.FLDIGI_RX: 11,
    Style.FLDIGI_TX: 12,
    Style.TELNET: 13,
    Style.FIELD_LABEL: 0,
    Style.FIELD_VALUE: 1,
    Style.LARGE_FIELD: 2,
    Style.LARGE_VALUE: 3,
    Style.SMALL: 4,
    Style.SMALL_FIELD_VALUE: 8,
    Style.BLACK: 19,
}

_FT8_STYLES = frozenset({Style.FT8_RX, Style.FT8_TX, Style.FT8_QUEUED, Style.FT8_REPLY})


@dataclass
class HdMessage:
    """An FT8 line split into its signal report and up to four words."""

    signal_info: str
    m1: str
    m2: str
    m3: str
    m4: str = ""


def _is_letter(char: str) -> bool:
    return "A" <= char <= "Z"


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def is_valid_grid(grid: str) -> bool:
    """True for a four-character Maidenhead square such as ``AB12``."""
    return (
        len(grid) == 4
        and _is_letter(grid[0])
        and _is_letter(grid[1])
        and _is_digit(grid[2])
        and _is_digit(grid[3])
    )


def next_token(
    src: Optional[str], start: int, sep: str, tok_max: int = TOKEN_MAX
) -> Optional[tuple[str, int]]:
    """Return the next non-empty token at or after ``start`` and where to continue.

    Returns None at the end of ``src``; raises ValueError if the token is
    longer than ``tok_max``. A trailing newline is not part of any token.
    """
    if src is None or start >= len(src):
        return None
    length = len(src)
    if length > 0 and src.endswith("\n"):
        length -= 1
    while True:
        found = src.find(sep, start)
        p_sep = length if found < 0 else found
        n = p_sep - start
        p = start
        start = start + n + len(sep)
        if not (n == 0 and start < length):
            break
    if n > tok_max:
        raise ValueError(f"token longer than {tok_max} characters")
    return src[p : p + n], p + n + len(sep)


def parse_message(raw: str) -> HdMessage:
    """Split ``signal~ word word word [word]``; ValueError if it does not fit."""
    parts = []
    position = 0
    for sep in ("~ ", " ", " ", " "):
        found = next_token(raw, position, sep)
        if found is None:
            raise ValueError(f"incomplete message: {raw!r}")
        token, position = found
        parts.append(token)
    last = next_token(raw, position, " ")
    m4 = "" if last is None else last[0]
    return HdMessage(parts[0], parts[1], parts[2], parts[3], m4)


def markup(style: Style) -> str:
    """The two-character markup that switches to ``style``."""
    return HD_MARKUP_CHAR + chr(ord("A") + _FONTS[style])


def lookup_style(
    token: str, style: Style, style_default: Style, logbook: Optional[_Lookup]
) -> Style:
    """Style for a word: callers and grids already worked fall back to the default."""
    if style is Style.CALLER:
        worked = logbook is not None and logbook.caller_exists(token)
        return style_default if worked else style
    if style is Style.GRID:
        grid_ok = token != "RR73" and is_valid_grid(token)
        if not grid_ok:
            return style_default
        worked = logbook is not None and logbook.grid_exists(token)
        return style_default if worked else style
    return style


def _styled(
    message: HdMessage,
    style_default: Style,
    styles: tuple[Style, Style, Style, Optional[Style]],
    logbook: Optional[_Lookup],
) -> str:
    s1, s2, s3, s4 = styles

    def word(token: str, style: Style) -> str:
        return markup(lookup_style(token, style, style_default, logbook)) + token

    parts = [
        markup(style_default),
        message.signal_info,
        "~ ",
        word(message.m1, s1),
        " ",
        word(message.m2, s2),
        " ",
        word(message.m3, s3),
    ]
    if s4 is not None:
        parts.append(" ")
        parts.append(word(message.m4, s4))
    parts.append("\n")
    return "".join(parts)


def decorate(
    style: Style, message: str, my_callsign: str, logbook: Optional[_Lookup] = None
) -> str:
    """Add style markup to an FT8 line; other styles pass the text unchanged.

    Raises ValueError when an FT8 line cannot be parsed.
    """
    if style not in _FT8_STYLES:
        return message
    fms = parse_message(message)
    if fms.m1 == "CQ":
        if not fms.m4:
            styles = (Style.LOG, Style.CALLER, Style.GRID, None)
        else:
            styles = (Style.LOG, Style.LOG, Style.CALLER, Style.GRID)
    elif fms.m1 == my_callsign:
        styles = (Style.MYCALL, Style.CALLER, Style.GRID, None)
    elif fms.m2 == my_callsign:
        styles = (Style.CALLER, Style.MYCALL, Style.GRID, None)
    else:
        styles = (style, Style.CALLER, Style.GRID, None)
    return _styled(fms, style, styles, logbook)


def strip_decoration(decorated: str) -> str:
    """Remove style markup and angle brackets."""
    out = []
    index = 0
    while index < len(decorated):
        char = decorated[index]
        if char == HD_MARKUP_CHAR and index + 1 < len(decorated):
            index += 2
        elif char in "<>":
            index += 1
        else:
            out.append(char)
            index += 1
    return "".join(out)


def length_no_decoration(decorated: str) -> int:
    """Visible length of a decorated line, never below zero."""
    length = sum(-1 if char == HD_MARKUP_CHAR else 1 for char in decorated)
    return max(length, 0)


def create_grid_list(logbook, path: PathType = DEFAULT_GRID_LIST) -> int:
    """Write every valid grid in the logbook as packed 4-byte entries ending in two NULs.

    Returns the number of grids written.
    """
    written = 0
    with open(path, "wb") as file:
        for grid, _count in logbook.get_grids():
            if is_valid_grid(grid):
                file.write(grid.encode("ascii"))
                written += 1
        file.write(b"\0\0")
    return written