"""Function-key macros: loading ``.mc`` files and expanding their text."""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TextIO, Union

MACRO_MAX_LABEL = 30
MACRO_MAX_TEXT = 200
MACRO_MAX = 25
_LINE_LIMIT = 253
_FN_FIELDS = 12

_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")

PathType = Union[str, "os.PathLike[str]"]


def _default_directory() -> str:
    return os.path.join(os.path.expanduser("~"), "sbitx", "web")


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _chunks(file: TextIO) -> Iterator[str]:
    for line in file:
        while len(line) > _LINE_LIMIT:
            yield line[:_LINE_LIMIT]
            line = line[_LINE_LIMIT:]
        if line:
            yield line


@dataclass
class Macro:
    """One function-key definition."""

    fn_key: int
    label: str
    text: str


def _parse_line(line: str) -> Macro | None:
    if not line.startswith("F"):
        return None
    rest = line[1:]
    fn_key = _atoi(rest)
    space = rest.find(" ")
    rest = "" if space < 0 else rest[space:].lstrip(" ")
    label = ""
    for char in rest[:MACRO_MAX_LABEL]:
        if char == ",":
            break
        label += char
    rest = rest[len(label) :]
    if not rest.startswith(","):
        return None
    return Macro(fn_key, label, rest[1:].rstrip("\r\n"))


def list_macros(directory: PathType | None = None) -> list[str]:
    """Names of the ``.mc`` macro files in ``directory``, without extension."""
    path = _default_directory() if directory is None else directory
    return sorted(name[:-3] for name in os.listdir(path) if name.endswith(".mc"))


class MacroSet:
    """The macros loaded from one file, expanded against the radio's fields."""

    def __init__(
        self,
        field_str: Callable[[str], str],
        directory: PathType | None = None,
        set_field: Callable[[str, str], object] | None = None,
        on_wipe: Callable[[], object] | None = None,
        on_save: Callable[[], object] | None = None,
    ) -> None:
        self.field_str = field_str
        self.directory = _default_directory() if directory is None else directory
        self.set_field = set_field
        self.on_wipe = on_wipe
        self.on_save = on_save
        self.is_running = False
        self.macros: list[Macro] = []

    def _slots(self) -> list[Macro]:
        """The table with its unused slots, which read as key 0 with no text."""
        spare = MACRO_MAX - len(self.macros)
        return self.macros + [Macro(0, "", "") for _ in range(spare)]

    def load(self, filename: str) -> None:
        """Load ``<directory>/<filename>.mc`` and relabel the F1..F12 fields."""
        path = os.path.join(self.directory, filename + ".mc")
        with open(path, encoding="utf-8") as file:
            table: list[Macro] = []
            for line in _chunks(file):
                if len(table) >= MACRO_MAX:
                    break
                macro = _parse_line(line)
                if macro is not None:
                    table.append(macro)
        self.macros = table
        if self.set_field is not None:
            for key in range(1, _FN_FIELDS + 1):
                self.set_field(f"F{key}", self.label(key))

    def keys(self) -> str:
        """Return ``|<key> <label>`` for each macro up to the first unlabelled one."""
        parts = []
        for macro in self.macros:
            if not macro.label:
                break
            parts.append(f"|{macro.fn_key} {macro.label}")
        return "".join(parts)

    def label(self, fn_key: int) -> str:
        """The label for a key: first definition when running, else the last."""
        result = ""
        for macro in self._slots():
            if macro.fn_key == fn_key:
                result = macro.label
                if self.is_running:
                    break
        return result

    def get_var(self, var: str) -> str:
        """Value of a named variable; WIPE and SAVE trigger their actions."""
        if var == "MYCALL":
            return self.field_str("MYCALLSIGN")
        if var == "CALL":
            return self.field_str("CALL")
        if var == "SENTRST":
            return self.field_str("SENT")
        if var == "SENTRSTCUT":
            chars = list(self.field_str("SENT"))
            for index in (1, 2):
                if index < len(chars) and chars[index] == "9":
                    chars[index] = "N"
            return "".join(chars)
        if var == "GRID":
            return self.field_str("MYGRID")
        if var == "GRIDSQUARE":
            return self.field_str("MYGRID")[:4]
        if var == "EXCH":
            return self.field_str("NR")
        if var == "WIPE":
            if self.on_wipe is not None:
                self.on_wipe()
            return ""
        if var == "SAVE":
            if self.on_save is not None:
                self.on_save()
            return ""
        return ""

    def _expand_var(self, var: str) -> str:
        if var == "RUN":
            self.is_running = True
        elif var == "S&P":
            self.is_running = False
        elif var in ("MYCALL", "CALL", "SENTRST", "GRID", "GRIDSQUARE"):
            return self.get_var(var)
        elif var == "SENTRSTCUT":
            return "5NN"
        elif var in ("EXCH", "EXCHANGE"):
            return self.get_var("EXCH")
        return ""

    def _expand_short_var(self, char: str) -> str:
        names = {"*": "MYCALL", "!": "CALL", "#": "EXCH", "@": "FREQ"}
        return self._expand_var(names[char])

    def exec(self, key: int) -> str:
        """Expand the first macro defined for ``key``; KeyError if there is none."""
        macro = next((m for m in self._slots() if m.fn_key == key), None)
        if macro is None:
            raise KeyError(key)
        out: list[str] = []
        var = ""
        in_var = False
        for char in macro.text:
            if ord(char) < 32:
                break
            if char in "!*@#":
                out.append(self._expand_short_var(char))
            elif char == "}":
                out.append(self._expand_var(var))
                var = ""
                in_var = False
            elif in_var:
                var += char
            elif char == "{":
                in_var = True
            else:
                out.append(char)
        return "".join(out)