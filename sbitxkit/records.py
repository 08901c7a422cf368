"""A small key=value settings store kept in a text file."""

from __future__ import annotations

import os
import re
from typing import Union

MAX_KEY = 64
MAX_VALUE = 256
DEFAULT_PATH = "sbitx.rc"

_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")

PathType = Union[str, "os.PathLike[str]"]


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _split_line(line: str) -> tuple[str, str] | None:
    """Split a ``key=value`` line; None when either part is missing."""
    text = line.lstrip("=")
    eq = text.find("=")
    if eq < 0:
        return None
    key = text[:eq].rstrip(" \t")
    value = text[eq + 1 :].lstrip("\n").split("\n", 1)[0]
    if not key or not value:
        return None
    return key, value


class RecordStore:
    """Named string values that can be loaded from and saved to a file."""

    def __init__(self, path: PathType = DEFAULT_PATH) -> None:
        self.path = path
        self._records: dict[str, str] = {}

    def get_string(self, key: str, default: str | None = None) -> str | None:
        return self._records.get(key, default)

    def get_integer(self, key: str, default: int = 0) -> int:
        value = self._records.get(key)
        return default if value is None else _atoi(value)

    def set_string(self, key: str, value: str) -> None:
        if len(key) >= MAX_KEY:
            raise ValueError(f"key longer than {MAX_KEY - 1} characters")
        if len(value) >= MAX_VALUE:
            raise ValueError(f"value longer than {MAX_VALUE - 1} characters")
        self._records[key] = value

    def set_integer(self, key: str, value: int) -> None:
        self.set_string(key, str(int(value)))

    def load(self) -> None:
        """Read records from the file; a missing file leaves the store as is.

        Lines starting with '#' are comments; a later line overrides an
        earlier one with the same key.
        """
        try:
            file = open(self.path, encoding="utf-8")
        except FileNotFoundError:
            return
        with file:
            for line in file:
                if line.startswith("#"):
                    continue
                pair = _split_line(line)
                if pair is not None:
                    key, value = pair
                    self._records[key] = value

    def save(self) -> None:
        """Write every record to the file as ``key =value`` lines."""
        with open(self.path, "w", encoding="utf-8") as file:
            for key, value in self._records.items():
                file.write(f"{key} ={value}\n")

    def dump(self) -> str:
        """Return the records as ``[key] = <value>`` lines."""
        return "".join(f"[{key}] = <{value}>\n" for key, value in self._records.items())