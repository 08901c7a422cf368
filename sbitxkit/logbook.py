"""The QSO logbook kept in an SQLite database."""

from __future__ import annotations

import os
import re
import sqlite3
import time
from collections.abc import Mapping
from typing import Any, Union

PathType = Union[str, "os.PathLike[str]"]

DEFAULT_FETCH_COUNT = 50

_COLUMNS = (
    "id",
    "freq",
    "mode",
    "qso_date",
    "qso_time",
    "callsign_sent",
    "rst_sent",
    "exch_sent",
    "callsign_recv",
    "rst_recv",
    "exch_recv",
    "tx_id",
    "tx_power",
    "vswr",
    "comments",
)

EDITABLE_FIELDS = frozenset(
    {
        "mode",
        "freq",
        "callsign_recv",
        "rst_sent",
        "exch_sent",
        "rst_recv",
        "exch_recv",
        "comments",
    }
)

_CREATE_TABLE = (
    "CREATE TABLE IF NOT EXISTS logbook ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT, "
    "freq TEXT, mode TEXT, qso_date TEXT, qso_time TEXT, "
    "callsign_sent TEXT, rst_sent TEXT, exch_sent TEXT, "
    "callsign_recv TEXT, rst_recv TEXT, exch_recv TEXT, "
    "tx_id TEXT, tx_power TEXT, vswr TEXT, comments TEXT)"
)

_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")


def default_path() -> str:
    """The logbook database in the user's sbitx data directory."""
    return os.path.join(os.path.expanduser("~"), "sbitx", "data", "sbitx.db")


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text or "")
    return int(match.group(1)) if match else 0


def _cdiv(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _tenths(value: int) -> str:
    """Format an integer in tenths as ``whole.tenth``."""
    whole = _cdiv(value, 10)
    return f"{whole}.{value - 10 * whole}"


def _utc_date_time(timestamp: float) -> tuple[str, str]:
    tm = time.gmtime(timestamp)
    return (
        f"{tm.tm_year:04d}-{tm.tm_mon:02d}-{tm.tm_mday:02d}",
        f"{tm.tm_hour:02d}{tm.tm_min:02d}",
    )


def _format_value(value: Any, previous: str) -> str:
    """Render a column value; NULL keeps whatever was rendered before."""
    if value is None:
        return previous
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return "%g" % value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class Logbook:
    """A connection to the logbook table, opened on first use."""

    def __init__(self, path: PathType | None = None) -> None:
        self.path = default_path() if path is None else path
        self._conn: sqlite3.Connection | None = None

    def open(self) -> None:
        """Open the database, creating the table and its indexes if missing."""
        if self._conn is not None:
            return
        conn = sqlite3.connect(os.fspath(self.path))
        try:
            conn.execute(_CREATE_TABLE)
            found = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='index' "
                "AND tbl_name='logbook' AND name IN ('gridIx', 'callIx')"
            ).fetchall()
            if len(found) != 2:
                conn.execute("CREATE INDEX IF NOT EXISTS gridIx ON logbook (exch_recv)")
                conn.execute("CREATE INDEX IF NOT EXISTS callIx ON logbook (callsign_recv)")
            conn.commit()
        except sqlite3.Error:
            conn.close()
            raise
        self._conn = conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> Logbook:
        self.open()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @property
    def connection(self) -> sqlite3.Connection:
        """The open database connection, opening it if needed."""
        if self._conn is None:
            self.open()
        assert self._conn is not None
        return self._conn

    def fetch(
        self, from_id: int = 0, count: int = DEFAULT_FETCH_COUNT, query: str | None = None
    ) -> list[dict[str, Any]]:
        """Return up to ``count`` QSOs, newest first.

        A positive ``from_id`` gives records older than it, a negative one
        records newer than ``-from_id``, zero the latest. ``query`` limits
        the results to callsigns starting with it.
        """
        conditions: list[str] = []
        params: list[Any] = []
        if query:
            conditions.append("callsign_recv LIKE ?")
            params.append(query + "%")
        if from_id > 0:
            conditions.append("id < ?")
            params.append(from_id)
        elif from_id < 0:
            conditions.append("id > ?")
            params.append(-from_id)
        statement = "SELECT * FROM logbook"
        if conditions:
            statement += " WHERE " + " AND ".join(conditions)
        statement += " ORDER BY id DESC LIMIT ?"
        params.append(count)
        cursor = self.connection.execute(statement, params)
        names = [d[0] for d in cursor.description]
        return [dict(zip(names, row)) for row in cursor.fetchall()]

    def count_dup(self, callsign: str, last_seconds: int, now: float | None = None) -> int:
        """Count QSOs with ``callsign`` logged within the last ``last_seconds``."""
        current = time.time() if now is None else now
        date_str, time_str = _utc_date_time(current - last_seconds)
        row = self.connection.execute(
            "SELECT COUNT(*) FROM logbook WHERE callsign_recv = ? "
            "AND qso_date >= ? AND qso_time >= ?",
            (callsign, date_str, time_str),
        ).fetchone()
        return int(row[0])

    def get_grids(self) -> list[tuple[str, int]]:
        """Return ``(exchange received, QSO count)`` pairs in exchange order."""
        rows = self.connection.execute(
            "SELECT exch_recv, COUNT(*) AS n FROM logbook "
            "GROUP BY exch_recv ORDER BY exch_recv"
        ).fetchall()
        return [("" if grid is None else str(grid), int(n)) for grid, n in rows]

    def caller_exists(self, callsign: str) -> bool:
        row = self.connection.execute(
            "SELECT EXISTS(SELECT 1 FROM logbook WHERE callsign_recv=?)", (callsign,)
        ).fetchone()
        return bool(row and row[0])

    def grid_exists(self, grid: str) -> bool:
        row = self.connection.execute(
            "SELECT EXISTS(SELECT 1 FROM logbook WHERE exch_recv=?)", (grid,)
        ).fetchone()
        return bool(row and row[0])

    def prev_log(self, callsign: str) -> str:
        """Summarise earlier QSOs with ``callsign``: the latest one and a count."""
        cursor = self.connection.execute(
            "SELECT * FROM logbook WHERE callsign_recv = ? ORDER BY id DESC", (callsign,)
        )
        names = [d[0] for d in cursor.description]
        rows = cursor.fetchall()
        parts = [callsign, ": "]
        if rows:
            param = ""
            for name, value in zip(names, rows[0]):
                if name in ("id", "callsign_recv"):
                    continue
                param = _format_value(value, param)
                parts.append(param)
                parts.append("_" if name == "qso_date" else " ")
        parts.append(f": {len(rows)}")
        return "".join(parts)

    def add(
        self,
        contact_callsign: str,
        rst_sent: str,
        exchange_sent: str,
        rst_recv: str,
        exchange_recv: str,
        tx_power: int = 0,
        tx_vswr: int = 0,
        comments: str = "",
        freq: str = "0",
        mode: str = "",
        mycallsign: str = "",
        now: float | None = None,
    ) -> int:
        """Log a QSO and return its id.

        ``freq`` is in Hz and stored in kHz; ``tx_power`` and ``tx_vswr``
        are in tenths.
        """
        current = time.time() if now is None else now
        date_str, time_str = _utc_date_time(current)
        log_freq = str(_cdiv(_atoi(str(freq)), 1000))
        conn = self.connection
        cursor = conn.execute(
            "INSERT INTO logbook (freq, mode, qso_date, qso_time, callsign_sent, "
            "rst_sent, exch_sent, callsign_recv, rst_recv, exch_recv, tx_power, vswr, comments) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                log_freq,
                mode,
                date_str,
                time_str,
                mycallsign,
                rst_sent,
                exchange_sent,
                contact_callsign,
                rst_recv,
                exchange_recv,
                _tenths(int(tx_power)),
                _tenths(int(tx_vswr)),
                comments,
            ),
        )
        conn.commit()
        return int(cursor.lastrowid)

    def delete(self, qso_id: int | str) -> int:
        """Delete a QSO; return the number of records removed."""
        conn = self.connection
        cursor = conn.execute("DELETE FROM logbook WHERE id = ?", (qso_id,))
        conn.commit()
        return cursor.rowcount

    def update(self, qso_id: int | str, fields: Mapping[str, str]) -> int:
        """Change editable fields of a QSO; return the number of records changed."""
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise KeyError(f"not an editable field: {', '.join(sorted(unknown))}")
        if not fields:
            return 0
        names = sorted(fields)
        assignments = ", ".join(f"{name} = ?" for name in names)
        params = [fields[name] for name in names] + [qso_id]
        conn = self.connection
        cursor = conn.execute(f"UPDATE logbook SET {assignments} WHERE id = ?", params)
        conn.commit()
        return cursor.rowcount