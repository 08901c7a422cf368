"""Exporting the logbook: plain query dumps and ADIF files."""

from __future__ import annotations

import os
import re
import struct
from typing import Union

from sbitxkit.logbook import Logbook, _format_value

PathType = Union[str, "os.PathLike[str]"]

QUERY_LIMIT = 50

ADIF_NAMES = (
    "ID",
    "MODE",
    "FREQ",
    "QSO_DATE",
    "TIME_ON",
    "OPERATOR",
    "RST_SENT",
    "STX_String",
    "CALL",
    "RST_RCVD",
    "SRX_String",
    "STX",
    "TX_PWR",
    "COMMENTS",
)

BANDS = (
    ("160M", 1800, 2000),
    ("80M", 3500, 4000),
    ("60M", 5000, 5500),
    ("40M", 7000, 7300),
    ("30M", 10000, 10150),
    ("20M", 14000, 14350),
    ("17M", 18000, 18200),
    ("15M", 21000, 21450),
    ("12M", 24800, 25000),
    ("10M", 28000, 29700),
)

ADIF_HEADER = (
    "/ADIF file\n"
    "generated from sBITX log db by Log2ADIF program\n"
    "<adif version:5>3.1.4\n"
    "<EOH>\n"
)

_EXPORT_QUERY = (
    "SELECT id, mode, freq, qso_date, qso_time, callsign_sent, rst_sent, exch_sent, "
    "callsign_recv, rst_recv, exch_recv, tx_id, tx_power, comments "
    "FROM logbook WHERE (qso_date >= ? AND qso_date <= ?) ORDER BY id DESC"
)

_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _atof(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


def _single(value: float) -> float:
    """Round a value to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


def _default_result_file() -> str:
    return os.path.join(os.path.expanduser("~"), "sbitx", "data", "result_rows.txt")


def band_for(freq_khz: int) -> str | None:
    """Name of the amateur band holding ``freq_khz``, or None."""
    for name, low, high in BANDS:
        if low <= freq_khz <= high:
            return name
    return None


def strip_chr(text: str, char: str) -> str:
    """Remove every occurrence of ``char`` from ``text``."""
    return text.replace(char, "")


def _tag(name: str, value: str) -> str:
    return f"<{name}:{len(value.encode('utf-8'))}>{value} "


def write_query_results(
    logbook: Logbook,
    query: str | None = None,
    from_id: int = 0,
    result_file: PathType | None = None,
) -> int:
    """Write up to 50 matching QSOs as ``value|value|...`` lines; return the row count.

    ``from_id`` and ``query`` select rows as in :meth:`Logbook.fetch`.
    """
    path = _default_result_file() if result_file is None else result_file
    rows = logbook.fetch(from_id, QUERY_LIMIT, query)
    param = ""
    with open(path, "w", encoding="utf-8") as file:
        for row in rows:
            parts = []
            for value in row.values():
                param = _format_value(value, param)
                parts.append(param + "|")
            file.write("".join(parts) + "\n")
    return len(rows)


def export_adif(logbook: Logbook, path: PathType, start_date: str, end_date: str) -> int:
    """Write QSOs dated ``start_date``..``end_date`` (YYYY-MM-DD) as ADIF.

    FT8 contacts carry their exchanges as grid squares. Returns the number
    of records written.
    """
    cursor = logbook.connection.execute(_EXPORT_QUERY, (start_date, end_date))
    rows = cursor.fetchall()
    count = 0
    param = ""
    with open(path, "w", encoding="utf-8") as file:
        file.write(ADIF_HEADER)
        for row in rows:
            is_ft8 = False
            parts = []
            for index, value in enumerate(row):
                param = _format_value(value, param)
                if index == 1:
                    is_ft8 = param == "FT8"
                if index == 2:
                    khz = _atoi(param)
                    param = "%.3f" % _single(_atof(param) / 1000.0)
                    band = band_for(khz)
                    if band is not None:
                        parts.append(_tag("BAND", band))
                elif index == 3:
                    param = strip_chr(param, "-")

                if index == 7 and is_ft8:
                    parts.append(_tag("MY_GRIDSQUARE", param))
                elif index == 10 and is_ft8:
                    parts.append(_tag("GRIDSQUARE", param))
                else:
                    parts.append(_tag(ADIF_NAMES[index], param))
            file.write("".join(parts) + "<EOR>\n")
            count += 1
    return count