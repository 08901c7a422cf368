"""Receiving decoded messages from WSJT-X over its UDP protocol."""

from __future__ import annotations

import socket
import struct
from collections.abc import Callable
from dataclasses import dataclass

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 2237
MAX_DATAGRAM = 1024

MSG_HEARTBEAT = 0
MSG_STATUS = 1
MSG_DECODE = 2

_INT32 = struct.Struct(">i")
_DOUBLE = struct.Struct(">d")
_HEADER = struct.Struct(">iii")


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _cmod(a: int, b: int) -> int:
    return a - b * _cdiv(a, b)


class _Reader:
    def __init__(self, data: bytes, offset: int = 0) -> None:
        self.data = data
        self.offset = offset

    def take(self, count: int) -> bytes:
        end = self.offset + count
        if end > len(self.data):
            raise ValueError("datagram is truncated")
        chunk = self.data[self.offset : end]
        self.offset = end
        return chunk

    def int32(self) -> int:
        return _INT32.unpack(self.take(4))[0]

    def double(self) -> float:
        return _DOUBLE.unpack(self.take(8))[0]

    def string(self) -> str:
        length = self.int32()
        if length <= 0:
            return ""
        return self.take(length).decode("utf-8", errors="replace")


@dataclass
class Decode:
    """One decoded message reported by WSJT-X."""

    unique_id: str
    new: bool
    time_ms: int
    snr: int
    delta_time: float
    delta_freq: int
    mode: str
    message: str

    @property
    def _seconds_of_day(self) -> int:
        return _cdiv(self.time_ms, 1000)

    @property
    def hours(self) -> int:
        return _cdiv(self._seconds_of_day, 3600)

    @property
    def minutes(self) -> int:
        return _cmod(_cdiv(self._seconds_of_day, 60), 60)

    @property
    def seconds(self) -> int:
        return _cmod(self._seconds_of_day, 60)

    def format_line(self) -> str:
        """Return the ``HH:MM:SS snr freq mode message`` log line."""
        return "%02d:%02d:%02d %03d %4d %s %s" % (
            self.hours,
            self.minutes,
            self.seconds,
            self.snr,
            self.delta_freq,
            self.mode,
            self.message,
        )


def parse_datagram(data: bytes) -> Decode | None:
    """Parse a WSJT-X datagram; None for anything but a decode message.

    Raises ValueError if the datagram ends early.
    """
    reader = _Reader(data)
    _magic, _schema, message_id = _HEADER.unpack(reader.take(_HEADER.size))
    if message_id != MSG_DECODE:
        return None
    unique_id = reader.string()
    new = reader.take(1) != b"\0"
    time_ms = reader.int32()
    snr = reader.int32()
    delta_time = reader.double()
    delta_freq = reader.int32()
    mode = reader.string()
    message = reader.string()
    return Decode(unique_id, new, time_ms, snr, delta_time, delta_freq, mode, message)


class WsjtxListener:
    """A non-blocking UDP listener that turns decodes into log lines."""

    def __init__(
        self,
        on_line: Callable[[str], object] | None = None,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
    ) -> None:
        self.on_line = on_line
        self.host = host
        self.port = port
        self._sock: socket.socket | None = None

    def start(self) -> None:
        """Open and bind the socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            sock.setblocking(False)
            sock.bind((self.host, self.port))
        except OSError:
            sock.close()
            raise
        self._sock = sock

    @property
    def address(self) -> tuple[str, int]:
        if self._sock is None:
            raise RuntimeError("listener is not started")
        return self._sock.getsockname()

    def poll(self) -> Decode | None:
        """Handle at most one waiting datagram; return the decode, if any."""
        if self._sock is None:
            raise RuntimeError("listener is not started")
        try:
            data, _ = self._sock.recvfrom(MAX_DATAGRAM)
        except BlockingIOError:
            return None
        try:
            decode = parse_datagram(data)
        except ValueError:
            return None
        if decode is None:
            return None
        line = decode.format_line()
        (self.on_line or print)(line)
        return decode

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self) -> WsjtxListener:
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()