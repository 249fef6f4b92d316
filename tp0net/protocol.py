"""Wire format shared by the client and the server.

Every frame is an operation code followed by a payload size and the
payload itself, both as 32-bit little-endian signed integers.  A packet
payload is a sequence of values, each preceded by its own length.
"""

from __future__ import annotations

import socket
import struct
from dataclasses import dataclass, field
from enum import IntEnum

_INT = struct.Struct("<i")
_HEADER = struct.Struct("<ii")


class OpCode(IntEnum):
    """Operation codes understood by the server."""

    MESSAGE = 0
    PACKET = 1


class ConnectionClosedError(ConnectionError):
    """The peer closed the connection before a full frame arrived."""


@dataclass
class Packet:
    """A frame under construction: an operation code and its payload."""

    opcode: OpCode = OpCode.PACKET
    payload: bytearray = field(default_factory=bytearray)

    def add(self, value: str | bytes) -> None:
        """Append a length-prefixed value; text is stored NUL-terminated."""
        data = value.encode("utf-8") + b"\0" if isinstance(value, str) else bytes(value)
        self.payload += _INT.pack(len(data))
        self.payload += data

    def serialize(self) -> bytes:
        """Return the frame ready to be sent."""
        return _HEADER.pack(int(self.opcode), len(self.payload)) + bytes(self.payload)


def encode_message(text: str) -> bytes:
    """Return a MESSAGE frame carrying ``text`` as a NUL-terminated string."""
    return Packet(OpCode.MESSAGE, bytearray(text.encode("utf-8") + b"\0")).serialize()


def _as_text(data: bytes) -> str:
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def decode_values(payload: bytes) -> list[str]:
    """Split a packet payload into its values, read as C strings."""
    values = []
    view = memoryview(payload)
    offset = 0
    while offset < len(view):
        if offset + _INT.size > len(view):
            raise ValueError("truncated length prefix in packet payload")
        (size,) = _INT.unpack_from(view, offset)
        offset += _INT.size
        if size < 0 or offset + size > len(view):
            raise ValueError("value length exceeds packet payload")
        values.append(_as_text(bytes(view[offset:offset + size])))
        offset += size
    return values


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    chunks = bytearray()
    while len(chunks) < size:
        chunk = sock.recv(size - len(chunks))
        if not chunk:
            raise ConnectionClosedError("connection closed by peer")
        chunks += chunk
    return bytes(chunks)


def read_operation(sock: socket.socket) -> int:
    """Read the next operation code; close the socket if the peer left."""
    try:
        data = _recv_exact(sock, _INT.size)
    except ConnectionClosedError:
        sock.close()
        raise
    return _INT.unpack(data)[0]


def read_buffer(sock: socket.socket) -> bytes:
    """Read a size-prefixed payload."""
    (size,) = _INT.unpack(_recv_exact(sock, _INT.size))
    if size < 0:
        raise ValueError(f"negative payload size {size}")
    return _recv_exact(sock, size)