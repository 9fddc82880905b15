"""
Binary primitives for tagfreq model files.

Values are stored the way Java's ``DataOutputStream`` stores them so that
models written by older tooling stay readable:

- ``int``: signed 32-bit big-endian
- ``utf``: unsigned 16-bit big-endian byte length followed by "modified UTF-8"
  (NUL as ``C0 80``, characters outside the BMP as two 3-byte surrogates)

Streams are any binary file-like objects; they are never closed here.
"""

from __future__ import annotations

import logging
import struct
from typing import BinaryIO, List

logger = logging.getLogger(__name__)

_INT = struct.Struct(">i")
_USHORT = struct.Struct(">H")

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1
MAX_UTF_LENGTH = 0xFFFF


class TagCountIOError(Exception):
    """Base class for errors while reading or writing tag statistics."""


class DeserializationError(TagCountIOError):
    """The stream is truncated, malformed, or could not be read."""


class SerializationError(TagCountIOError):
    """A value cannot be encoded, or the stream could not be written."""


def write_bytes(stream: BinaryIO, data: bytes) -> None:
    try:
        stream.write(data)
    except OSError as exc:
        logger.debug("write of %d bytes failed: %s", len(data), exc)
        raise SerializationError(f"Failed to write to stream: {exc}") from exc


def read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes or raise DeserializationError."""
    try:
        data = stream.read(size)
    except OSError as exc:
        logger.debug("read of %d bytes failed: %s", size, exc)
        raise DeserializationError(f"Failed to read from stream: {exc}") from exc
    if data is None or len(data) != size:
        got = 0 if data is None else len(data)
        raise DeserializationError(f"Unexpected end of stream: wanted {size} bytes, got {got}")
    return data


def write_int(stream: BinaryIO, value: int) -> None:
    if not INT32_MIN <= value <= INT32_MAX:
        raise SerializationError(f"Value {value} does not fit in a 32-bit signed integer")
    write_bytes(stream, _INT.pack(value))


def read_int(stream: BinaryIO) -> int:
    return _INT.unpack(read_exact(stream, _INT.size))[0]


def encode_modified_utf8(text: str) -> bytes:
    """Encode ``text`` the way ``DataOutput.writeUTF`` does (without the length prefix)."""
    raw = text.encode("utf-16-be", "surrogatepass")
    units = struct.unpack(f">{len(raw) // 2}H", raw)
    out = bytearray()
    for unit in units:
        if 0x0001 <= unit <= 0x007F:
            out.append(unit)
        elif unit <= 0x07FF:
            # NUL falls here and becomes C0 80
            out.append(0xC0 | (unit >> 6))
            out.append(0x80 | (unit & 0x3F))
        else:
            out.append(0xE0 | (unit >> 12))
            out.append(0x80 | ((unit >> 6) & 0x3F))
            out.append(0x80 | (unit & 0x3F))
    return bytes(out)


def decode_modified_utf8(data: bytes) -> str:
    """Inverse of :func:`encode_modified_utf8`."""
    units: List[int] = []
    i = 0
    size = len(data)
    while i < size:
        byte = data[i]
        if byte < 0x80:
            units.append(byte)
            i += 1
        elif byte & 0xE0 == 0xC0:
            if i + 1 >= size or data[i + 1] & 0xC0 != 0x80:
                raise DeserializationError(f"Malformed 2-byte sequence at offset {i}")
            units.append(((byte & 0x1F) << 6) | (data[i + 1] & 0x3F))
            i += 2
        elif byte & 0xF0 == 0xE0:
            if i + 2 >= size or data[i + 1] & 0xC0 != 0x80 or data[i + 2] & 0xC0 != 0x80:
                raise DeserializationError(f"Malformed 3-byte sequence at offset {i}")
            units.append(((byte & 0x0F) << 12) | ((data[i + 1] & 0x3F) << 6) | (data[i + 2] & 0x3F))
            i += 3
        else:
            raise DeserializationError(f"Invalid byte 0x{byte:02X} at offset {i}")
    packed = struct.pack(f">{len(units)}H", *units)
    return packed.decode("utf-16-be", "surrogatepass")


def write_utf(stream: BinaryIO, text: str) -> None:
    encoded = encode_modified_utf8(text)
    if len(encoded) > MAX_UTF_LENGTH:
        raise SerializationError(
            f"Encoded string too long: {len(encoded)} bytes (limit {MAX_UTF_LENGTH})"
        )
    write_bytes(stream, _USHORT.pack(len(encoded)) + encoded)


def read_utf(stream: BinaryIO) -> str:
    length = _USHORT.unpack(read_exact(stream, _USHORT.size))[0]
    return decode_modified_utf8(read_exact(stream, length))
