"""Positional binary primitives.

Layout conventions, matching java.io.DataInput/DataOutput:

    int32   signed, 4 bytes, big-endian
    bool    1 byte, non-zero reads as True
    utf     unsigned 2-byte length, then modified UTF-8
"""

from __future__ import annotations

import struct
from typing import Optional


_INT = struct.Struct(">i")
_SHORT = struct.Struct(">H")

MAX_UTF_LENGTH = 0xFFFF


class ProtocolError(ValueError):
    """Base class for all protocol-layer errors."""


class MalformedPayload(ProtocolError):
    """A payload was truncated, misaligned, or carried undecodable text."""


class EncodingError(ProtocolError):
    """A value could not be represented in the wire format."""


def encode_utf(text: str) -> bytes:
    """Return the modified UTF-8 form of *text*, without a length prefix.

    Supplementary characters become two 3-byte surrogate sequences and NUL
    becomes the two bytes C0 80.
    """

    if any(ord(char) > 0xFFFF for char in text):
        text = "".join(_split_supplementary(char) for char in text)

    encoded = text.encode("utf-8", "surrogatepass")
    return encoded.replace(b"\x00", b"\xc0\x80")


def decode_utf(raw: bytes) -> str:
    """Inverse of :func:`encode_utf`. Standard UTF-8 is accepted as well."""

    raw = raw.replace(b"\xc0\x80", b"\x00")

    try:
        text = raw.decode("utf-8", "surrogatepass")
    except UnicodeDecodeError as exc:
        raise MalformedPayload(f"undecodable string: {exc}") from exc

    # Rejoin surrogate pairs; unpaired surrogates are kept as-is.
    return text.encode("utf-16-be", "surrogatepass").decode(
        "utf-16-be", "surrogatepass"
    )


def _split_supplementary(char: str) -> str:
    code = ord(char)
    if code <= 0xFFFF:
        return char
    code -= 0x10000
    return chr(0xD800 + (code >> 10)) + chr(0xDC00 + (code & 0x3FF))


class DataInput:
    """Sequential reader over an immutable payload."""

    def __init__(self, payload: bytes, offset: int = 0):
        self.payload = bytes(payload)
        self.offset = offset

    def __len__(self) -> int:
        return len(self.payload)

    @property
    def remaining(self) -> int:
        return len(self.payload) - self.offset

    def _take(self, count: int) -> bytes:
        if count > self.remaining:
            raise MalformedPayload(
                f"needed {count} bytes at offset {self.offset}, "
                f"only {self.remaining} remain"
            )
        start = self.offset
        self.offset += count
        return self.payload[start:self.offset]

    def read_int(self) -> int:
        return _INT.unpack(self._take(_INT.size))[0]

    def read_bool(self) -> bool:
        return self._take(1) != b"\x00"

    def read_utf(self) -> str:
        length = _SHORT.unpack(self._take(_SHORT.size))[0]
        return decode_utf(self._take(length))

    def read_count(self) -> int:
        """Read an int32 element count; negative counts are malformed."""

        count = self.read_int()
        if count < 0:
            raise MalformedPayload(f"negative element count: {count}")
        return count


class DataOutput:
    """Sequential writer producing a bytes payload."""

    def __init__(self, initial: Optional[bytes] = None):
        self.buffer = bytearray(initial or b"")

    def __bytes__(self) -> bytes:
        return bytes(self.buffer)

    def to_bytes(self) -> bytes:
        return bytes(self.buffer)

    def write_int(self, value: int) -> "DataOutput":
        try:
            self.buffer += _INT.pack(value)
        except struct.error as exc:
            raise EncodingError(f"not a 32-bit integer: {value!r}") from exc
        return self

    def write_bool(self, value: bool) -> "DataOutput":
        self.buffer.append(1 if value else 0)
        return self

    def write_utf(self, text: str) -> "DataOutput":
        encoded = encode_utf(text)
        if len(encoded) > MAX_UTF_LENGTH:
            raise EncodingError(
                f"encoded string too long: {len(encoded)} bytes"
            )
        self.buffer += _SHORT.pack(len(encoded))
        self.buffer += encoded
        return self


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
