"""Map protocol messages to and from channel payload bytes.

WDL|CONTROL
    int32 kind, then the kind-specific body (see :mod:`.message`)

WDL|REQUEST
    utf reason, int32 n, n x (utf key, utf value), int32 m, m x rectangle

WDL|INIT
    raw UTF-8 client version, no length prefix

REGISTER / UNREGISTER
    channel names, each terminated by a NUL byte
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from .message import (
    CONTROL_TYPES,
    ControlMessage,
    PermissionRequest,
    Rectangle,
    UnknownControl,
)
from .wire import DataInput, DataOutput, EncodingError


_SEP = "\0"


def open_control(payload: bytes) -> Tuple[int, DataInput]:
    """ Read only the leading kind of a control payload. The returned reader
        is positioned at the start of the body, ready for
        :func:`decode_control_body`. Splitting the two steps lets the caller
        act on the kind even when the body turns out to be malformed.
    """

    data = DataInput(payload)
    kind = data.read_int()
    return kind, data


def decode_control_body(kind: int, data: DataInput) -> ControlMessage:
    try:
        message_type = CONTROL_TYPES[kind]
    except KeyError:
        return UnknownControl(kind, data.payload)

    return message_type.read(data)


def decode_control(payload: bytes) -> ControlMessage:
    kind, data = open_control(payload)
    return decode_control_body(kind, data)


def encode_control(message: ControlMessage) -> bytes:
    out = DataOutput()
    out.write_int(message.kind)
    message.write(out)
    return out.to_bytes()


def decode_rectangle(payload: bytes) -> Rectangle:
    return Rectangle.read(DataInput(payload))


def encode_rectangle(rectangle: Rectangle) -> bytes:
    out = DataOutput()
    rectangle.write(out)
    return out.to_bytes()


def decode_request(payload: bytes) -> PermissionRequest:
    return PermissionRequest.read(DataInput(payload))


def encode_request(request: PermissionRequest) -> bytes:
    out = DataOutput()
    request.write(out)
    return out.to_bytes()


def encode_init(version: str) -> bytes:
    """ The init handshake is the bare client version text.
    """

    try:
        return version.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise EncodingError(f"client version is not encodable: {exc}") from exc


def decode_channels(payload: bytes) -> List[str]:
    """ Return the channel names from a REGISTER or UNREGISTER payload. Empty
        names, including the one implied by a trailing NUL, are dropped.
    """

    try:
        text = bytes(payload).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise EncodingError(f"channel list is not UTF-8: {exc}") from exc

    return [name for name in text.split(_SEP) if name]


def encode_channels(names: Iterable[str]) -> bytes:
    encoded = bytearray()

    for name in names:
        if _SEP in name:
            raise EncodingError(f"channel name contains NUL: {name!r}")
        try:
            encoded += name.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise EncodingError(f"channel name is not encodable: {exc}") from exc
        encoded += b"\0"

    return bytes(encoded)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
