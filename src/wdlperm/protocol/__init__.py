"""
wdlperm Protocol Layer
======================

This package defines the permission protocol spoken over the WDL plugin
channels: the message records, their positional binary layout, and the
constants shared with server-side extensions.

The protocol layer MUST NOT depend on any transport implementation, nor on
the session state it feeds.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

Session (wdlperm.session)
    Routes channel payloads, applies decoded messages to permission
    state and the override index, emits notifications

    │
    ▼
Codec (codec.py)
    Channel payload <-> message records
    - control kind dispatch
    - channel name lists
    - init handshake and permission requests

    │
    ▼
Message Model (message.py)
    Immutable records, one per control kind, plus Rectangle and
    PermissionRequest; each knows its own field order

    │
    ▼
Wire Primitives (wire.py)
    Big-endian int32, bool, length-prefixed modified UTF-8

    │
    ▼
Field Vocabulary (fields.py)
    Channel names, kind numbers, request schema, localisation keys

---------------------------------------------------------------------

Below the Protocol Layer (for context)
--------------------------------------

Transport (wdlperm.transport)
    Moves (channel, payload) pairs; the game connection in production,
    a ZeroMQ bridge for tooling and tests.

---------------------------------------------------------------------
"""

from . import fields
from . import wire
from . import message
from . import codec

from .wire import ProtocolError, MalformedPayload, EncodingError
from .message import Rectangle


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
