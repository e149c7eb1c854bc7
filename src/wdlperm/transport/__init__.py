"""Transport layer implementations."""

from .base import (
    ChannelTransport,
    TransportError,
    TransportConnectionError,
    TransportPortError,
)
