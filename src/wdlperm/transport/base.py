"""Transport interface.

This is the (small) contract a channel transport should follow. The game
connection that carries plugin channels in production implements it outside
this package; :mod:`wdlperm.transport.zmq` implements it for tooling and
tests. It lives outside :mod:`wdlperm.protocol` so the protocol remains
transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional


Receiver = Callable[[str, bytes], None]


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class TransportPortError(TransportError):
    """No suitable endpoint could be bound or connected."""


class ChannelTransport(ABC):
    """Minimal contract for a plugin channel transport.

    Outbound sends are fire-and-forget: no acknowledgement is awaited and
    nothing is retried. Inbound payloads are handed to :attr:`receiver`
    one at a time, in arrival order.
    """

    receiver: Optional[Receiver] = None

    @abstractmethod
    def send(self, channel: str, payload: bytes) -> None:
        """Send one payload on the named channel."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection/socket."""

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False

    def deliver(self, channel: str, payload: bytes) -> None:
        """Hand an inbound payload to the receiver, if one is set."""
        receiver = self.receiver
        if receiver is not None:
            receiver(channel, payload)
