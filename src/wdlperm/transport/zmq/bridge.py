"""ZeroMQ channel bridge.

A PAIR socket carrying (channel, payload) multipart messages. This is not
how a game client talks to a server; it lets a local helper process, a test
harness, or a reference server extension exchange plugin channel traffic
with a :class:`wdlperm.session.Session` without a game connection.
"""

from __future__ import annotations

import atexit
import logging
import queue
import threading
from typing import Optional

import zmq

from ..base import (
    ChannelTransport,
    Receiver,
    TransportConnectionError,
    TransportError,
    TransportPortError,
)
from .framing import from_frames, to_frames

logger = logging.getLogger(__name__)

zmq_context = zmq.Context()


class Bridge(ChannelTransport):
    """Send and receive channel payloads over a ZeroMQ PAIR socket.

    Only the background thread touches the PAIR socket. Sends are queued and
    the thread is woken through an inproc signal socket, the same arrangement
    used for thread-safe publishing elsewhere.
    """

    poll_interval = 1000    # milliseconds

    def __init__(self, url: str, *, bind: bool = False, receiver: Optional[Receiver] = None):
        self.url = url
        self.receiver = receiver

        self.socket = zmq_context.socket(zmq.PAIR)
        self.socket.setsockopt(zmq.LINGER, 0)

        try:
            if bind:
                self.socket.bind(url)
            else:
                self.socket.connect(url)
        except zmq.ZMQError as exc:
            self.socket.close()
            if bind:
                raise TransportPortError(f"cannot bind {url}: {exc}") from exc
            raise TransportConnectionError(f"cannot connect {url}: {exc}") from exc

        self._outbox: "queue.SimpleQueue[tuple]" = queue.SimpleQueue()

        internal = f"inproc://wdlperm.Bridge:signal:{id(self)}"
        self._signal_rx = zmq_context.socket(zmq.PAIR)
        self._signal_rx.bind(internal)
        self._signal_tx = zmq_context.socket(zmq.PAIR)
        self._signal_tx.connect(internal)
        self._signal_lock = threading.Lock()

        self.shutdown = False
        self.thread = threading.Thread(target=self.run, daemon=True)
        self.thread.start()

    @classmethod
    def connect(cls, url: str, receiver: Optional[Receiver] = None) -> "Bridge":
        return cls(url, bind=False, receiver=receiver)

    @classmethod
    def bind(cls, url: str, receiver: Optional[Receiver] = None) -> "Bridge":
        return cls(url, bind=True, receiver=receiver)

    @property
    def is_open(self) -> bool:
        return not self.shutdown

    def send(self, channel: str, payload: bytes) -> None:
        frames = to_frames(channel, payload)

        with self._signal_lock:
            if self.shutdown:
                raise TransportError(f"bridge to {self.url} is closed")

            self._outbox.put(frames)
            try:
                self._signal_tx.send(b"")
            except zmq.ZMQError as exc:
                raise TransportError(f"cannot queue send to {self.url}: {exc}") from exc

    def close(self) -> None:
        with self._signal_lock:
            if self.shutdown:
                return
            self.shutdown = True
            try:
                self._signal_tx.send(b"")
            except zmq.ZMQError as exc:
                logger.debug("no wakeup for %s poller: %s", self.url, exc)

        self.thread.join(timeout=self.poll_interval / 1000.0 * 2)

        with self._signal_lock:
            self._signal_tx.close()
        self._signal_rx.close()
        self.socket.close()

    def _send_pending(self) -> None:
        self._signal_rx.recv(flags=zmq.NOBLOCK)

        while True:
            try:
                frames = self._outbox.get(block=False)
            except queue.Empty:
                return
            try:
                self.socket.send_multipart(frames)
            except zmq.ZMQError as exc:
                logger.warning("could not send on %s: %s", self.url, exc)

    def _receive_one(self) -> None:
        parts = self.socket.recv_multipart()

        try:
            channel, payload = from_frames(parts)
        except (ValueError, UnicodeDecodeError) as exc:
            logger.warning("dropping malformed frames from %s: %s", self.url, exc)
            return

        logger.debug("received %d bytes on %s", len(payload), channel)

        try:
            self.deliver(channel, payload)
        except Exception:
            logger.exception("receiver failed handling %s", channel)

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)
        poller.register(self._signal_rx, zmq.POLLIN)

        while not self.shutdown:
            for active, _flag in poller.poll(self.poll_interval):
                if active == self._signal_rx:
                    self._send_pending()
                elif active == self.socket:
                    self._receive_one()


def _cleanup() -> None:
    # Bridges left open still hold sockets; term() alone would block on them.
    try:
        zmq_context.destroy(linger=0)
    except zmq.ZMQError:
        pass


atexit.register(_cleanup)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
