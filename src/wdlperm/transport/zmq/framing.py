"""ZMQ multipart framing for channel payloads.

    channel name (UTF-8), payload
"""

from __future__ import annotations

from typing import Sequence, Tuple


def to_frames(channel: str, payload: bytes) -> Tuple[bytes, bytes]:
    """Encode one channel payload as multipart frames."""

    return (channel.encode("utf-8"), bytes(payload))


def from_frames(parts: Sequence[bytes]) -> Tuple[str, bytes]:
    """Decode multipart frames into (channel, payload)."""

    if len(parts) != 2:
        raise ValueError(f"expected 2 frames, received {len(parts)}")

    channel = parts[0].decode("utf-8")
    if not channel:
        raise ValueError("empty channel name")

    return channel, bytes(parts[1])
