""" Class representations of the messages exchanged over the plugin channels.

    Every control message is a small immutable record whose fields are in the
    order they appear on the wire. The leading int32 kind is not part of the
    record body; :mod:`wdlperm.protocol.codec` reads and writes it, and uses
    the *kind* class attribute to pick the right class for a payload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Dict, Mapping, Tuple

from . import fields
from .wire import DataInput, DataOutput, EncodingError


@dataclass(frozen=True, init=False)
class Rectangle:
    """ An inclusive rectangle of chunk coordinates carrying a *tag*. The
        corners are normalised at construction so that x1 <= x2 and z1 <= z2;
        nothing downstream checks this again.

        Most server implementations ignore the tag on rectangles sent to them,
        but it is always written; an empty string is acceptable.
    """

    tag: str
    x1: int
    z1: int
    x2: int
    z2: int

    def __init__(self, tag: str, x1: int, z1: int, x2: int, z2: int):

        if x1 > x2:
            x1, x2 = x2, x1
        if z1 > z2:
            z1, z2 = z2, z1

        object.__setattr__(self, "tag", tag)
        object.__setattr__(self, "x1", int(x1))
        object.__setattr__(self, "z1", int(z1))
        object.__setattr__(self, "x2", int(x2))
        object.__setattr__(self, "z2", int(z2))

    def contains(self, x: int, z: int) -> bool:
        return self.x1 <= x <= self.x2 and self.z1 <= z <= self.z2

    @classmethod
    def read(cls, data: DataInput) -> "Rectangle":
        tag = data.read_utf()
        x1 = data.read_int()
        z1 = data.read_int()
        x2 = data.read_int()
        z2 = data.read_int()
        return cls(tag, x1, z1, x2, z2)

    def write(self, out: DataOutput) -> None:
        out.write_utf(self.tag)
        out.write_int(self.x1)
        out.write_int(self.z1)
        out.write_int(self.x2)
        out.write_int(self.z2)


def _read_rectangles(data: DataInput) -> Tuple[Rectangle, ...]:
    count = data.read_count()
    return tuple(Rectangle.read(data) for _ in range(count))


def _write_rectangles(out: DataOutput, rectangles) -> None:
    out.write_int(len(rectangles))
    for rectangle in rectangles:
        rectangle.write(out)


class ControlMessage:
    """ Base class for WDL|CONTROL messages. Subclasses define *kind* and
        implement :func:`read` and :func:`write` for their body.
    """

    kind: ClassVar[int] = -1

    @classmethod
    def read(cls, data: DataInput) -> "ControlMessage":
        raise NotImplementedError()

    def write(self, out: DataOutput) -> None:
        raise NotImplementedError()


@dataclass(frozen=True)
class UnknownFunctions(ControlMessage):
    """ Kind 0: whether functions the server does not know about may be used.
    """

    kind: ClassVar[int] = fields.UNKNOWN_FUNCTIONS

    allow: bool

    @classmethod
    def read(cls, data):
        return cls(data.read_bool())

    def write(self, out):
        out.write_bool(self.allow)


@dataclass(frozen=True)
class GeneralPermissions(ControlMessage):
    """ Kind 1: the general download permissions. A *save_radius* of -1 means
        unlimited; the radius only matters when *cache_chunks* is False.
    """

    kind: ClassVar[int] = fields.GENERAL_PERMISSIONS

    download_in_general: bool
    save_radius: int
    cache_chunks: bool
    save_entities: bool
    save_tile_entities: bool
    save_containers: bool

    @classmethod
    def read(cls, data):
        return cls(
            download_in_general=data.read_bool(),
            save_radius=data.read_int(),
            cache_chunks=data.read_bool(),
            save_entities=data.read_bool(),
            save_tile_entities=data.read_bool(),
            save_containers=data.read_bool(),
        )

    def write(self, out):
        out.write_bool(self.download_in_general)
        out.write_int(self.save_radius)
        out.write_bool(self.cache_chunks)
        out.write_bool(self.save_entities)
        out.write_bool(self.save_tile_entities)
        out.write_bool(self.save_containers)


@dataclass(frozen=True)
class EntityRanges(ControlMessage):
    """ Kind 2: per entity type tracking ranges. Later duplicates of the same
        name win, as they would when inserted into a map in wire order.
    """

    kind: ClassVar[int] = fields.ENTITY_RANGES

    ranges: Mapping[str, int] = field(default_factory=dict)

    @classmethod
    def read(cls, data):
        count = data.read_count()
        ranges: Dict[str, int] = {}
        for _ in range(count):
            name = data.read_utf()
            ranges[name] = data.read_int()
        return cls(ranges)

    def write(self, out):
        out.write_int(len(self.ranges))
        for name, value in self.ranges.items():
            out.write_utf(name)
            out.write_int(value)


@dataclass(frozen=True)
class RequestPermissions(ControlMessage):
    """ Kind 3: whether permission requests are accepted, and the message to
        show players when they make one.
    """

    kind: ClassVar[int] = fields.REQUEST_PERMISSIONS

    allow: bool
    message: str = ""

    @classmethod
    def read(cls, data):
        allow = data.read_bool()
        message = data.read_utf()
        return cls(allow, message)

    def write(self, out):
        out.write_bool(self.allow)
        out.write_utf(self.message)


@dataclass(frozen=True)
class OverrideSync(ControlMessage):
    """ Kind 4: the complete set of override groups, each a flat sequence of
        rectangles in wire order.
    """

    kind: ClassVar[int] = fields.OVERRIDE_SYNC

    groups: Mapping[str, Tuple[Rectangle, ...]] = field(default_factory=dict)

    @classmethod
    def read(cls, data):
        count = data.read_count()
        groups: Dict[str, Tuple[Rectangle, ...]] = {}
        for _ in range(count):
            name = data.read_utf()
            groups[name] = _read_rectangles(data)
        return cls(groups)

    def write(self, out):
        out.write_int(len(self.groups))
        for name, rectangles in self.groups.items():
            out.write_utf(name)
            _write_rectangles(out, rectangles)

    @property
    def total(self) -> int:
        return sum(len(rectangles) for rectangles in self.groups.values())


@dataclass(frozen=True)
class OverrideGroupUpdate(ControlMessage):
    """ Kind 5: replace or extend one override group.
    """

    kind: ClassVar[int] = fields.OVERRIDE_GROUP_UPDATE

    group: str
    replace: bool
    ranges: Tuple[Rectangle, ...] = ()

    @classmethod
    def read(cls, data):
        group = data.read_utf()
        replace = data.read_bool()
        ranges = _read_rectangles(data)
        return cls(group, replace, ranges)

    def write(self, out):
        out.write_utf(self.group)
        out.write_bool(self.replace)
        _write_rectangles(out, self.ranges)


@dataclass(frozen=True)
class OverrideTagRemoval(ControlMessage):
    """ Kind 6: drop every rectangle under the listed tags of one group.
    """

    kind: ClassVar[int] = fields.OVERRIDE_TAG_REMOVAL

    group: str
    tags: Tuple[str, ...] = ()

    @classmethod
    def read(cls, data):
        group = data.read_utf()
        count = data.read_count()
        tags = tuple(data.read_utf() for _ in range(count))
        return cls(group, tags)

    def write(self, out):
        out.write_utf(self.group)
        out.write_int(len(self.tags))
        for tag in self.tags:
            out.write_utf(tag)


@dataclass(frozen=True)
class OverrideTagReplace(ControlMessage):
    """ Kind 7: swap the rectangles under a single tag of one group. The
        rectangles are filed under *tag* whatever tag they carry themselves.
    """

    kind: ClassVar[int] = fields.OVERRIDE_TAG_REPLACE

    group: str
    tag: str
    ranges: Tuple[Rectangle, ...] = ()

    @classmethod
    def read(cls, data):
        group = data.read_utf()
        tag = data.read_utf()
        ranges = _read_rectangles(data)
        return cls(group, tag, ranges)

    def write(self, out):
        out.write_utf(self.group)
        out.write_utf(self.tag)
        _write_rectangles(out, self.ranges)


@dataclass(frozen=True)
class UnknownControl(ControlMessage):
    """ A control message with a kind this implementation does not know. The
        complete raw payload, kind included, is kept for diagnostics.
    """

    unknown_kind: int
    raw: bytes = b""

    def write(self, out):
        raise EncodingError("unknown control messages cannot be encoded")


@dataclass(frozen=True)
class PermissionRequest:
    """ The single outbound WDL|REQUEST message: a free-text *reason*, the
        requested permission values keyed by field name, and any requested
        override rectangles.
    """

    reason: str
    requests: Mapping[str, str] = field(default_factory=dict)
    ranges: Tuple[Rectangle, ...] = ()

    @classmethod
    def read(cls, data: DataInput) -> "PermissionRequest":
        reason = data.read_utf()
        count = data.read_count()
        requests: Dict[str, str] = {}
        for _ in range(count):
            key = data.read_utf()
            requests[key] = data.read_utf()
        ranges = _read_rectangles(data)
        return cls(reason, requests, ranges)

    def write(self, out: DataOutput) -> None:
        out.write_utf(self.reason)
        out.write_int(len(self.requests))
        for key, value in self.requests.items():
            out.write_utf(key)
            out.write_utf(value)
        _write_rectangles(out, self.ranges)


CONTROL_TYPES = {
    message_type.kind: message_type
    for message_type in (
        UnknownFunctions,
        GeneralPermissions,
        EntityRanges,
        RequestPermissions,
        OverrideSync,
        OverrideGroupUpdate,
        OverrideTagRemoval,
        OverrideTagReplace,
    )
}


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
