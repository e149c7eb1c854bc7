""" Permission state for a single session, and the queries the archiving
    pipeline consults before saving anything.

    Every fact starts out at a permissive default and is only trusted once the
    control message kind that carries it has been received. Until then, a
    query answers with :func:`Permissions.can_use_unknown_functions`, so that
    servers with an outdated or absent extension do not silently block
    archiving. Override regions are an unconditional grant: a covered chunk
    passes every per-location query regardless of the global flags.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Optional, Set, Union

from .protocol import fields
from .regions import RegionIndex


Condition = Callable[[], bool]


class Permissions:
    """ One instance per session; constructing a new instance is the reset.

        :ivar received: Control message kinds received this session.
        :ivar overrides: The :class:`RegionIndex` of override regions.
    """

    def __init__(self):

        self.received: Set[int] = set()

        self.unknown_functions = True
        self.download_in_general = True
        self.save_radius = -1
        self.cache_chunks = True
        self.save_entities = True
        self.save_tile_entities = True
        self.save_containers = True
        self.entity_range_table: Dict[str, int] = {}
        self.request_permissions = False
        self.request_text = ""

        self.overrides = RegionIndex()


    def __repr__(self):
        return "Permissions(received=%s)" % (sorted(self.received),)


    def mark_received(self, kind: int) -> None:
        self.received.add(kind)


    def _evaluate(
        self,
        kind: int,
        value: Union[bool, Condition],
        base: Iterable[Condition] = (),
        x: Optional[int] = None,
        z: Optional[int] = None,
    ) -> bool:
        """ The layering shared by every capability query, in order: override
            region at (*x*, *z*), then each *base* condition, then *value* if
            *kind* was received, and finally the unknown-functions fallback.
        """

        if x is not None and z is not None and self.overrides.is_covered(x, z):
            return True

        for condition in base:
            if not condition():
                return False

        if kind in self.received:
            if callable(value):
                return value()
            return value

        return self.can_use_unknown_functions()


    # Global queries

    def can_use_unknown_functions(self) -> bool:
        if fields.UNKNOWN_FUNCTIONS in self.received:
            return self.unknown_functions
        return True


    def can_download_in_general(self) -> bool:
        """ Whether downloading is allowed outside of override regions.
        """

        return self._evaluate(fields.GENERAL_PERMISSIONS, self.download_in_general)


    def can_download_at_all(self) -> bool:
        """ Whether a download may start at all: either downloading is allowed
            in general, or some override region exists.
        """

        if self.has_overrides():
            return True
        return self.can_download_in_general()


    def can_cache_chunks(self) -> bool:
        return self.cache_chunks


    def can_save_maps(self) -> bool:
        # Maps have no flag of their own; the tile entity flag governs them.
        return self._evaluate(
            fields.GENERAL_PERMISSIONS,
            lambda: self.save_tile_entities,
            base=(self.can_download_in_general,),
        )


    def has_permissions(self) -> bool:
        return bool(self.received)


    # Per-location queries

    def is_overridden(self, x: int, z: int) -> bool:
        return self.overrides.is_covered(x, z)


    def has_overrides(self) -> bool:
        # A server might in principle send kinds 5-7 without ever sending
        # kind 4; such regions still grant access per chunk, but do not count
        # here.
        if fields.OVERRIDE_SYNC not in self.received:
            return False
        return self.overrides.has_ranges()


    def can_save_chunk(
        self,
        x: int,
        z: int,
        player_x: Optional[int] = None,
        player_z: Optional[int] = None,
    ) -> bool:
        """ Whether the chunk at (*x*, *z*) may be saved. When chunk caching is
            disabled and a save radius is set, the chunk must also be within
            that radius of the player's chunk along both axes; the radius check
            is skipped if no player position is supplied.
        """

        def within_radius():
            if self.cache_chunks or self.save_radius < 0:
                return True
            if player_x is None or player_z is None:
                return True
            if abs(x - player_x) > self.save_radius:
                return False
            if abs(z - player_z) > self.save_radius:
                return False
            return True

        return self._evaluate(
            fields.GENERAL_PERMISSIONS,
            within_radius,
            base=(self.can_download_in_general,),
            x=x,
            z=z,
        )


    def can_save_entities(self, x: Optional[int] = None, z: Optional[int] = None) -> bool:
        return self._evaluate(
            fields.GENERAL_PERMISSIONS,
            self.save_entities,
            base=(self.can_download_in_general,),
            x=x,
            z=z,
        )


    def can_save_tile_entities(self, x: Optional[int] = None, z: Optional[int] = None) -> bool:
        return self._evaluate(
            fields.GENERAL_PERMISSIONS,
            self.save_tile_entities,
            base=(self.can_download_in_general,),
            x=x,
            z=z,
        )


    def can_save_containers(self, x: Optional[int] = None, z: Optional[int] = None) -> bool:
        """ Containers (chests and the like) need general downloading, tile
            entity saving, and the container flag itself.
        """

        return self._evaluate(
            fields.GENERAL_PERMISSIONS,
            self.save_containers,
            base=(self.can_download_in_general, self.can_save_tile_entities),
            x=x,
            z=z,
        )


    # Entity ranges

    def entity_range(self, name: str, x: Optional[int] = None, z: Optional[int] = None) -> int:
        """ Return the server-set tracking range for the entity type *name*, or
            -1 if entities cannot be saved there, no ranges were received, or
            the server did not mention this entity type.
        """

        if not self.can_save_entities(x, z):
            return -1
        if fields.ENTITY_RANGES not in self.received:
            return -1
        return self.entity_range_table.get(name, -1)


    def entity_ranges(self) -> Dict[str, int]:
        return dict(self.entity_range_table)


    def has_server_entity_range(self) -> bool:
        if fields.ENTITY_RANGES not in self.received:
            return False
        return len(self.entity_range_table) > 0


    # Permission requests

    def allows_permission_requests(self) -> bool:
        """ Whether the server said it accepts permission requests. Whether
            the request channel is actually registered is a session concern.
        """

        if fields.REQUEST_PERMISSIONS not in self.received:
            return False
        return self.request_permissions


    def request_message(self) -> Optional[str]:
        if fields.REQUEST_PERMISSIONS not in self.received:
            return None
        return self.request_text


# end of class Permissions


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
