""" The session controller: owns all permission state for one connection,
    routes inbound plugin channel payloads, and sends the handshake and
    permission requests.

    A session is :data:`UNINITIALIZED` until :func:`Session.start` is called
    for a world/connection, then :data:`ACTIVE`. Every start resets the state
    to permissive defaults and asks the server for the real values.

    Inbound traffic is expected to arrive serialized, but a single re-entrant
    lock guards all state anyway, so that readers using :func:`Session.state`
    never observe the override index halfway through an update.
"""

from __future__ import annotations

import contextlib
import logging
import threading
import zlib
from typing import Callable, FrozenSet, Iterator, Optional, Set

from . import config
from .pending import PendingRequests
from .permissions import Permissions
from .protocol import codec, fields
from .protocol import message as messages
from .protocol.message import Rectangle
from .protocol.wire import EncodingError, MalformedPayload
from .transport.base import TransportError

logger = logging.getLogger(__name__)


UNINITIALIZED = "UNINITIALIZED"
ACTIVE = "ACTIVE"

Notify = Callable[..., None]


def _ignore(*args, **kwargs):
    return None


def _never():
    return False


class Session:
    """ One session per connection.

        *transport* needs a ``send(channel, payload)`` method. *notify* is
        called as ``notify(message_type, key, *args)`` with a message type from
        :mod:`wdlperm.protocol.fields` and a localisation key; this class never
        formats user-facing text. *is_downloading* and *cancel_download* are
        the hooks used to stop a download when the server revokes permission
        mid-session.
    """

    def __init__(
        self,
        transport,
        notify: Optional[Notify] = None,
        is_downloading: Optional[Callable[[], bool]] = None,
        cancel_download: Optional[Callable[[], None]] = None,
        version: Optional[str] = None,
    ):

        if version is None:
            version = config.get().version

        self.transport = transport
        self.version = version
        self.notify = notify or _ignore
        self.is_downloading = is_downloading or _never
        self.cancel_download = cancel_download or _ignore

        self.status = UNINITIALIZED
        self.lock = threading.RLock()

        self.permissions = Permissions()
        self.pending = PendingRequests()
        self.channels: Set[str] = set()

        self._channel_handlers = {
            fields.CONTROL: self._on_control,
            fields.REGISTER: self._on_register,
            fields.UNREGISTER: self._on_unregister,
        }

        self._control_handlers = {
            fields.UNKNOWN_FUNCTIONS: self._apply_unknown_functions,
            fields.GENERAL_PERMISSIONS: self._apply_general,
            fields.ENTITY_RANGES: self._apply_entity_ranges,
            fields.REQUEST_PERMISSIONS: self._apply_request_permissions,
            fields.OVERRIDE_SYNC: self._apply_override_sync,
            fields.OVERRIDE_GROUP_UPDATE: self._apply_group_update,
            fields.OVERRIDE_TAG_REMOVAL: self._apply_tag_removal,
            fields.OVERRIDE_TAG_REPLACE: self._apply_tag_replace,
        }


    def __repr__(self):
        return "Session(%s, %r)" % (self.status, self.permissions)


    # Lifecycle

    def start(self, different_endpoint: bool = False) -> None:
        """ Reset all state and announce this client to the server. When the
            remote endpoint differs from the previous one, the set of channels
            it registered is forgotten too.
        """

        with self.lock:
            self.permissions = Permissions()
            self.pending = PendingRequests()
            if different_endpoint:
                self.channels = set()
            self.status = ACTIVE

        self._notify(fields.PLUGIN_CHANNEL_MESSAGE, fields.MSG_INIT)

        self._send_quietly(fields.REGISTER, codec.encode_channels(fields.SUPPORTED_CHANNELS))

        try:
            init = codec.encode_init(self.version)
        except EncodingError as e:
            self._notify(fields.ERROR, fields.MSG_NO_UTF8, e)
            init = b""

        self._send_quietly(fields.INIT, init)


    def _notify(self, message_type, key, *args):
        # A failing sink never stops the handshake or a cancellation.
        try:
            self.notify(message_type, key, *args)
        except Exception:
            logger.warning("notification %s failed", key, exc_info=True)


    def _send_quietly(self, channel, payload):
        try:
            self.transport.send(channel, payload)
        except TransportError as e:
            logger.warning("could not send %s: %s", channel, e)


    @contextlib.contextmanager
    def state(self) -> Iterator[Permissions]:
        """ Hold the session lock and yield the current :class:`Permissions`,
            for queries that need a consistent view.
        """

        with self.lock:
            yield self.permissions


    def registered_channels(self) -> FrozenSet[str]:
        with self.lock:
            return frozenset(self.channels)


    def can_request_permissions(self) -> bool:
        """ True if the server registered the request channel and said it
            accepts requests.
        """

        with self.lock:
            if fields.REQUEST not in self.channels:
                return False
            return self.permissions.allows_permission_requests()


    # Inbound

    def on_channel_message(self, channel: str, payload: bytes) -> None:
        """ Entry point for the transport: one call per received payload.
            Nothing raised while handling a single message escapes; the worst
            outcome is that message being dropped.
        """

        if self.status != ACTIVE:
            logger.debug("session not started, dropping %s payload", channel)
            return

        try:
            handler = self._channel_handlers[channel]
        except KeyError:
            logger.debug("ignoring payload on unhandled channel %s", channel)
            return

        with self.lock:
            try:
                handler(payload)
            except Exception:
                logger.exception("dropping %s payload after a handler failure", channel)


    def _on_register(self, payload):
        try:
            names = codec.decode_channels(payload)
        except EncodingError as e:
            self._notify(fields.ERROR, fields.MSG_NO_UTF8, e)
            return

        logger.debug("remote registered %s", names)
        self.channels.update(names)


    def _on_unregister(self, payload):
        try:
            names = codec.decode_channels(payload)
        except EncodingError as e:
            self._notify(fields.ERROR, fields.MSG_NO_UTF8, e)
            return

        logger.debug("remote unregistered %s", names)
        self.channels.difference_update(names)


    def _on_control(self, payload):

        try:
            kind, data = codec.open_control(payload)
        except MalformedPayload as e:
            logger.warning("dropping control payload without a kind: %s", e)
            return

        # The kind counts as received even if the body below turns out to be
        # malformed; the server has spoken about it.

        if kind in fields.KNOWN_KINDS:
            self.permissions.mark_received(kind)

        try:
            decoded = codec.decode_control_body(kind, data)
        except MalformedPayload as e:
            logger.warning("dropping malformed control message of kind %d: %s", kind, e)
            return

        try:
            apply = self._control_handlers[kind]
        except KeyError:
            self._unknown_control(decoded)
            return

        apply(decoded)


    def _unknown_control(self, decoded):
        self._notify(
            fields.PLUGIN_CHANNEL_MESSAGE, fields.MSG_UNKNOWN_PACKET, decoded.unknown_kind
        )
        logger.info("unknown control kind %d: %s", decoded.unknown_kind, decoded.raw.hex(" "))


    def _packet(self, kind, *args):
        self._notify(fields.PLUGIN_CHANNEL_MESSAGE, fields.MSG_PACKET % (kind), *args)


    def _apply_unknown_functions(self, decoded: messages.UnknownFunctions):
        self.permissions.unknown_functions = decoded.allow
        self._packet(decoded.kind, decoded.allow)


    def _apply_general(self, decoded: messages.GeneralPermissions):
        permissions = self.permissions

        permissions.download_in_general = decoded.download_in_general
        permissions.save_radius = decoded.save_radius
        permissions.cache_chunks = decoded.cache_chunks
        permissions.save_entities = decoded.save_entities
        permissions.save_tile_entities = decoded.save_tile_entities
        permissions.save_containers = decoded.save_containers

        self._packet(
            decoded.kind,
            decoded.download_in_general,
            decoded.save_radius,
            decoded.cache_chunks,
            decoded.save_entities,
            decoded.save_tile_entities,
            decoded.save_containers,
        )

        if not decoded.download_in_general and self.is_downloading():
            self._notify(fields.ERROR, fields.MSG_FORBIDDEN)
            self.cancel_download()


    def _apply_entity_ranges(self, decoded: messages.EntityRanges):
        self.permissions.entity_range_table = dict(decoded.ranges)
        self._packet(decoded.kind, len(decoded.ranges))


    def _apply_request_permissions(self, decoded: messages.RequestPermissions):
        self.permissions.request_permissions = decoded.allow
        self.permissions.request_text = decoded.message

        # The message itself can be long; summarize rather than echo it.

        digest = "%08x" % (zlib.crc32(decoded.message.encode("utf-8", "surrogatepass")))
        self._packet(decoded.kind, decoded.allow, len(decoded.message), digest)


    def _apply_override_sync(self, decoded: messages.OverrideSync):
        self.permissions.overrides.replace_all(decoded.groups)
        self._packet(decoded.kind, len(decoded.groups), decoded.total)


    def _apply_group_update(self, decoded: messages.OverrideGroupUpdate):
        overrides = self.permissions.overrides
        overrides.update_group(decoded.group, decoded.replace, decoded.ranges)

        if decoded.replace:
            key = fields.MSG_PACKET5_SET
        else:
            key = fields.MSG_PACKET5_ADDED

        self._notify(fields.PLUGIN_CHANNEL_MESSAGE, key, len(decoded.ranges), decoded.group)


    def _apply_tag_removal(self, decoded: messages.OverrideTagRemoval):
        removed = self.permissions.overrides.remove_tags(decoded.group, decoded.tags)
        self._packet(decoded.kind, removed, decoded.group, list(decoded.tags))


    def _apply_tag_replace(self, decoded: messages.OverrideTagReplace):
        overrides = self.permissions.overrides
        removed = overrides.replace_tag(decoded.group, decoded.tag, decoded.ranges)
        self._packet(decoded.kind, removed, decoded.group, decoded.tag, len(decoded.ranges))


    # Outbound permission requests

    def add_request(self, key: str, value: str) -> bool:
        with self.lock:
            return self.pending.add(key, value)


    def remove_request(self, key: str) -> None:
        with self.lock:
            self.pending.remove(key)


    def add_region_request(self, rectangle: Rectangle) -> None:
        with self.lock:
            self.pending.add_range(rectangle)


    def flush_requests(self, reason: str) -> bool:
        """ Send everything pending as one WDL|REQUEST message. Returns False
            if nothing was pending. Pending requests are left in place;
            call :func:`clear_requests` once satisfied the send happened.
            Transport errors propagate.
        """

        with self.lock:
            request = self.pending.build(reason)

        if request is None:
            return False

        self.transport.send(fields.REQUEST, codec.encode_request(request))
        return True


    def clear_requests(self) -> None:
        with self.lock:
            self.pending.clear()


# end of class Session


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
