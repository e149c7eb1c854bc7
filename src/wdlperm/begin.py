""" Implementation of the top-level :func:`connect` method, the principal
    entry point for tooling that wants a working :class:`Session` without
    wiring up a transport by hand.
"""

import logging

from . import config
from .session import Session
from .transport.zmq import Bridge


def connect(settings=None, notify=None, is_downloading=None, cancel_download=None, bridge=None):
    """ Return a new :class:`Session` connected to a channel bridge.

        The *settings* default to :func:`config.get`. If no *bridge* is
        supplied, a :class:`Bridge` is connected to the configured
        ``bridge_url``. Either way the bridge hands its inbound payloads to
        the new session. The session is not started; the caller invokes
        :func:`Session.start` when the world/connection begins.
    """

    if settings is None:
        settings = config.get()

    logging.getLogger('wdlperm').setLevel(settings.log_level)

    if bridge is None:
        bridge = Bridge.connect(settings.bridge_url)

    new_session = Session(
        bridge,
        notify=notify,
        is_downloading=is_downloading,
        cancel_download=cancel_download,
        version=settings.version,
    )

    bridge.receiver = new_session.on_channel_message
    return new_session


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
