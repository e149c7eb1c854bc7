""" A stand-in for the server side of the WDL permission channels. It binds
    a channel bridge, waits for a client to announce itself, and answers
    with a fixed set of permissions and one override region. Permission
    requests from the client are logged as they arrive.

    Run this first, then point a client at the same URL::

        python server.py tcp://127.0.0.1:10147
"""

import logging
import sys
import threading

import wdlperm
from wdlperm.protocol import codec, fields
from wdlperm.protocol import message as messages
from wdlperm.transport.zmq import Bridge

logger = logging.getLogger('server')


class Server:

    def __init__(self, url):

        self.stopped = threading.Event()
        self.bridge = Bridge.bind(url, receiver=self.receive)


    def receive(self, channel, payload):

        if channel == fields.INIT:
            logger.info("client version %r", payload.decode('utf-8', 'replace'))
            self.welcome()

        elif channel == fields.REQUEST:
            request = codec.decode_request(payload)
            logger.info("request %r: %s, %d region(s)", request.reason, request.requests, len(request.ranges))

        elif channel == fields.REGISTER:
            logger.info("client channels: %s", codec.decode_channels(payload))


    def welcome(self):
        """ Everything a freshly connected client needs: the channels this
            server handles, then one message for each permission kind.
        """

        self.bridge.send(fields.REGISTER, codec.encode_channels(fields.SUPPORTED_CHANNELS))

        replies = (
            messages.UnknownFunctions(False),
            messages.GeneralPermissions(
                download_in_general=False,
                save_radius=4,
                cache_chunks=False,
                save_entities=True,
                save_tile_entities=True,
                save_containers=False,
            ),
            messages.EntityRanges({'Item': 64, 'Arrow': 64}),
            messages.RequestPermissions(True, 'Ask an operator before mapping the spawn area.'),
            messages.OverrideSync({'spawn': (wdlperm.Rectangle('public', -8, -8, 8, 8),)}),
        )

        for reply in replies:
            self.bridge.send(fields.CONTROL, codec.encode_control(reply))


    def close(self):
        self.bridge.close()


# end of class Server



def main():

    logging.basicConfig(level=logging.INFO)

    try:
        url = sys.argv[1]
    except IndexError:
        url = wdlperm.config.get().bridge_url

    server = Server(url)
    logger.info("listening on %s", url)

    try:
        server.stopped.wait()
    except KeyboardInterrupt:
        pass
    finally:
        server.close()


if __name__ == '__main__':
    main()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
