import pytest

import wdlperm


class RecordingTransport:
    """ Stand-in for the game connection: remembers every payload sent.
    """

    def __init__(self):
        self.sent = list()

    def send(self, channel, payload):
        self.sent.append((channel, bytes(payload)))

    def close(self):
        pass

    def on(self, channel):
        return [payload for sent_channel, payload in self.sent if sent_channel == channel]


class RecordingNotifier:

    def __init__(self):
        self.messages = list()

    def __call__(self, message_type, key, *args):
        self.messages.append((message_type, key) + args)

    def keys(self):
        return [message[1] for message in self.messages]


class Download:
    """ Fake download in progress, counting cancellations.
    """

    def __init__(self, active=False):
        self.active = active
        self.cancelled = 0

    def is_downloading(self):
        return self.active

    def cancel(self):
        self.cancelled += 1
        self.active = False


@pytest.fixture(autouse=True)
def wdlperm_home(tmp_path, monkeypatch):
    """ Keep configuration lookups away from the real home directory.
    """

    home = tmp_path / 'home'
    home.mkdir()

    monkeypatch.setenv('WDLPERM_HOME', str(home))
    monkeypatch.setattr(wdlperm.config.directory, 'found', None)
    wdlperm.config._cache.clear()

    yield home

    wdlperm.config._cache.clear()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def download():
    return Download()


@pytest.fixture
def session(transport, notifier, download):
    session = wdlperm.Session(
        transport,
        notify=notifier,
        is_downloading=download.is_downloading,
        cancel_download=download.cancel,
        version='test-1.0',
    )
    session.start(different_endpoint=True)
    return session


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
