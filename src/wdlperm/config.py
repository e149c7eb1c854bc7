""" Local client settings. These are not permissions; permissions always come
    from the server and are never saved. The settings cover how this client
    identifies itself and where a channel bridge, if any, can be reached.
"""

import os
import threading

from . import json


default_filename = 'client.json'

_cache = dict()
_cache_lock = threading.Lock()


class Settings:
    """ Client settings, loaded from a JSON file in the :func:`directory`.

        :ivar version: Client version embedded in the WDL|INIT handshake.
        :ivar bridge_url: ZeroMQ endpoint of a channel bridge.
        :ivar log_level: Level name applied to the ``wdlperm`` logger.
    """

    fields = ('version', 'bridge_url', 'log_level')

    default_version = '1.0.0'
    default_bridge_url = 'tcp://127.0.0.1:10147'
    default_log_level = 'WARNING'

    def __init__(self, version=None, bridge_url=None, log_level=None):

        if version is None:
            version = self.default_version
        if bridge_url is None:
            bridge_url = self.default_bridge_url
        if log_level is None:
            log_level = self.default_log_level

        self.version = str(version)
        self.bridge_url = str(bridge_url)
        self.log_level = str(log_level).upper()


    def __eq__(self, other):
        if isinstance(other, Settings):
            return self.to_dict() == other.to_dict()
        return NotImplemented


    def __repr__(self):
        return 'Settings(%r)' % (self.to_dict(),)


    @classmethod
    def from_dict(cls, block):
        """ Build a :class:`Settings` instance from a dictionary; unrecognized
            keys are ignored so that newer files still load.
        """

        if not isinstance(block, dict):
            raise ValueError('settings must be a JSON object, not ' + type(block).__name__)

        arguments = dict()
        for field in cls.fields:
            try:
                arguments[field] = block[field]
            except KeyError:
                pass

        return cls(**arguments)


    def to_dict(self):
        block = dict()
        for field in self.fields:
            block[field] = getattr(self, field)
        return block


# end of class Settings



def directory(default=None):
    """ Return the directory location where we should be loading and/or saving
        settings files. This defaults to ``$HOME/.wdlperm``, but can be
        overridden by calling this method with a valid path, or by setting
        the ``WDLPERM_HOME`` environment variable. Note that changes to the
        environment variable will be ignored unless it is set prior to the
        first invocation of this method.
    """

    if default is not None:
        default = str(default)
        default = os.path.expandvars(default)

        if os.path.isabs(default):
            pass
        else:
            raise ValueError('the default directory must be an absolute path')

        if os.path.exists(default):
            pass
        else:
            os.makedirs(default, mode=0o775)

        os.environ['WDLPERM_HOME'] = default
        directory.found = default


    found = directory.found

    if found is not None:
        return found

    try:
        found = os.environ['WDLPERM_HOME']
    except KeyError:
        pass
    else:
        directory.found = found
        return found

    try:
        home = os.environ['HOME']
    except KeyError:
        raise RuntimeError('WDLPERM_HOME and HOME environment variables not set, cannot determine wdlperm configuration directory')

    found = os.path.join(home, '.wdlperm')

    directory.found = found
    return found

directory.found = None



def load(filename=None):
    """ Load :class:`Settings` from *filename*, which defaults to
        ``client.json`` in the :func:`directory`. A missing file yields the
        default settings; a file that is not valid JSON raises ValueError.
    """

    if filename is None:
        filename = os.path.join(directory(), default_filename)

    try:
        raw_json = open(filename, 'rb').read()
    except FileNotFoundError:
        return Settings()

    try:
        block = json.loads(raw_json)
    except json.DecodeError as e:
        raise ValueError('invalid settings file %s: %s' % (filename, e))

    return Settings.from_dict(block)



def save(settings, filename=None):
    """ Write *settings* to *filename*, which defaults to ``client.json`` in
        the :func:`directory`.
    """

    if filename is None:
        base_directory = directory()

        if os.path.exists(base_directory):
            pass
        else:
            os.makedirs(base_directory, mode=0o775)

        filename = os.path.join(base_directory, default_filename)

    raw_json = json.dumps(settings.to_dict())

    writer = open(filename, 'wb')
    writer.write(raw_json)
    writer.close()

    with _cache_lock:
        _cache.clear()



def get():
    """ Return the cached :class:`Settings`, loading them on first use.
    """

    with _cache_lock:
        try:
            return _cache['settings']
        except KeyError:
            pass

        settings = load()
        _cache['settings'] = settings
        return settings


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
