''' JSON handling for the settings file, through :mod:`msgspec`. Only the
    configuration layer reads and writes JSON; the channel protocol itself
    is a fixed binary layout.

    :func:`dumps` returns bytes, and :func:`loads` accepts bytes or str.
'''

import msgspec


encoder = msgspec.json.Encoder()
decoder = msgspec.json.Decoder()

dumps = encoder.encode
loads = decoder.decode

DecodeError = msgspec.DecodeError

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
