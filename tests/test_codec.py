import pytest

from wdlperm.protocol import codec, fields
from wdlperm.protocol import message as messages
from wdlperm.protocol.message import Rectangle
from wdlperm.protocol.wire import DataOutput, EncodingError, MalformedPayload


def test_rectangle_normalised():

    rectangle = Rectangle('tag', 10, 20, -5, 3)
    assert (rectangle.x1, rectangle.z1, rectangle.x2, rectangle.z2) == (-5, 3, 10, 20)

    for corners in ((0, 0, 4, 7), (4, 7, 0, 0), (0, 7, 4, 0), (4, 0, 0, 7)):
        assert Rectangle('t', *corners) == Rectangle('t', 0, 0, 4, 7)

    assert Rectangle('a', 0, 0, 1, 1) != Rectangle('b', 0, 0, 1, 1)


def test_rectangle_contains():

    rectangle = Rectangle('', 0, 0, 10, 10)
    assert rectangle.contains(0, 0)
    assert rectangle.contains(10, 10)
    assert rectangle.contains(5, 5)
    assert not rectangle.contains(11, 5)
    assert not rectangle.contains(5, -1)


def test_rectangle_layout():

    encoded = codec.encode_rectangle(Rectangle('x', 2, 1, 0, 3))
    expected = b'\x00\x01x' + b'\x00\x00\x00\x00' + b'\x00\x00\x00\x01' \
             + b'\x00\x00\x00\x02' + b'\x00\x00\x00\x03'
    assert encoded == expected

    for rectangle in (Rectangle('x', 0, 0, 10, 10), Rectangle('', -30, 7, 2, -1)):
        assert codec.decode_rectangle(codec.encode_rectangle(rectangle)) == rectangle


def test_decode_kind0():

    decoded = codec.decode_control(b'\x00\x00\x00\x00\x01')
    assert decoded == messages.UnknownFunctions(True)

    encoded = codec.encode_control(messages.UnknownFunctions(False))
    assert encoded == b'\x00\x00\x00\x00\x00'


def test_decode_kind1():

    payload = b'\x00\x00\x00\x01' + b'\x00' + b'\x00\x00\x00\x40' + b'\x00\x01\x01\x00'
    decoded = codec.decode_control(payload)

    assert isinstance(decoded, messages.GeneralPermissions)
    assert decoded.download_in_general is False
    assert decoded.save_radius == 64
    assert decoded.cache_chunks is False
    assert decoded.save_entities is True
    assert decoded.save_tile_entities is True
    assert decoded.save_containers is False

    assert codec.encode_control(decoded) == payload


def test_decode_kind2():

    payload = b'\x00\x00\x00\x02' + b'\x00\x00\x00\x02' \
            + b'\x00\x03Cow' + b'\x00\x00\x00\x50' \
            + b'\x00\x05Arrow' + b'\x00\x00\x00\x40'

    decoded = codec.decode_control(payload)
    assert decoded.ranges == {'Cow': 80, 'Arrow': 64}


def test_decode_kind3():

    decoded = codec.decode_control(b'\x00\x00\x00\x03\x01\x00\x02hi')
    assert decoded == messages.RequestPermissions(True, 'hi')


def test_decode_kind4():

    out = DataOutput()
    out.write_int(4).write_int(2)
    out.write_utf('spawn').write_int(2)
    Rectangle('a', 0, 0, 1, 1).write(out)
    Rectangle('b', 5, 5, 6, 6).write(out)
    out.write_utf('empty').write_int(0)

    decoded = codec.decode_control(out.to_bytes())
    assert isinstance(decoded, messages.OverrideSync)
    assert list(decoded.groups) == ['spawn', 'empty']
    assert decoded.groups['spawn'] == (Rectangle('a', 0, 0, 1, 1), Rectangle('b', 5, 5, 6, 6))
    assert decoded.groups['empty'] == ()
    assert decoded.total == 2


def test_decode_kinds5_to_7():

    update = messages.OverrideGroupUpdate('g', True, (Rectangle('t', 1, 2, 3, 4),))
    removal = messages.OverrideTagRemoval('g', ('t', 'u'))
    replace = messages.OverrideTagReplace('g', 't', (Rectangle('t', 0, 0, 0, 0),))

    for original in (update, removal, replace):
        encoded = codec.encode_control(original)
        kind, _data = codec.open_control(encoded)
        assert kind == original.kind
        assert codec.decode_control(encoded) == original

    assert codec.encode_control(removal) == (
        b'\x00\x00\x00\x06' + b'\x00\x01g' + b'\x00\x00\x00\x02' + b'\x00\x01t' + b'\x00\x01u'
    )


def test_unknown_kind():

    payload = b'\x00\x00\x00\x63\xde\xad'
    decoded = codec.decode_control(payload)

    assert isinstance(decoded, messages.UnknownControl)
    assert decoded.unknown_kind == 99
    assert decoded.raw == payload

    with pytest.raises(EncodingError):
        codec.encode_control(decoded)


def test_malformed_control():

    with pytest.raises(MalformedPayload):
        codec.decode_control(b'\x00\x00')

    with pytest.raises(MalformedPayload):
        codec.decode_control(b'\x00\x00\x00\x01\x01\x00\x00')

    # Count promises a rectangle that is not there.
    with pytest.raises(MalformedPayload):
        codec.decode_control(b'\x00\x00\x00\x05\x00\x01g\x00\x00\x00\x00\x01')


def test_trailing_bytes_ignored():

    decoded = codec.decode_control(b'\x00\x00\x00\x00\x01extra')
    assert decoded == messages.UnknownFunctions(True)


def test_channels():

    encoded = codec.encode_channels(fields.SUPPORTED_CHANNELS)
    assert encoded == b'WDL|INIT\x00WDL|CONTROL\x00WDL|REQUEST\x00'

    assert codec.decode_channels(encoded) == list(fields.SUPPORTED_CHANNELS)
    assert codec.decode_channels(b'A\x00\x00B') == ['A', 'B']
    assert codec.decode_channels(b'') == []

    with pytest.raises(EncodingError):
        codec.decode_channels(b'\xff\x00')

    with pytest.raises(EncodingError):
        codec.encode_channels(['bad\x00name'])


def test_init():

    assert codec.encode_init('1.8.9a-beta2') == b'1.8.9a-beta2'

    with pytest.raises(EncodingError):
        codec.encode_init('broken\ud800')


def test_request_layout():

    request = messages.PermissionRequest(
        'please', {'saveRadius': '8'}, (Rectangle('', 0, 0, 1, 1),)
    )
    encoded = codec.encode_request(request)

    expected = b'\x00\x06please' + b'\x00\x00\x00\x01' \
             + b'\x00\x0asaveRadius' + b'\x00\x018' \
             + b'\x00\x00\x00\x01' + b'\x00\x00' \
             + b'\x00\x00\x00\x00' * 2 + b'\x00\x00\x00\x01' * 2

    assert encoded == expected
    assert codec.decode_request(encoded) == request


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
