import struct
from struct import Struct

from errors import InvalidFixedWidthSlice, InvalidText, TruncatedInput, ValueOutOfRange

__all__ = ('take', 'skip', 'decode_utf8', 'take_i8', 'take_i16', 'take_i32', 'take_u32', 'take_f32', 'take_string', 'check_value', 'check_range')

_i8 = Struct('>b')
_i16 = Struct('>h')
_i32 = Struct('>i')
_u32 = Struct('>I')
_f32 = Struct('>f')

def take(buf, n):
    """Split ``n`` bytes off the front of ``buf``.

    Returns the bytes and the remainder as views over the caller's buffer,
    so nothing is copied. Raises `TruncatedInput` when fewer than ``n``
    bytes are left.
    """
    if n < 0:
        raise ValueError('Cannot take a negative number of bytes: {:d}'.format(n))
    view = buf if isinstance(buf, memoryview) else memoryview(buf)
    if len(view) < n:
        raise TruncatedInput(n, len(view))
    return view[:n], view[n:]

def skip(buf, n):
    return take(buf, n)[1]

def decode_utf8(raw, what = 'string'):
    try:
        return bytes(raw).decode('utf-8')
    except UnicodeDecodeError as e:
        raise InvalidText('Failed to parse UTF-8 string in {}: {}'.format(what, e)) from e

def _take_struct(buf, fmt):
    raw, tail = take(buf, fmt.size)
    try:
        value, = fmt.unpack(raw)
    except struct.error as e:
        raise InvalidFixedWidthSlice('Failed to parse byte slice: {}'.format(e)) from e
    return value, tail

def take_i8(buf):
    return _take_struct(buf, _i8)

def take_i16(buf):
    return _take_struct(buf, _i16)

def take_i32(buf):
    return _take_struct(buf, _i32)

def take_u32(buf):
    return _take_struct(buf, _u32)

def take_f32(buf):
    return _take_struct(buf, _f32)

def take_string(buf):
    """Read an XDR string: u32 length, UTF-8 body, zero padding to 4 bytes."""
    length, tail = take_u32(buf)
    raw, tail = take(tail, length)
    text = decode_utf8(raw, 'XDR string')
    tail = skip(tail, (4 - length % 4) % 4)
    return text, tail

def check_value(expected, actual, name, block):
    if actual != expected:
        raise ValueOutOfRange('{} in {}'.format(name, block), actual, expected)

def check_range(bounds, actual, name, block):
    low, high = bounds
    if not low <= actual <= high:
        raise ValueOutOfRange('{} in {}'.format(name, block), actual, '{}..={}'.format(low, high))
