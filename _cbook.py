import os
import sys

def is_string_like(obj):
    return isinstance(obj, (str, os.PathLike))

def read_source(source):
    """Return the raw bytes of ``source``.

    ``source`` may be a path, ``'-'`` for standard input, a binary file
    object, or the bytes themselves.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)

    if is_string_like(source):
        if source in ('', '-'):
            return sys.stdin.buffer.read()
        with open(source, 'rb') as fobj:
            return fobj.read()

    return source.read()

def source_name(source):
    if is_string_like(source):
        return 'stdin' if source in ('', '-') else os.fspath(source)
    return getattr(source, 'name', 'No Filename')

__all__ = ('is_string_like', 'read_source', 'source_name')
