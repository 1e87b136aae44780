import io
import os
from typing import Any, Optional


def is_stream(value: Any) -> bool:
    """Whether ``value`` can be pulled from with ``read(n)``."""
    return callable(getattr(value, "read", None))


def _position(stream: Any) -> int:
    try:
        return stream.tell()
    except (AttributeError, OSError, io.UnsupportedOperation):
        return 0


def stream_size(stream: Any) -> Optional[int]:
    """Number of bytes left to read from ``stream``, or ``None`` when unknown.

    Text streams yield characters that are encoded on the way out, so their
    byte count is never known up front.
    """
    if isinstance(stream, io.TextIOBase):
        return None

    try:
        total = os.fstat(stream.fileno()).st_size
    except (AttributeError, OSError, io.UnsupportedOperation):
        total = None

    if total is not None:
        return max(total - _position(stream), 0)

    if isinstance(stream, io.BytesIO):
        return stream.getbuffer().nbytes - stream.tell()

    seekable = getattr(stream, "seekable", None)
    if callable(seekable) and seekable():
        position = stream.tell()
        end = stream.seek(0, io.SEEK_END)
        stream.seek(position)
        return end - position

    return None


def read_all(stream: Any) -> bytes:
    """Read a stream from its start to the end, consuming it."""
    seekable = getattr(stream, "seekable", None)
    if callable(seekable) and seekable():
        stream.seek(0)

    data = stream.read()
    if isinstance(data, str):
        return data.encode("utf-8")
    return data or b""


def to_bytes(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    return str(value).encode("utf-8")
