import os
import secrets
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Union

from .._utils import constants
from .._utils._logs import logger
from .._utils._streams import is_stream, to_bytes
from .errors import InvalidStateError, UnsupportedPartTypeError

EOL = b"\r\n"
SEPARATOR = b"--"


class BytesPart:
    """Literal content held in memory. Tracks its own read offset."""

    def __init__(self, data: bytes):
        self.data = data
        self.length: Optional[int] = len(data)
        self._offset = 0

    def read(self, max_length: int) -> bytes:
        chunk = self.data[self._offset : self._offset + max_length]
        self._offset += len(chunk)
        return chunk

    def rewind(self) -> None:
        self._offset = 0


class _ProducerPart:
    """Base for parts whose source may hand back more bytes than requested.

    ``str`` chunks are UTF-8 encoded, which can grow them past the limit, and
    callbacks are free to ignore it. Any overflow is held back and served by
    the next reads so a single read never exceeds ``max_length`` bytes.
    """

    def __init__(self, length: Optional[int] = None):
        self.length = length
        self._pending = b""

    def _produce(self, max_length: int) -> Any:
        raise NotImplementedError

    def read(self, max_length: int) -> bytes:
        if not self._pending:
            chunk = self._produce(max_length)
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            self._pending = bytes(chunk) if chunk else b""

        data, self._pending = self._pending[:max_length], self._pending[max_length:]
        return data


class StreamPart(_ProducerPart):
    """Any object exposing ``read(n)``; the stream keeps its own position."""

    def __init__(self, stream: Any, length: Optional[int] = None):
        super().__init__(length)
        self.stream = stream

    def _produce(self, max_length: int) -> Any:
        return self.stream.read(max_length)


class HandlePart:
    """A raw OS file descriptor. Read errors surface as ``OSError``."""

    def __init__(self, fd: int, length: Optional[int] = None):
        self.fd = fd
        self.length = length

    def read(self, max_length: int) -> bytes:
        return os.read(self.fd, max_length)


class CallbackPart(_ProducerPart):
    """A producer called with the maximum number of bytes it may return."""

    def __init__(self, callback: Callable[[int], Union[bytes, str]], length: Optional[int] = None):
        super().__init__(length)
        self.callback = callback

    def _produce(self, max_length: int) -> Any:
        return self.callback(max_length)


Part = Union[BytesPart, StreamPart, HandlePart, CallbackPart]


def make_part(content: Any, length: Optional[int] = None) -> Part:
    """Pick the part variant for ``content``.

    Literal ``str``/``bytes`` content always has a known length; for the other
    variants ``length`` is whatever the caller declares, ``None`` meaning unknown.
    """
    if isinstance(content, (str, bytes, bytearray, memoryview)):
        return BytesPart(to_bytes(content))

    if isinstance(content, int) and not isinstance(content, bool):
        return HandlePart(content, length)

    if is_stream(content):
        return StreamPart(content, length)

    if callable(content):
        return CallbackPart(content, length)

    raise UnsupportedPartTypeError(content)


class FormDataState(str, Enum):
    BUILDING = "building"
    SEALED = "sealed"
    BUFFERED = "buffered"


class FormData:
    """Streaming ``multipart/form-data`` body.

    Fields and files are appended as a sequence of parts (boundary line,
    headers, blank line, content, trailing line break). The body can then be
    pulled in bounded chunks with :meth:`read`, which is how the transport
    uploads it, or collapsed into a single in-memory buffer with :meth:`buffer`.

    The encoder moves through three states: ``BUILDING`` accepts new fields,
    ``SEALED`` has its closing delimiter and rejects further appends, and
    ``BUFFERED`` holds the whole payload as one literal part.

    Examples:
        ```python
        from httpbuilder import FormData

        form = FormData({"foo": "bar"})
        with open("report.pdf", "rb") as handle:
            form.add_file("report", handle, "application/pdf", length=os.path.getsize("report.pdf"))
            payload = form.seal().buffer()
        ```
    """

    def __init__(self, fields: Optional[Mapping[str, Any]] = None):
        self._boundary = self._generate_boundary()
        self._parts: List[Part] = []
        self._content_length: Optional[int] = 0
        self._state = FormDataState.BUILDING
        self._index = 0

        if fields:
            self.add_fields(fields)

    @property
    def boundary(self) -> str:
        return self._boundary

    @property
    def content_type(self) -> str:
        return f"{constants.CONTENT_TYPE_MULTIPART}; boundary={self._boundary}"

    @property
    def content_length(self) -> Optional[int]:
        """Total body size in bytes, or ``None`` once any part has an unknown length."""
        return self._content_length

    @property
    def state(self) -> FormDataState:
        return self._state

    @property
    def is_sealed(self) -> bool:
        return self._state is not FormDataState.BUILDING

    @property
    def is_buffered(self) -> bool:
        return self._state is FormDataState.BUFFERED

    def add_fields(self, fields: Mapping[str, Any]) -> "FormData":
        for name, value in fields.items():
            self.add_field(name, value)

        return self

    def add_field(self, name: str, value: Any) -> "FormData":
        """Append a plain text field.

        Args:
            name (str): The form field name.
            value (Any): The field value; anything other than ``bytes`` is stringified.

        Returns:
            FormData: ``self``, for chaining.

        Raises:
            InvalidStateError: If the body has already been sealed.
        """
        self._start_part()
        self._add_content_disposition("form-data", name)
        self._end_headers()
        self._add(value if isinstance(value, (bytes, bytearray)) else str(value))
        self._end_part()

        return self

    def add_file(
        self,
        name: str,
        content: Any,
        content_type: str,
        filename: Optional[str] = None,
        length: Optional[int] = None,
    ) -> "FormData":
        """Append a file attachment.

        Args:
            name (str): The form field name.
            content: ``str``/``bytes``, a readable stream, an OS file descriptor,
                or a callable taking the maximum number of bytes to return.
            content_type (str): MIME type sent in the part's ``Content-Type`` header.
            filename (Optional[str]): File name announced to the server. Defaults to ``name``.
            length (Optional[int]): Byte length of non-literal content, if known.

        Returns:
            FormData: ``self``, for chaining.

        Raises:
            InvalidStateError: If the body has already been sealed.
            UnsupportedPartTypeError: If ``content`` is none of the supported kinds.
        """
        if self.is_sealed:
            raise InvalidStateError("Multipart body is finished")

        part = make_part(content, length)

        self._start_part()
        self._add_content_disposition("form-data", name, filename or name)
        self._add_header("Content-Type", content_type)
        self._end_headers()
        self._append(part)
        self._end_part()

        return self

    def seal(self) -> "FormData":
        """Append the closing delimiter. Sealing twice is a no-op."""
        if self.is_sealed:
            return self

        self._add(SEPARATOR + self._boundary.encode("ascii") + SEPARATOR + EOL)
        self._state = FormDataState.SEALED
        logger.debug(f"Sealed multipart body with {len(self._parts)} parts")

        return self

    def read(self, max_length: int) -> bytes:
        """Pull up to ``max_length`` bytes; ``b""`` signals the end of the body."""
        if max_length <= 0:
            return b""

        if not self.is_sealed:
            self.seal()

        while self._index < len(self._parts):
            data = self._parts[self._index].read(max_length)

            if data:
                return data

            self._index += 1

        return b""

    def buffer(self, chunk_size: int = constants.DEFAULT_CHUNK_SIZE) -> bytes:
        """Drain every part into one contiguous buffer and keep only that.

        Repeated calls return the memoized buffer. Reading restarts from the
        beginning after each call. Literal parts are replayed from their start;
        stream, handle and callback parts continue from wherever they are.

        Raises:
            InvalidStateError: If the body has not been sealed yet.
        """
        if not self.is_sealed:
            raise InvalidStateError("can't buffer a non-finished multipart object")

        if not self.is_buffered:
            for part in self._parts:
                if isinstance(part, BytesPart):
                    part.rewind()

            self._index = 0
            chunks = []

            while True:
                data = self.read(chunk_size)
                if not data:
                    break
                chunks.append(data)

            content = b"".join(chunks)
            self._parts = [BytesPart(content)]
            self._content_length = len(content)
            self._state = FormDataState.BUFFERED

        part = self._parts[0]
        assert isinstance(part, BytesPart)
        part.rewind()
        self._index = 0

        return part.data

    def __bytes__(self) -> bytes:
        return self.seal().buffer()

    def __repr__(self) -> str:
        return (
            f"FormData(boundary={self._boundary!r}, parts={len(self._parts)}, "
            f"state={self._state.value})"
        )

    def _generate_boundary(self) -> str:
        return secrets.token_hex(12)

    def _start_part(self) -> None:
        self._add(SEPARATOR + self._boundary.encode("ascii") + EOL)

    def _end_headers(self) -> None:
        self._add(EOL)

    def _end_part(self) -> None:
        self._add(EOL)

    def _add_header(self, name: str, value: str) -> None:
        self._add(f"{name}: {value}".encode("utf-8") + EOL)

    def _add_content_disposition(self, disposition: str, name: str = "", filename: str = "") -> None:
        header = disposition

        if name:
            header += f'; name="{name}"'

        if filename:
            header += f'; filename="{filename}"'

        self._add_header("Content-Disposition", header)

    def _add(self, content: Union[str, bytes, bytearray]) -> None:
        self._append(BytesPart(to_bytes(content)))

    def _append(self, part: Part) -> None:
        if self.is_sealed:
            raise InvalidStateError("Multipart body is finished")

        self._parts.append(part)

        if part.length is None:
            self._content_length = None
        elif self._content_length is not None:
            self._content_length += part.length
