import io
import json
from typing import Any, Optional, Union

from .errors import ParseError
from .message import FrozenHeaderBag, HeaderBag, HttpMessage


class HeaderCollector:
    """Accumulates raw response header lines into a :class:`HeaderBag`.

    Each call receives one line as emitted by the transport and returns its
    length. Lines without a colon (the status line, the closing blank line)
    are counted and otherwise ignored.
    """

    def __init__(self) -> None:
        self.headers = HeaderBag()

    def __call__(self, line: Union[bytes, str]) -> int:
        text = line.decode("latin-1") if isinstance(line, bytes) else line
        name, separator, value = text.partition(":")

        if separator:
            self.headers.add(name.strip().lower(), value.strip())

        return len(line)


class HttpResponse(HttpMessage):
    """Immutable result of a completed transfer.

    The headers are copied at construction into a :class:`FrozenHeaderBag`.
    """

    def __init__(self, status_code: int, body: bytes = b"", headers: Optional[HeaderBag] = None):
        super().__init__()
        self._status_code = int(status_code)
        self._body = body or b""
        self._headers = FrozenHeaderBag(headers)

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def body(self) -> bytes:
        return self._body

    @property
    def text(self) -> str:
        return self._body.decode("utf-8", errors="replace")

    def get_stream(self) -> io.BytesIO:
        """A fresh readable stream positioned at the start of the body."""
        return io.BytesIO(self._body)

    def get_parsed_body(self) -> Any:
        """Decode the body according to the response ``Content-Type``.

        ``application/json`` is deserialized, ``text/plain`` is returned as a
        string, and any other (or missing) type is returned as a binary stream
        so payloads are never force-decoded.

        Returns:
            The deserialized JSON value, a ``str``, or an ``io.BytesIO``.

        Raises:
            ParseError: If a JSON response body is malformed.
        """
        content_type = self.get_header(self.HEADER_CONTENT_TYPE) or ""
        media_type = str(content_type).split(";", 1)[0].strip().lower()

        if media_type == self.CONTENT_TYPE_JSON:
            try:
                return json.loads(self._body)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise ParseError(f"Invalid JSON response body: {e}", self._body) from e

        if media_type == self.CONTENT_TYPE_TEXT:
            return self.text

        return self.get_stream()

    def __repr__(self) -> str:
        return f"<HttpResponse [{self._status_code}]>"
