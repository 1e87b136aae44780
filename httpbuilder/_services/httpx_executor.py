import socket
import ssl
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

import httpx

from .._config import Config
from .._utils._logs import logger
from .._utils._ssl_context import (
    create_ssl_context,
    get_httpx_client_kwargs,
    load_client_certificate,
    ssl_verification_disabled,
)
from .._utils.constants import CONTENT_TYPE_FORM
from ._transfer import (
    TransferError,
    TransferOption,
    TransferOptions,
    TransferResult,
    header_line,
    status_line,
)

_DNS_FAILURE_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated",
    "could not resolve host",
)


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen = set()
    current: Optional[BaseException] = exc

    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _is_dns_failure(exc: BaseException) -> bool:
    for error in _exception_chain(exc):
        if isinstance(error, socket.gaierror):
            return True

        message = str(error).lower()
        if any(marker in message for marker in _DNS_FAILURE_MARKERS):
            return True

    return False


def _connect_error_code(exc: httpx.ConnectError) -> TransferError:
    for error in _exception_chain(exc):
        if isinstance(error, ssl.SSLCertVerificationError):
            return TransferError.SSL_CACERT
        if isinstance(error, ssl.SSLError):
            return TransferError.SSL_CONNECT_ERROR

    if _is_dns_failure(exc):
        return TransferError.COULDNT_RESOLVE_HOST

    return TransferError.COULDNT_CONNECT


def transfer_error_for(exc: Exception) -> TransferError:
    """Map an httpx exception onto the transport error code it corresponds to."""
    if isinstance(exc, httpx.InvalidURL):
        return TransferError.URL_MALFORMAT

    if isinstance(exc, httpx.TooManyRedirects):
        return TransferError.TOO_MANY_REDIRECTS

    if isinstance(exc, httpx.UnsupportedProtocol):
        return TransferError.UNSUPPORTED_PROTOCOL

    if isinstance(exc, httpx.ProxyError):
        return TransferError.COULDNT_RESOLVE_PROXY

    if isinstance(exc, httpx.ConnectError):
        return _connect_error_code(exc)

    if isinstance(exc, httpx.TimeoutException):
        return TransferError.OPERATION_TIMEDOUT

    if isinstance(exc, httpx.RemoteProtocolError):
        message = str(exc).lower()
        if "server disconnected" in message or "without sending" in message:
            return TransferError.GOT_NOTHING
        return TransferError.RECV_ERROR

    if isinstance(exc, httpx.ReadError):
        return TransferError.RECV_ERROR

    if isinstance(exc, httpx.WriteError):
        return TransferError.SEND_ERROR

    if isinstance(exc, httpx.DecodingError):
        return TransferError.BAD_CONTENT_ENCODING

    return TransferError.UNKNOWN


def _pull(read: Callable[[int], Any], chunk_size: int) -> Iterator[bytes]:
    while True:
        chunk = read(chunk_size)
        if not chunk:
            return
        yield chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk)


def _split_header_lines(lines: List[str]) -> List[Tuple[str, str]]:
    headers = []
    for line in lines:
        name, _, value = line.partition(":")
        headers.append((name.strip(), value.strip()))
    return headers


class HttpxTransferExecutor:
    """Runs transfers with :mod:`httpx`.

    A fresh ``httpx.Client`` is opened for every transfer and closed when it
    completes; connections are never reused. ``transport`` is handed to the
    client unchanged, which lets callers substitute ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config or Config()
        self._transport = transport

    @property
    def config(self) -> Config:
        return self._config

    def execute(self, options: TransferOptions) -> TransferResult:
        url = options[TransferOption.URL]
        method = self._method(options)
        headers = _split_header_lines(options.get(TransferOption.HTTP_HEADER, []))
        content = self._content(options)

        # buffered bodies without a declared type go out form-encoded
        buffered = TransferOption.POST_FIELDS in options and not options.get(TransferOption.UPLOAD)
        if buffered and not any(name.lower() == "content-type" for name, _ in headers):
            headers.append(("Content-Type", CONTENT_TYPE_FORM))

        header_function = options.get(TransferOption.HEADER_FUNCTION)

        request_kwargs: Dict[str, Any] = {"headers": headers}
        if content is not None:
            request_kwargs["content"] = content

        timeout = self._timeout(options)
        if timeout is not None:
            request_kwargs["timeout"] = timeout

        if TransferOption.FOLLOW_LOCATION in options:
            request_kwargs["follow_redirects"] = bool(options[TransferOption.FOLLOW_LOCATION])

        logger.debug(f"Transfer: {method} {url}")

        try:
            with httpx.Client(**self._client_kwargs(options)) as client:
                response = client.request(method, url, **request_kwargs)
        except (httpx.TransportError, httpx.TooManyRedirects, httpx.InvalidURL, httpx.DecodingError) as e:
            code = transfer_error_for(e)
            logger.debug(f"Transfer failed: {code.name} ({e})")
            return TransferResult(error_code=code, error_message=str(e) or code.name)

        if header_function is not None:
            self._emit_headers(response, header_function)

        result = TransferResult(status_code=response.status_code, body=response.content)

        if self._fails_on_error(options, response.status_code):
            result.error_code = TransferError.HTTP_RETURNED_ERROR
            result.error_message = (
                f"The requested URL returned error: {response.status_code}"
            )

        logger.debug(f"Transfer complete: {response.status_code}, {len(result.body)} bytes")

        return result

    def _method(self, options: TransferOptions) -> str:
        custom = options.get(TransferOption.CUSTOM_REQUEST)
        if custom:
            return str(custom).upper()

        if options.get(TransferOption.POST):
            return "POST"

        return "GET"

    def _content(self, options: TransferOptions) -> Any:
        if options.get(TransferOption.UPLOAD):
            read_function = options.get(TransferOption.READ_FUNCTION)
            if read_function is not None:
                return _pull(read_function, self._config.chunk_size)

            stream = options.get(TransferOption.IN_FILE)
            if stream is not None:
                return _pull(stream.read, self._config.chunk_size)

            return b""

        fields = options.get(TransferOption.POST_FIELDS)
        if fields is None:
            return None

        return fields.encode("utf-8") if isinstance(fields, str) else bytes(fields)

    def _timeout(self, options: TransferOptions) -> Optional[httpx.Timeout]:
        total = options.get(TransferOption.TIMEOUT)
        connect = options.get(TransferOption.CONNECT_TIMEOUT)

        if total is None and connect is None:
            return None

        if total is None:
            total = self._config.timeout

        return httpx.Timeout(total, connect=connect if connect is not None else total)

    def _client_kwargs(self, options: TransferOptions) -> Dict[str, Any]:
        client_kwargs = get_httpx_client_kwargs(self._config)

        verify_peer = options.get(TransferOption.VERIFY_PEER)
        if verify_peer is not None and not verify_peer:
            client_kwargs["verify"] = False

        cert_file = options.get(TransferOption.SSL_CERT)
        if cert_file:
            verify = client_kwargs["verify"] is not False and not ssl_verification_disabled()
            context = create_ssl_context(verify)
            load_client_certificate(
                context,
                cert_file,
                options.get(TransferOption.SSL_KEY),
                options.get(TransferOption.SSL_KEY_PASSWORD)
                or options.get(TransferOption.SSL_CERT_PASSWORD),
            )
            client_kwargs["verify"] = context

        if self._transport is not None:
            client_kwargs["transport"] = self._transport

        return client_kwargs

    def _emit_headers(self, response: httpx.Response, header_function: Callable[[bytes], int]) -> None:
        header_function(status_line(response.http_version, response.status_code, response.reason_phrase))

        for name, value in response.headers.raw:
            header_function(header_line(name.decode("latin-1"), value.decode("latin-1")))

        header_function(b"\r\n")

    def _fails_on_error(self, options: TransferOptions, status_code: int) -> bool:
        if not options.get(TransferOption.FAIL_ON_ERROR):
            return False

        return status_code >= 400 and status_code not in options.get(TransferOption.OK_STATUSES, ())
