import base64
import json
import os
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlencode

from .._services import (
    CONNECTION_ERRORS,
    SSL_ERRORS,
    HttpxTransferExecutor,
    TransferError,
    TransferExecutor,
    TransferOption,
    TransferOptions,
    TransferResult,
)
from .._utils import append_query, is_stream, logger, read_all, redact_headers, split_query, stream_size
from .errors import InvalidArgumentError
from .exceptions import (
    ConnectionException,
    HttpClientException,
    ResponseErrorException,
    SslCertificateException,
    UnresolvableHostException,
)
from .form_data import FormData
from .message import HttpMessage
from .response import HeaderCollector, HttpResponse
from .status import Status


class HttpRequest(HttpMessage):
    """Fluent builder for a single HTTP request.

    Every ``with_*`` method mutates the builder and returns it, so calls can be
    chained. Nothing is sent until :meth:`run` is called.

    Examples:
        ```python
        from httpbuilder import HttpRequest

        response = (
            HttpRequest("POST", "https://example.com/api/items?page=2")
            .with_authorization(HttpRequest.AUTHORIZATION_BEARER, token)
            .as_json()
            .with_body({"name": "widget"})
            .run()
        )
        items = response.get_parsed_body()
        ```
    """

    def __init__(self, method: str, url: str, executor: Optional[TransferExecutor] = None):
        super().__init__()
        self._method = method.upper()
        self._url = ""
        self._query: Dict[str, Any] = {}
        self._body: Any = None
        self._options: TransferOptions = {}
        self._executor = executor

        if self._method == self.METHOD_GET:
            pass
        elif self._method == self.METHOD_POST:
            self.with_transfer_option(TransferOption.POST)
        elif self._method in (self.METHOD_PUT, self.METHOD_PATCH, self.METHOD_DELETE, self.METHOD_HEAD):
            self.with_transfer_option(TransferOption.CUSTOM_REQUEST, self._method)
        else:
            raise InvalidArgumentError(f"Unknown request method {method}")

        self.with_url(url)

    @property
    def method(self) -> str:
        return self._method

    @property
    def url(self) -> str:
        return self._url

    @property
    def body(self) -> Any:
        return self._body

    @property
    def query(self) -> Dict[str, Any]:
        return dict(self._query)

    # Transport options

    def with_transfer_option(self, option: Union[TransferOption, str], value: Any = True) -> "HttpRequest":
        self._options[option] = value
        return self

    def without_transfer_option(self, option: Union[TransferOption, str]) -> "HttpRequest":
        self._options.pop(option, None)
        return self

    def get_transfer_option(self, option: Union[TransferOption, str]) -> Any:
        return self._options.get(option)

    def get_transfer_options(self) -> TransferOptions:
        return dict(self._options)

    def with_timeout(self, seconds: float) -> "HttpRequest":
        """Apply ``seconds`` as both the total and the connect timeout."""
        self._options[TransferOption.TIMEOUT] = seconds
        self._options[TransferOption.CONNECT_TIMEOUT] = seconds
        return self

    @property
    def timeout(self) -> Optional[float]:
        return self._options.get(TransferOption.TIMEOUT)

    def follow_redirects(self, follow: bool = True) -> "HttpRequest":
        return self.with_transfer_option(TransferOption.FOLLOW_LOCATION, follow)

    # Headers

    def with_header(self, name: str, value: Any = "", replace: bool = False) -> "HttpRequest":
        self._headers.add(name, value, replace)
        return self

    def with_headers(self, headers: Mapping[str, Any], replace_all: bool = True) -> "HttpRequest":
        for name, value in headers.items():
            self.with_header(name, value, replace_all)

        return self

    def without_header(self, name: str) -> "HttpRequest":
        self._headers.remove(name)
        return self

    # Query parameters

    def with_param(self, name: str, value: Any = "") -> "HttpRequest":
        self._query[name] = value
        return self

    def with_params(self, params: Mapping[str, Any]) -> "HttpRequest":
        for name, value in params.items():
            self.with_param(name, value)

        return self

    def get_param(self, name: str) -> Any:
        return self._query.get(name)

    def without_param(self, name: str) -> "HttpRequest":
        self._query.pop(name, None)
        return self

    def with_url(self, url: str) -> "HttpRequest":
        """Set the target URL, moving any query string into the parameters.

        Parameters already on the builder are kept; values parsed from ``url``
        overwrite parameters with the same name.
        """
        url, params = split_query(url)
        self.with_params(params)
        self._url = url

        return self

    # Body

    def with_body(self, body: Any, length: Optional[int] = None) -> "HttpRequest":
        """Attach a request body.

        Args:
            body: A ``str``/``bytes`` payload, a mapping to be form or JSON
                encoded, a readable stream, or a :class:`FormData`.
            length (Optional[int]): Explicit ``Content-Length``. When omitted it
                is derived from the body at execution time.

        Returns:
            HttpRequest: ``self``, for chaining.

        Raises:
            InvalidArgumentError: If the request method does not allow a body.
        """
        if self._method not in self.METHODS_WITH_BODY:
            raise InvalidArgumentError(f"Requests with method {self._method} can't have a body")

        self._body = body

        if length is not None:
            self.with_header(self.HEADER_CONTENT_LENGTH, length, True)

        return self

    def without_body(self) -> "HttpRequest":
        self._body = None
        return self.without_header(self.HEADER_CONTENT_LENGTH)

    def get_encoded_body(self) -> Any:
        """Serialize the body for the current content type.

        Streams are read in full and :class:`FormData` bodies are sealed and
        buffered. Otherwise JSON and form types encode the body, the text type
        stringifies it, and unknown types return it unchanged. Raw bytes under
        a JSON or text type are taken as already encoded.

        Raises:
            InvalidArgumentError: If the body is not JSON serializable.
            NotImplementedError: For a multipart content type with a body that
                is not a :class:`FormData`. Multipart bodies are streamed by
                :meth:`run` instead.
        """
        body = self._body

        if isinstance(body, FormData):
            return bytes(body)

        if is_stream(body):
            return read_all(body)

        media_type = self.media_type

        if media_type in (self.CONTENT_TYPE_JSON, self.CONTENT_TYPE_TEXT) and isinstance(body, (bytes, bytearray)):
            # already serialized
            return bytes(body)

        if media_type == self.CONTENT_TYPE_JSON:
            try:
                return json.dumps(body, ensure_ascii=False, separators=(",", ":"))
            except (TypeError, ValueError) as e:
                raise InvalidArgumentError(f"Body can't be encoded as JSON: {e}") from e

        if media_type == self.CONTENT_TYPE_FORM:
            return urlencode(body, doseq=True) if isinstance(body, Mapping) else body

        if media_type == self.CONTENT_TYPE_TEXT:
            return str(body)

        if media_type == self.CONTENT_TYPE_MULTIPART:
            raise NotImplementedError("Multipart bodies must be built with FormData")

        return body

    # Content type shorthands

    def with_content_type(self, content_type: str) -> "HttpRequest":
        return self.with_header(self.HEADER_CONTENT_TYPE, content_type, True)

    def as_json(self, as_json: bool = True) -> "HttpRequest":
        return self.with_content_type(self.CONTENT_TYPE_JSON if as_json else self.CONTENT_TYPE_TEXT)

    def as_blob(self, as_blob: bool = True) -> "HttpRequest":
        """Mark the transfer as binary.

        The content type switches to ``application/octet-stream`` only while it
        is still the form default; an explicit content type is left alone.
        """
        if self.get_content_type() == self.CONTENT_TYPE_FORM:
            self.with_content_type(self.CONTENT_TYPE_BINARY)

        return self.with_transfer_option(TransferOption.BINARY_TRANSFER, as_blob)

    # Authentication

    def with_authorization(self, scheme: str, username_or_token: str, password: str = "") -> "HttpRequest":
        """Add an ``Authorization`` header.

        Args:
            scheme (str): One of ``Basic``, ``Bearer``, ``Digest`` or ``OAuth``.
            username_or_token (str): The user name for ``Basic``, otherwise the
                credentials sent verbatim.
            password (str): Only used by ``Basic``.

        Raises:
            InvalidArgumentError: If ``scheme`` is not supported.
        """
        if scheme == self.AUTHORIZATION_BASIC:
            credentials = base64.b64encode(f"{username_or_token}:{password}".encode("utf-8")).decode("ascii")
        elif scheme in (self.AUTHORIZATION_BEARER, self.AUTHORIZATION_DIGEST, self.AUTHORIZATION_OAUTH):
            credentials = username_or_token
        else:
            raise InvalidArgumentError(f"Invalid or unsupported authorization type '{scheme}'.")

        return self.with_header(self.HEADER_AUTHORIZATION, f"{scheme} {credentials}")

    def with_ssl_client_certificate(self, path: str, force: bool = False) -> "HttpRequest":
        if not force and not os.path.exists(path):
            raise InvalidArgumentError(f"Certificate file '{path}' not found")

        self._ssl_client_certificate = path
        return self

    def with_ssl_client_key(self, path: str, force: bool = False) -> "HttpRequest":
        if not force and not os.path.exists(path):
            raise InvalidArgumentError(f"Key file '{path}' not found")

        self._ssl_client_key = path
        return self

    def with_ssl_client_certificate_password(self, password: str) -> "HttpRequest":
        self._ssl_client_certificate_password = password
        return self

    def with_ssl_client_key_password(self, password: str) -> "HttpRequest":
        self._ssl_client_key_password = password
        return self

    # Execution

    def run(self) -> HttpResponse:
        """Execute the request and classify the outcome.

        Returns:
            HttpResponse: The response, for any status below 400.

        Raises:
            ResponseErrorException: The server answered with a 4xx or 5xx status.
            UnresolvableHostException: The host name could not be resolved.
            SslCertificateException: The TLS handshake or certificate check failed.
            ConnectionException: The connection failed or broke off.
            HttpClientException: Any other transport failure.
            OSError: A streamed body source failed to read.
        """
        url = append_query(self._url, self._query)

        self.with_transfer_option(TransferOption.URL, url)
        self.with_transfer_option(TransferOption.OK_STATUSES, Status.ERROR_CODES)
        self.with_transfer_option(TransferOption.FAIL_ON_ERROR, False)

        if self._body is not None and self._method in self.METHODS_WITH_BODY:
            self._prepare_body()

        collector = HeaderCollector()
        self.with_transfer_option(TransferOption.HTTP_HEADER, self._headers.lines())
        self.with_transfer_option(TransferOption.HEADER_FUNCTION, collector)
        self._prepare_ssl_client_auth()

        logger.debug(f"Request: {self._method} {url}")
        logger.debug(f"HEADERS: {redact_headers(self._headers.lines())}")

        executor = self._executor or HttpxTransferExecutor()
        result = executor.execute(self._options)

        response = HttpResponse(result.status_code, result.body, collector.headers)

        return self._classify(url, response, result)

    def _prepare_body(self) -> None:
        body = self._body
        length: Optional[int]

        if isinstance(body, FormData):
            body.seal()
            length = body.content_length

            self.with_transfer_option(TransferOption.CUSTOM_REQUEST, self._method)
            self.with_transfer_option(TransferOption.UPLOAD)
            self.with_transfer_option(TransferOption.READ_FUNCTION, body.read)
            self.with_content_type(body.content_type)
            logger.debug(f"Streaming multipart body ({length if length is not None else 'unknown'} bytes)")
        elif is_stream(body):
            length = stream_size(body)

            self.with_transfer_option(TransferOption.IN_FILE, body)
            self.with_transfer_option(TransferOption.IN_FILE_SIZE, length)
            self.with_transfer_option(TransferOption.UPLOAD)
            self.with_transfer_option(TransferOption.CUSTOM_REQUEST, self._method)
            logger.debug(f"Streaming body ({length if length is not None else 'unknown'} bytes)")
        else:
            encoded = self.get_encoded_body()
            data = encoded if isinstance(encoded, bytes) else str(encoded).encode("utf-8")
            length = len(data)

            self.with_transfer_option(TransferOption.POST_FIELDS, data)
            logger.debug(f"Sending buffered body ({length} bytes)")

        if length is not None and not self.has_header(self.HEADER_CONTENT_LENGTH):
            self.with_header(self.HEADER_CONTENT_LENGTH, length, True)

    def _prepare_ssl_client_auth(self) -> None:
        if self._ssl_client_certificate:
            self.with_transfer_option(TransferOption.SSL_CERT, self._ssl_client_certificate)

            if self._ssl_client_certificate_password:
                self.with_transfer_option(
                    TransferOption.SSL_CERT_PASSWORD, self._ssl_client_certificate_password
                )

        if self._ssl_client_key:
            self.with_transfer_option(TransferOption.SSL_KEY, self._ssl_client_key)

            if self._ssl_client_key_password:
                self.with_transfer_option(TransferOption.SSL_KEY_PASSWORD, self._ssl_client_key_password)

    def _classify(self, url: str, response: HttpResponse, result: TransferResult) -> HttpResponse:
        error_code = int(result.error_code)
        status_code = response.status_code

        if error_code == TransferError.OK and status_code // 100 <= 3:
            return response

        message = result.error_message or "none"
        logger.debug(f"Request failed: status {status_code}, transfer error {error_code} ({message})")

        if error_code == TransferError.OK:
            raise ResponseErrorException(response)

        if error_code == TransferError.COULDNT_RESOLVE_HOST:
            raise UnresolvableHostException(url, message, error_code)

        if error_code in SSL_ERRORS:
            raise SslCertificateException(f"SSL connection failed: {message}", error_code)

        if error_code in CONNECTION_ERRORS:
            raise ConnectionException(f"Unable to connect to remote server: {message}", error_code)

        raise HttpClientException(
            f"Request failed with status {status_code} (transfer error {error_code}: {message})",
            error_code,
        )

    def __repr__(self) -> str:
        return f"<HttpRequest [{self._method} {self._url}]>"
