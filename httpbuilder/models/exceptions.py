from typing import TYPE_CHECKING, Optional

from .._utils._url import hostname_of

if TYPE_CHECKING:
    from .response import HttpResponse


class HttpClientException(Exception):
    """Base class for every failure classified after a transfer has run.

    ``code`` is the transport's native error code, or the HTTP status code for
    :class:`ResponseErrorException`.
    """

    def __init__(self, message: str, code: int = 0):
        self.message = message
        self.code = int(code)
        super().__init__(self.message)


class ResponseErrorException(HttpClientException):
    """The transfer succeeded but the server answered with a 4xx or 5xx status."""

    def __init__(self, response: "HttpResponse"):
        self.response = response
        body = response.body.decode("utf-8", errors="replace") if response.body else "No content"

        super().__init__(
            f"Request failed with status {response.status_code}: {body}",
            response.status_code,
        )

    @property
    def status_code(self) -> int:
        return self.response.status_code


class UnresolvableHostException(HttpClientException):
    def __init__(self, url: str, message: str = "", code: int = 0):
        self.url = url
        self.hostname: Optional[str] = hostname_of(url)
        self.transport_message = message

        super().__init__(f"Could not resolve host {self.hostname}", code)


class SslCertificateException(HttpClientException):
    pass


class ConnectionException(HttpClientException):
    pass
