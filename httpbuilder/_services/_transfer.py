from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, Optional, Protocol, Union


class TransferOption(str, Enum):
    """Named options handed to a :class:`TransferExecutor`."""

    URL = "url"
    POST = "post"
    CUSTOM_REQUEST = "custom_request"
    HTTP_HEADER = "http_header"
    POST_FIELDS = "post_fields"
    UPLOAD = "upload"
    IN_FILE = "in_file"
    IN_FILE_SIZE = "in_file_size"
    READ_FUNCTION = "read_function"
    HEADER_FUNCTION = "header_function"
    OK_STATUSES = "ok_statuses"
    FAIL_ON_ERROR = "fail_on_error"
    FOLLOW_LOCATION = "follow_location"
    TIMEOUT = "timeout"
    CONNECT_TIMEOUT = "connect_timeout"
    BINARY_TRANSFER = "binary_transfer"
    SSL_CERT = "ssl_cert"
    SSL_CERT_PASSWORD = "ssl_cert_password"
    SSL_KEY = "ssl_key"
    SSL_KEY_PASSWORD = "ssl_key_password"
    VERIFY_PEER = "verify_peer"


class TransferError(IntEnum):
    """Transport-level error codes, numbered like libcurl's ``CURLcode``."""

    OK = 0
    UNSUPPORTED_PROTOCOL = 1
    FAILED_INIT = 2
    URL_MALFORMAT = 3
    COULDNT_RESOLVE_PROXY = 5
    COULDNT_RESOLVE_HOST = 6
    COULDNT_CONNECT = 7
    HTTP_RETURNED_ERROR = 22
    WRITE_ERROR = 23
    READ_ERROR = 26
    OPERATION_TIMEDOUT = 28
    SSL_CONNECT_ERROR = 35
    TOO_MANY_REDIRECTS = 47
    SSL_PEER_CERTIFICATE = 51
    GOT_NOTHING = 52
    SSL_ENGINE_NOTFOUND = 53
    SSL_ENGINE_SETFAILED = 54
    SEND_ERROR = 55
    RECV_ERROR = 56
    SSL_CERTPROBLEM = 58
    SSL_CIPHER = 59
    SSL_CACERT = 60
    BAD_CONTENT_ENCODING = 61
    SSL_CACERT_BADFILE = 77
    SSL_PINNEDPUBKEYNOTMATCH = 90
    UNKNOWN = 999


SSL_ERRORS = frozenset(
    {
        TransferError.SSL_CONNECT_ERROR,
        TransferError.SSL_CACERT,
        TransferError.SSL_CACERT_BADFILE,
        TransferError.SSL_CERTPROBLEM,
        TransferError.SSL_CIPHER,
        TransferError.SSL_ENGINE_NOTFOUND,
        TransferError.SSL_ENGINE_SETFAILED,
        TransferError.SSL_PEER_CERTIFICATE,
        TransferError.SSL_PINNEDPUBKEYNOTMATCH,
    }
)

CONNECTION_ERRORS = frozenset(
    {
        TransferError.COULDNT_CONNECT,
        TransferError.TOO_MANY_REDIRECTS,
        TransferError.GOT_NOTHING,
        TransferError.FAILED_INIT,
        TransferError.READ_ERROR,
        TransferError.RECV_ERROR,
    }
)

TransferOptions = Dict[Union[TransferOption, str], Any]


@dataclass
class TransferResult:
    status_code: int = 0
    body: bytes = b""
    error_code: int = TransferError.OK
    error_message: str = ""

    @property
    def ok(self) -> bool:
        return self.error_code == TransferError.OK


class TransferExecutor(Protocol):
    """Performs one blocking exchange from a fully resolved option set."""

    def execute(self, options: TransferOptions) -> TransferResult: ...


def header_line(name: str, value: str) -> bytes:
    return f"{name}: {value}\r\n".encode("latin-1", errors="replace")


def status_line(http_version: str, status_code: int, reason: Optional[str]) -> bytes:
    return f"{http_version} {status_code} {reason or ''}".rstrip().encode("latin-1") + b"\r\n"
