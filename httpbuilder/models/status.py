from enum import Enum, IntEnum
from typing import Optional


class StatusClass(str, Enum):
    INFORMATIONAL = "informational"
    SUCCESS = "success"
    REDIRECTION = "redirection"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"


class Status(IntEnum):
    """HTTP status codes known to the client, including common non-standard ones.

    Examples:
        >>> Status.NOT_FOUND.phrase
        'Not Found'
        >>> Status.get_header_line(200)
        'HTTP/1.1 200 OK'
        >>> Status.is_error_code(503)
        True
    """

    CONTINUE = 100
    SWITCHING_PROTOCOLS = 101
    PROCESSING = 102
    EARLY_HINTS = 103

    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NON_AUTHORITATIVE_INFORMATION = 203
    NO_CONTENT = 204
    RESET_CONTENT = 205
    PARTIAL_CONTENT = 206
    MULTI_STATUS = 207
    ALREADY_REPORTED = 208
    IM_USED = 226

    MULTIPLE_CHOICES = 300
    MOVED_PERMANENTLY = 301
    FOUND = 302
    SEE_OTHER = 303
    NOT_MODIFIED = 304
    USE_PROXY = 305
    SWITCH_PROXY = 306
    TEMPORARY_REDIRECT = 307
    PERMANENT_REDIRECT = 308

    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    PAYMENT_REQUIRED = 402
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    NOT_ACCEPTABLE = 406
    PROXY_AUTHENTICATION_REQUIRED = 407
    REQUEST_TIMEOUT = 408
    CONFLICT = 409
    GONE = 410
    LENGTH_REQUIRED = 411
    PRECONDITION_FAILED = 412
    PAYLOAD_TOO_LARGE = 413
    URI_TOO_LONG = 414
    UNSUPPORTED_MEDIA_TYPE = 415
    RANGE_NOT_SATISFIABLE = 416
    EXPECTATION_FAILED = 417
    IM_A_TEAPOT = 418
    PAGE_EXPIRED = 419  # Laravel
    MISDIRECTED_REQUEST = 421
    UNPROCESSABLE_ENTITY = 422
    LOCKED = 423
    FAILED_DEPENDENCY = 424
    UPGRADE_REQUIRED = 426
    PRECONDITION_REQUIRED = 428
    TOO_MANY_REQUESTS = 429
    REQUEST_HEADER_FIELDS_TOO_LARGE = 431
    UNAVAILABLE_FOR_LEGAL_REASONS = 451
    REQUEST_HEADER_TOO_LARGE = 494  # nginx
    HTTP_REQUEST_SENT_TO_HTTPS_PORT = 497  # nginx
    CLIENT_CLOSED_REQUEST = 499  # nginx

    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504
    HTTP_VERSION_NOT_SUPPORTED = 505
    VARIANT_ALSO_NEGOTIATES = 506
    INSUFFICIENT_STORAGE = 507
    LOOP_DETECTED = 508
    BANDWIDTH_LIMIT_EXCEEDED = 509
    NOT_EXTENDED = 510
    NETWORK_AUTHENTICATION_REQUIRED = 511
    INVALID_SSL_CERTIFICATE = 526  # Cloudflare
    SITE_IS_FROZEN = 530  # Pantheon
    NETWORK_READ_TIMEOUT_ERROR = 598

    @property
    def phrase(self) -> str:
        return _MESSAGES.get(self.value, "")

    @classmethod
    def get_message(cls, code: int) -> str:
        """Reason phrase for ``code``, or an empty string if it is unknown."""
        return _MESSAGES.get(int(code), "")

    @classmethod
    def get_header_line(cls, code: int, http_version: float = 1.1) -> str:
        return f"HTTP/{http_version} {int(code)} {cls.get_message(code)}"

    @classmethod
    def is_error_code(cls, code: int) -> bool:
        return isinstance(code, int) and code >= cls.BAD_REQUEST

    @classmethod
    def is_webdav(cls, code: int) -> bool:
        return code in WEBDAV_CODES

    @classmethod
    def classify(cls, code: int) -> Optional[StatusClass]:
        for codes, status_class in _CLASSES:
            if code in codes:
                return status_class
        return None


_MESSAGES = {
    100: "Continue",
    101: "Switching Protocols",
    102: "Processing",
    103: "Early Hints",
    200: "OK",
    201: "Created",
    202: "Accepted",
    203: "Non-Authoritative Information",
    204: "No Content",
    205: "Reset Content",
    206: "Partial Content",
    207: "Multi-Status",
    208: "Already Reported",
    226: "IM Used",
    300: "Multiple Choices",
    301: "Moved Permanently",
    302: "Found",
    303: "See Other",
    304: "Not Modified",
    305: "Use Proxy",
    306: "Switch Proxy",
    307: "Temporary Redirect",
    308: "Permanent Redirect",
    400: "Bad Request",
    401: "Unauthorized",
    402: "Payment Required",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    406: "Not Acceptable",
    407: "Proxy Authentication Required",
    408: "Request Timeout",
    409: "Conflict",
    410: "Gone",
    411: "Length Required",
    412: "Precondition Failed",
    413: "Request Entity Too Large",
    414: "Request-URI Too Long",
    415: "Unsupported Media Type",
    416: "Requested Range Not Satisfiable",
    417: "Expectation Failed",
    418: "I'm a teapot",
    419: "Page Expired",
    421: "Misdirected Request",
    422: "Unprocessable Entity",
    423: "Locked",
    424: "Failed Dependency",
    426: "Upgrade Required",
    428: "Precondition Required",
    429: "Too Many Requests",
    431: "Request Header Fields Too Large",
    451: "Unavailable For Legal Reasons",
    494: "Request Header Too Large",
    497: "HTTP Request Sent to HTTPS Port",
    499: "Client Closed Request",
    500: "Internal Server Error",
    501: "Not Implemented",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Timeout",
    505: "HTTP Version Not Supported",
    506: "Variant Also Negotiates",
    507: "Insufficient Storage",
    508: "Loop Detected",
    509: "Bandwidth Limit Exceeded",
    510: "Not Extended",
    511: "Network Authentication Required",
    526: "Invalid SSL Certificate",
    530: "Site is frozen",
    598: "Network read timeout error",
}

INFORMATIONAL_CODES = frozenset(
    {
        Status.CONTINUE,
        Status.SWITCHING_PROTOCOLS,
        Status.PROCESSING,
        Status.EARLY_HINTS,
    }
)

SUCCESS_CODES = frozenset(
    {
        Status.OK,
        Status.CREATED,
        Status.ACCEPTED,
        Status.NON_AUTHORITATIVE_INFORMATION,
        Status.NO_CONTENT,
        Status.RESET_CONTENT,
        Status.PARTIAL_CONTENT,
        Status.MULTI_STATUS,
        Status.ALREADY_REPORTED,
        Status.IM_USED,
    }
)

REDIRECTION_CODES = frozenset(
    {
        Status.MULTIPLE_CHOICES,
        Status.MOVED_PERMANENTLY,
        Status.FOUND,
        Status.SEE_OTHER,
        Status.NOT_MODIFIED,
        Status.USE_PROXY,
        Status.SWITCH_PROXY,
        Status.TEMPORARY_REDIRECT,
        Status.PERMANENT_REDIRECT,
    }
)

CLIENT_ERROR_CODES = frozenset(code for code in Status if 400 <= code < 500)

SERVER_ERROR_CODES = frozenset(code for code in Status if code >= 500)

ERROR_CODES = CLIENT_ERROR_CODES | SERVER_ERROR_CODES

WEBDAV_CODES = frozenset(
    {
        Status.PROCESSING,
        Status.MULTI_STATUS,
        Status.ALREADY_REPORTED,
        Status.UNPROCESSABLE_ENTITY,
        Status.LOCKED,
        Status.FAILED_DEPENDENCY,
        Status.INSUFFICIENT_STORAGE,
        Status.LOOP_DETECTED,
    }
)

_CLASSES = (
    (INFORMATIONAL_CODES, StatusClass.INFORMATIONAL),
    (SUCCESS_CODES, StatusClass.SUCCESS),
    (REDIRECTION_CODES, StatusClass.REDIRECTION),
    (CLIENT_ERROR_CODES, StatusClass.CLIENT_ERROR),
    (SERVER_ERROR_CODES, StatusClass.SERVER_ERROR),
)

Status.INFORMATIONAL_CODES = INFORMATIONAL_CODES
Status.SUCCESS_CODES = SUCCESS_CODES
Status.REDIRECTION_CODES = REDIRECTION_CODES
Status.CLIENT_ERROR_CODES = CLIENT_ERROR_CODES
Status.SERVER_ERROR_CODES = SERVER_ERROR_CODES
Status.ERROR_CODES = ERROR_CODES
Status.WEBDAV_CODES = WEBDAV_CODES
