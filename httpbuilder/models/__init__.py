from .errors import (
    InvalidArgumentError,
    InvalidStateError,
    ParseError,
    UnsupportedPartTypeError,
)
from .exceptions import (
    ConnectionException,
    HttpClientException,
    ResponseErrorException,
    SslCertificateException,
    UnresolvableHostException,
)
from .form_data import (
    BytesPart,
    CallbackPart,
    FormData,
    FormDataState,
    HandlePart,
    StreamPart,
    make_part,
)
from .message import FrozenHeaderBag, HeaderBag, HttpMessage
from .request import HttpRequest
from .response import HeaderCollector, HttpResponse
from .status import Status, StatusClass

__all__ = [
    "BytesPart",
    "CallbackPart",
    "ConnectionException",
    "FormData",
    "FormDataState",
    "HandlePart",
    "FrozenHeaderBag",
    "HeaderBag",
    "HeaderCollector",
    "HttpClientException",
    "HttpMessage",
    "HttpRequest",
    "HttpResponse",
    "InvalidArgumentError",
    "InvalidStateError",
    "ParseError",
    "ResponseErrorException",
    "SslCertificateException",
    "Status",
    "StatusClass",
    "StreamPart",
    "UnresolvableHostException",
    "UnsupportedPartTypeError",
    "make_part",
]
