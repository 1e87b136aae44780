"""HTTP request builder and executor for Python.

This package builds HTTP requests fluently, encodes their bodies according to
the content type (form, JSON, plain text or streaming multipart), runs the
transfer over httpx and turns the outcome into a typed response or a typed
exception.

The main entry point is the HttpClient class, which hands out request
builders bound to a base URL and transport configuration.

Example:
```python
    # Optionally set these environment variables:
    # export HTTPBUILDER_BASE_URL="https://api.example.com"
    # export HTTPBUILDER_TIMEOUT="10"

    from httpbuilder import FormData, HttpClient
    client = HttpClient()

    form = FormData({"description": "Quarterly report"})
    form.add_file("report", open("report.pdf", "rb"), "application/pdf")

    response = client.post("/uploads", form).run()
    print(response.status_code, response.get_parsed_body())
```
"""

from ._config import Config
from ._http_client import HttpClient
from .models import (
    ConnectionException,
    FormData,
    HeaderBag,
    HttpClientException,
    HttpRequest,
    HttpResponse,
    InvalidArgumentError,
    InvalidStateError,
    ParseError,
    ResponseErrorException,
    SslCertificateException,
    Status,
    UnresolvableHostException,
    UnsupportedPartTypeError,
)

__all__ = [
    "Config",
    "ConnectionException",
    "FormData",
    "HeaderBag",
    "HttpClient",
    "HttpClientException",
    "HttpRequest",
    "HttpResponse",
    "InvalidArgumentError",
    "InvalidStateError",
    "ParseError",
    "ResponseErrorException",
    "SslCertificateException",
    "Status",
    "UnresolvableHostException",
    "UnsupportedPartTypeError",
]
