from os import environ as env
from typing import Any, Dict, Mapping, Optional

import httpx
from dotenv import load_dotenv
from pydantic import ValidationError

from ._config import Config
from ._services import HttpxTransferExecutor
from ._utils import header_user_agent, resolve_url, setup_logging
from ._utils._ssl_context import ssl_verification_disabled
from ._utils.constants import ENV_BASE_URL, ENV_TIMEOUT
from .models.errors import InvalidArgumentError
from .models.request import HttpRequest

load_dotenv(override=True)


class HttpClient:
    """Entry point that hands out configured :class:`HttpRequest` builders.

    The client owns the base URL and transport settings that would otherwise
    have to be repeated on every request. Values not passed explicitly are
    read from the environment (after loading a ``.env`` file):

    - ``HTTPBUILDER_BASE_URL``
    - ``HTTPBUILDER_TIMEOUT``
    - ``HTTPBUILDER_DISABLE_SSL_VERIFY``

    Example:
        ```python
        from httpbuilder import HttpClient

        client = HttpClient(base_url="https://api.example.com")
        response = client.get("/users", query={"page": 2}).run()
        users = response.get_parsed_body()
        ```
    """

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        verify_ssl: Optional[bool] = None,
        debug: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        base_url_value = base_url if base_url is not None else env.get(ENV_BASE_URL, "")
        timeout_value = timeout if timeout is not None else env.get(ENV_TIMEOUT) or 30.0
        verify_value = verify_ssl if verify_ssl is not None else not ssl_verification_disabled()

        try:
            self._config = Config(
                base_url=base_url_value,
                timeout=timeout_value,  # type: ignore
                verify_ssl=verify_value,
            )
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid client configuration: {e}") from e

        setup_logging(debug)
        self._executor = HttpxTransferExecutor(self._config, transport)

    @property
    def config(self) -> Config:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def executor(self) -> HttpxTransferExecutor:
        return self._executor

    def request(
        self,
        method: str = HttpRequest.METHOD_GET,
        url: str = "/",
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
        body: Any = None,
    ) -> HttpRequest:
        """Build a request bound to this client.

        Args:
            method (str): The HTTP method.
            url (str): Absolute URL, or a path joined onto the base URL.
            query (Optional[Mapping[str, Any]]): Query parameters to add.
            headers (Optional[Mapping[str, Any]]): Headers to set, replacing the defaults.
            body (Any): Request body, ignored for methods that can't carry one.

        Returns:
            HttpRequest: The configured, not yet executed, request.

        Raises:
            InvalidArgumentError: If ``method`` is not supported.
        """
        request = HttpRequest(method, resolve_url(self._config.base_url, url), self._executor)
        request.with_headers(self.default_headers)

        if query:
            request.with_params(query)

        if headers:
            request.with_headers(headers)

        if body is not None and request.method in HttpRequest.METHODS_WITH_BODY:
            request.with_body(body)

        return request

    def get(
        self,
        url: str = "/",
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ) -> HttpRequest:
        return self.request(HttpRequest.METHOD_GET, url, query, headers)

    def delete(
        self,
        url: str = "/",
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ) -> HttpRequest:
        return self.request(HttpRequest.METHOD_DELETE, url, query, headers)

    def head(
        self,
        url: str = "/",
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ) -> HttpRequest:
        return self.request(HttpRequest.METHOD_HEAD, url, query, headers)

    def post(
        self,
        url: str = "/",
        body: Any = None,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ) -> HttpRequest:
        return self.request(HttpRequest.METHOD_POST, url, query, headers, body)

    def put(
        self,
        url: str = "/",
        body: Any = None,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ) -> HttpRequest:
        return self.request(HttpRequest.METHOD_PUT, url, query, headers, body)

    def patch(
        self,
        url: str = "/",
        body: Any = None,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ) -> HttpRequest:
        return self.request(HttpRequest.METHOD_PATCH, url, query, headers, body)

    @property
    def default_headers(self) -> Dict[str, str]:
        return {**header_user_agent()}
