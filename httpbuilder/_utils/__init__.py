from ._logs import logger, redact_headers, setup_logging
from ._ssl_context import (
    create_ssl_context,
    get_httpx_client_kwargs,
    load_client_certificate,
)
from ._streams import is_stream, read_all, stream_size, to_bytes
from ._url import append_query, build_query, hostname_of, resolve_url, split_query
from ._user_agent import header_user_agent, user_agent_value

__all__ = [
    "logger",
    "setup_logging",
    "redact_headers",
    "create_ssl_context",
    "get_httpx_client_kwargs",
    "load_client_certificate",
    "is_stream",
    "read_all",
    "stream_size",
    "to_bytes",
    "append_query",
    "build_query",
    "hostname_of",
    "resolve_url",
    "split_query",
    "header_user_agent",
    "user_agent_value",
]
