"""
pytest configuration and fixtures.
"""

from typing import Callable, Iterable, List, Optional, Tuple

import httpx
import pytest

from httpbuilder import HttpClient
from httpbuilder._config import Config
from httpbuilder._services import (
    HttpxTransferExecutor,
    TransferOption,
    TransferOptions,
    TransferResult,
)

BASE_URL = "https://api.example.com"

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingExecutor:
    """Executor double that records the options it receives.

    Streamed bodies are drained the way a real transport would, and the
    configured response headers are fed to the header callback.
    """

    def __init__(
        self,
        result: Optional[TransferResult] = None,
        headers: Iterable[Tuple[str, str]] = (),
    ) -> None:
        self.result = result or TransferResult(status_code=200, body=b"")
        self.headers = list(headers)
        self.calls: List[TransferOptions] = []
        self.uploaded = b""

    def execute(self, options: TransferOptions) -> TransferResult:
        self.calls.append(dict(options))

        read = options.get(TransferOption.READ_FUNCTION)
        if read is None and options.get(TransferOption.IN_FILE) is not None:
            read = options[TransferOption.IN_FILE].read

        if read is not None:
            chunks = []
            while True:
                chunk = read(1024)
                if not chunk:
                    break
                chunks.append(chunk)
            self.uploaded = b"".join(chunks)

        header_function = options.get(TransferOption.HEADER_FUNCTION)
        if header_function is not None:
            header_function(f"HTTP/1.1 {self.result.status_code} \r\n".encode())
            for name, value in self.headers:
                header_function(f"{name}: {value}\r\n".encode())
            header_function(b"\r\n")

        return self.result

    @property
    def options(self) -> TransferOptions:
        return self.calls[-1]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep client configuration independent of the developer's environment."""
    for name in ("HTTPBUILDER_BASE_URL", "HTTPBUILDER_TIMEOUT", "HTTPBUILDER_DISABLE_SSL_VERIFY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def recording_executor() -> Callable[..., RecordingExecutor]:
    """Factory for executor doubles with a canned result."""
    return RecordingExecutor


@pytest.fixture
def mock_executor() -> Callable[[Handler], HttpxTransferExecutor]:
    """Factory for the httpx executor backed by ``httpx.MockTransport``."""

    def factory(handler: Handler, **config: object) -> HttpxTransferExecutor:
        return HttpxTransferExecutor(Config(**config), transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def mock_client() -> Callable[[Handler], HttpClient]:
    """Factory for a client rooted at ``BASE_URL`` whose transfers hit ``handler``."""

    def factory(handler: Handler) -> HttpClient:
        return HttpClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))

    return factory
