from ._transfer import (
    CONNECTION_ERRORS,
    SSL_ERRORS,
    TransferError,
    TransferExecutor,
    TransferOption,
    TransferOptions,
    TransferResult,
)
from .httpx_executor import HttpxTransferExecutor, transfer_error_for

__all__ = [
    "CONNECTION_ERRORS",
    "SSL_ERRORS",
    "HttpxTransferExecutor",
    "TransferError",
    "TransferExecutor",
    "TransferOption",
    "TransferOptions",
    "TransferResult",
    "transfer_error_for",
]
