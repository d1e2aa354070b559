"""Custom exceptions for chain access, metadata and sale tracking."""

from __future__ import annotations


class NftSalesError(Exception):
    """Base exception for sale tracking errors."""

    pass


class MissingRequiredConfigError(NftSalesError):
    """Raised when a required configuration value is missing."""

    pass


class HttpRequestError(NftSalesError):
    """Raised when an HTTP request fails after retries."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.cause = cause


# JSON-RPC 2.0 reserves -32000..-32099 for implementation-defined server errors.
_SERVER_ERROR_RANGE = range(-32099, -31999)
_INTERNAL_ERROR = -32603


class RpcError(NftSalesError):
    """Raised when a JSON-RPC response carries an error object."""

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        method: str | None = None,
        data: object | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.method = method
        self.data = data

    @property
    def is_retriable(self) -> bool:
        """True for server-class errors (node overloaded, internal error, limits)."""
        if self.code is None:
            return False
        return self.code in _SERVER_ERROR_RANGE or self.code == _INTERNAL_ERROR


class ReceiptFetchError(NftSalesError):
    """Raised when a transaction or receipt could not be fetched after all retries."""

    def __init__(
        self,
        message: str,
        *,
        transaction_hash: str,
        attempts: int,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.transaction_hash = transaction_hash
        self.attempts = attempts
        self.cause = cause


class SubscriptionError(NftSalesError):
    """Raised when the Transfer subscription cannot be established. Fatal at startup."""

    pass
