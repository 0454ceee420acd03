# backend/depotview/services/exceptions.py
"""
Service layer exceptions.

These exceptions carry NO HTTP knowledge. main.py maps them to responses.

Data problems inside the valuation engine (missing quotes, zero quantities,
malformed numbers) are never raised; they degrade to a displayable result.
The exceptions below cover bad requests and upstream failures only.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    │   ├── InvalidSortFieldError
    │   └── InvalidSortDirectionError
    ├── NotFoundError
    │   └── ClientNotFoundError
    ├── TransactionSourceError
    └── MarketDataError
        ├── ProviderUnavailableError
        └── RateLimitError
"""


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when a request parameter is not usable.

    Attributes:
        field: The parameter that failed validation (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidSortFieldError(ValidationError):
    """Raised when a holdings/transactions view is sorted by an unknown field."""

    def __init__(self, sort_field: str, valid_fields: list[str]) -> None:
        self.sort_field = sort_field
        self.valid_fields = valid_fields
        super().__init__(
            f"Invalid sort field: '{sort_field}'. Valid options: {', '.join(valid_fields)}",
            field="sort_by",
        )


class InvalidSortDirectionError(ValidationError):
    """Raised when the sort direction is neither 'asc' nor 'desc'."""

    def __init__(self, direction: str) -> None:
        self.direction = direction
        super().__init__(
            f"Invalid sort direction: '{direction}'. Valid options: asc, desc",
            field="direction",
        )


# =============================================================================
# NOT FOUND ERRORS
# =============================================================================


class NotFoundError(ServiceError):
    """
    Base exception for resource not found errors.

    Attributes:
        resource_type: Type of resource (e.g., "Client")
        resource_id: Identifier of the resource
    """

    def __init__(
            self,
            message: str,
            resource_type: str | None = None,
            resource_id: str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message)


class ClientNotFoundError(NotFoundError):
    """Raised when the statement backend does not know the client (depot)."""

    def __init__(self, client_id: str) -> None:
        self.client_id = client_id
        super().__init__(
            f"Client {client_id} not found",
            resource_type="Client",
            resource_id=client_id,
        )


# =============================================================================
# UPSTREAM ERRORS
# =============================================================================


class TransactionSourceError(ServiceError):
    """
    Raised when transactions cannot be loaded from the statement backend.

    Attributes:
        client_id: Client whose transactions were requested
        reason: Specific reason for failure
    """

    def __init__(self, client_id: str, reason: str) -> None:
        self.client_id = client_id
        self.reason = reason
        super().__init__(f"Could not load transactions for client {client_id}: {reason}")


class MarketDataError(ServiceError):
    """
    Base exception for quote provider failures.

    Attributes:
        provider: Name of the provider that failed
    """

    def __init__(self, message: str, provider: str | None = None) -> None:
        self.provider = provider
        super().__init__(message)


class ProviderUnavailableError(MarketDataError):
    """
    Raised when a quote provider is temporarily unavailable.

    This is a retryable error.
    """

    def __init__(self, provider: str, reason: str) -> None:
        message = f"Provider '{provider}' is unavailable: {reason}"
        super().__init__(message, provider=provider)
        self.reason = reason


class RateLimitError(MarketDataError):
    """
    Raised when the provider's rate limit has been exceeded.

    This is a retryable error (with backoff).

    Attributes:
        retry_after: Seconds to wait before retrying (if known)
    """

    def __init__(self, provider: str, retry_after: int | None = None) -> None:
        message = f"Rate limit exceeded for provider '{provider}'"
        if retry_after:
            message += f" (retry after {retry_after}s)"
        super().__init__(message, provider=provider)
        self.retry_after = retry_after


__all__ = [
    # Base
    "ServiceError",
    # Validation
    "ValidationError",
    "InvalidSortFieldError",
    "InvalidSortDirectionError",
    # Not Found
    "NotFoundError",
    "ClientNotFoundError",
    # Upstream
    "TransactionSourceError",
    "MarketDataError",
    "ProviderUnavailableError",
    "RateLimitError",
]
