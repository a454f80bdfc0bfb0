"""
Domain-Specific Exceptions for DynamoDB models

Organized by category:
1. Query Building Errors (raised before any store round trip)
2. Key Resolution Errors
3. Store Errors (raised by the client service, mapped from botocore)
"""

from typing import Any, Dict, Optional

from .base import DynamoDbOrmError


# =============================================================================
# Query Building Errors
# =============================================================================

class UnsupportedFeatureError(DynamoDbOrmError):
    """Raised when a query uses a feature DynamoDB models cannot express.

    Used for:
    - A boolean other than "and" in where()
    - Callables passed as the where() field or value (sub-queries)
    - An empty mapping passed as the where() field
    """


class UnsupportedOperatorError(DynamoDbOrmError):
    """Raised when a comparison symbol has no DynamoDB operator."""

    def __init__(self, operator: Any, original_error: Optional[Exception] = None):
        """Initialize unsupported operator error.

        Args:
            operator: The unrecognized comparison symbol
            original_error: The original exception that caused this error
        """
        self.operator = operator
        super().__init__(
            f"Unsupported comparison operator: {operator!r}",
            original_error,
            {'operator': operator}
        )


# =============================================================================
# Key Resolution Errors
# =============================================================================

class InvalidKeyError(DynamoDbOrmError):
    """Raised when an identity value cannot be turned into a DynamoDB key.

    Used for:
    - Composite keys missing one of the declared key fields
    - Scalar ids given to a model declaring a composite key
    - Mapping ids missing the declared primary key
    """

    def __init__(self, message: str, model: Optional[str] = None, key: Any = None):
        """Initialize invalid key error.

        Args:
            message: Human-readable error message
            model: Name of the model class the key was resolved for
            key: The offending identity value
        """
        self.model = model
        self.key = key
        super().__init__(message, context={'model': model, 'key': key})


# =============================================================================
# Store Errors
# =============================================================================

class StoreError(DynamoDbOrmError):
    """Raised when a DynamoDB request fails.

    Reads, deletes, scans and queries propagate it to the caller.
    DynamoDbModel.save() catches it and returns False instead.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        table_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """Initialize store error.

        Args:
            message: Human-readable error message
            operation: The DynamoDB operation that failed (e.g., "GetItem")
            table_name: The DynamoDB table name
            original_error: The original exception that caused this error
            context: Additional context information
        """
        self.operation = operation
        self.table_name = table_name
        super().__init__(message, original_error, {**(context or {}), 'operation': operation, 'table_name': table_name})


class ConflictError(StoreError):
    """Raised when a conditional check or transaction conflict rejects a write."""


class NotFoundError(StoreError):
    """Raised when a table or index addressed by a request does not exist."""


class RetryableError(StoreError):
    """Raised for throttling and temporary service failures.

    No retry happens at this layer; callers decide on a retry policy.
    """


class ConnectionError(StoreError):
    """Raised when DynamoDB cannot be reached or the caller cannot be authenticated.

    Used for:
    - Network connectivity issues
    - Authentication/authorization failures
    - Invalid endpoint configurations
    - Unknown error codes
    """


class RequestValidationError(StoreError):
    """Raised when DynamoDB rejects a request as malformed."""
