# Base exception class
from .base import DynamoDbOrmError

from .domain_exceptions import (
    ConflictError,
    ConnectionError,
    InvalidKeyError,
    NotFoundError,
    RequestValidationError,
    RetryableError,
    StoreError,
    UnsupportedFeatureError,
    UnsupportedOperatorError,
)

__all__ = [
    # Base exception
    "DynamoDbOrmError",

    # Query building and key errors
    "InvalidKeyError",
    "UnsupportedFeatureError",
    "UnsupportedOperatorError",

    # Store errors (alphabetically ordered)
    "ConflictError",
    "ConnectionError",
    "NotFoundError",
    "RequestValidationError",
    "RetryableError",
    "StoreError",
]
