"""
DynamoDB ORM

Active Record style model classes for DynamoDB tables: find, all, first, where,
save, update, create and delete, built on boto3 and Pydantic.
"""

from .config import DynamoDBConfig
from .core import (
    ComparisonOperator,
    DynamoDbClientService,
    Marshaler,
    map_dynamodb_error,
    marshal,
    unmarshal,
)
from .exceptions import (
    ConflictError,
    ConnectionError,
    DynamoDbOrmError,
    InvalidKeyError,
    NotFoundError,
    RequestValidationError,
    RetryableError,
    StoreError,
    UnsupportedFeatureError,
    UnsupportedOperatorError,
)
from .models import DynamoDbModel, ModelMeta, resolve_key
from .query import FilterBuilder, FilterClause, Operation, QueryPlan, plan_query

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "DynamoDBConfig",

    # Exceptions
    "ConflictError",
    "ConnectionError",
    "DynamoDbOrmError",
    "InvalidKeyError",
    "NotFoundError",
    "RequestValidationError",
    "RetryableError",
    "StoreError",
    "UnsupportedFeatureError",
    "UnsupportedOperatorError",

    # Core
    "ComparisonOperator",
    "DynamoDbClientService",
    "Marshaler",
    "map_dynamodb_error",
    "marshal",
    "unmarshal",

    # Query building
    "FilterBuilder",
    "FilterClause",
    "Operation",
    "QueryPlan",
    "plan_query",

    # Models
    "DynamoDbModel",
    "ModelMeta",
    "resolve_key",
]
