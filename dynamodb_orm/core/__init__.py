"""
Core infrastructure shared by all models:
- Marshaler: attribute codec between native records and DynamoDB items
- ComparisonOperator: where() symbols -> DynamoDB comparison operators
- DynamoDbClientService: the process-wide store client + codec
"""

from .client_service import DynamoDbClientService, map_dynamodb_error
from .comparison_operator import ComparisonOperator
from .marshaler import Marshaler, marshal, unmarshal

__all__ = [
    "ComparisonOperator",
    "DynamoDbClientService",
    "Marshaler",
    "map_dynamodb_error",
    "marshal",
    "unmarshal",
]
