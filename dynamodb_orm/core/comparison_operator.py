"""
Comparison Operator Table

Maps the symbols accepted by where() to DynamoDB's legacy
ComparisonOperator names, and fixes which of those DynamoDB may use as a
key condition when the planner turns a filter into a Query.
"""

from enum import Enum
from typing import Any, Dict, FrozenSet

from ..exceptions import UnsupportedOperatorError


class ComparisonOperator(str, Enum):
    """DynamoDB comparison operators (Condition.ComparisonOperator)."""

    EQ = "EQ"
    NE = "NE"
    LT = "LT"
    LE = "LE"
    GT = "GT"
    GE = "GE"
    IN = "IN"
    BETWEEN = "BETWEEN"
    BEGINS_WITH = "BEGINS_WITH"
    CONTAINS = "CONTAINS"
    NOT_CONTAINS = "NOT_CONTAINS"
    NULL = "NULL"
    NOT_NULL = "NOT_NULL"

    @classmethod
    def get_operator_mapping(cls) -> Dict[str, 'ComparisonOperator']:
        """Symbol accepted by where() -> DynamoDB operator."""
        return dict(_OPERATOR_MAPPING)

    @classmethod
    def get_query_supported_operators(cls) -> FrozenSet['ComparisonOperator']:
        """Operators accepted on an index key when running a Query."""
        return _QUERY_SUPPORTED

    @classmethod
    def is_valid_operator(cls, operator: Any) -> bool:
        """Check whether a where() symbol is recognized."""
        return isinstance(operator, str) and operator.lower() in _OPERATOR_MAPPING

    @classmethod
    def get_dynamodb_operator(cls, operator: Any) -> 'ComparisonOperator':
        """Translate a where() symbol to its DynamoDB operator.

        Raises:
            UnsupportedOperatorError: If the symbol is not recognized
        """
        if not cls.is_valid_operator(operator):
            raise UnsupportedOperatorError(operator)
        return _OPERATOR_MAPPING[operator.lower()]

    @classmethod
    def is_valid_query_dynamodb_operator(cls, dynamodb_operator: Any) -> bool:
        """Check whether a DynamoDB operator may be used in KeyConditions."""
        try:
            return cls(dynamodb_operator) in _QUERY_SUPPORTED
        except ValueError:
            return False


_OPERATOR_MAPPING = {
    '=': ComparisonOperator.EQ,
    '>': ComparisonOperator.GT,
    '>=': ComparisonOperator.GE,
    '<': ComparisonOperator.LT,
    '<=': ComparisonOperator.LE,
    '!=': ComparisonOperator.NE,
    '<>': ComparisonOperator.NE,
    'in': ComparisonOperator.IN,
    'between': ComparisonOperator.BETWEEN,
    'begins_with': ComparisonOperator.BEGINS_WITH,
    'contains': ComparisonOperator.CONTAINS,
    'not_contains': ComparisonOperator.NOT_CONTAINS,
    'null': ComparisonOperator.NULL,
    'not_null': ComparisonOperator.NOT_NULL,
}

# Equality and single-bound comparisons only. BETWEEN and BEGINS_WITH stay
# out so a range/prefix filter on an index key is always scanned.
_QUERY_SUPPORTED = frozenset({
    ComparisonOperator.EQ,
    ComparisonOperator.LT,
    ComparisonOperator.LE,
    ComparisonOperator.GT,
    ComparisonOperator.GE,
})
