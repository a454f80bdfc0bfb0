"""
Filter Builder

Accumulates where() clauses for one model instance. Each clause is stored
per attribute name in DynamoDB's legacy Condition shape:

    {'AttributeValueList': [{'N': '30'}], 'ComparisonOperator': 'GT'}

Only conjunctive ("and") filters are representable, and a later where()
on the same attribute replaces the earlier clause.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from ..core.comparison_operator import ComparisonOperator
from ..core.marshaler import Marshaler
from ..exceptions import UnsupportedFeatureError

logger = logging.getLogger(__name__)


class _NotGiven:
    def __repr__(self) -> str:
        return "NOT_GIVEN"


# Distinguishes where('age', 30) from where('age', 30, None)
NOT_GIVEN: Any = _NotGiven()

_NO_VALUE_OPERATORS = {ComparisonOperator.NULL, ComparisonOperator.NOT_NULL}
_MULTI_VALUE_OPERATORS = {ComparisonOperator.IN, ComparisonOperator.BETWEEN}


class FilterClause(BaseModel):
    """One marshaled condition on a single attribute."""

    attribute_value_list: List[Dict[str, Any]] = Field(default_factory=list, alias='AttributeValueList')
    comparison_operator: ComparisonOperator = Field(..., alias='ComparisonOperator')

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True
    )

    def to_condition(self) -> Dict[str, Any]:
        """Render the clause in the request shape DynamoDB expects."""
        return {
            'AttributeValueList': list(self.attribute_value_list),
            'ComparisonOperator': self.comparison_operator.value,
        }


class FilterBuilder:
    """Per-instance set of where() clauses, keyed by attribute name."""

    def __init__(self, marshaler: Marshaler):
        self.marshaler = marshaler
        self.clauses: Dict[str, FilterClause] = {}

    def __len__(self) -> int:
        return len(self.clauses)

    def __contains__(self, column: str) -> bool:
        return column in self.clauses

    def where(self, column: Any, operator: Any = NOT_GIVEN, value: Any = NOT_GIVEN, boolean: str = 'and') -> None:
        """Add a clause for one attribute.

        Accepted forms:
            where('age', 30)               -> age = 30
            where('age', '>', 30)          -> age > 30
            where('age', 'between', [1, 9])
            where({'name': 'x'})           -> name = 'x' (first pair only)

        An operator that is not a recognized symbol is taken as the value
        and the comparison falls back to equality.

        Raises:
            UnsupportedFeatureError: For a boolean other than "and", a
                callable field or value, or an empty mapping
            TypeError: If no value is given at all
        """
        if boolean != 'and':
            raise UnsupportedFeatureError('Only support "and" in where clause')

        # A mapping of attribute -> value is applied as an equality clause,
        # but only its first pair is used.
        if isinstance(column, Mapping):
            if not column:
                raise UnsupportedFeatureError('Empty mapping in where clause is not supported')
            pairs = list(column.items())
            if len(pairs) > 1:
                dropped = [name for name, _ in pairs[1:]]
                logger.warning(f"where() with a mapping only applies the first pair; ignoring {dropped}")
            first_column, first_value = pairs[0]
            return self.where(first_column, '=', first_value)

        if value is NOT_GIVEN:
            if operator is NOT_GIVEN:
                raise TypeError("where() requires a value to compare against")
            value, operator = operator, '='

        if callable(column):
            raise UnsupportedFeatureError('Closure in where clause is not supported')
        if not isinstance(column, str):
            raise TypeError(f"where() column must be a string, got {type(column).__name__}")

        if not ComparisonOperator.is_valid_operator(operator):
            value, operator = operator, '='

        if callable(value):
            raise UnsupportedFeatureError('Closure in where clause is not supported')

        dynamodb_operator = ComparisonOperator.get_dynamodb_operator(operator)
        self.clauses[column] = FilterClause(
            AttributeValueList=self._encode(dynamodb_operator, value),
            ComparisonOperator=dynamodb_operator
        )

    def to_conditions(self) -> Dict[str, Dict[str, Any]]:
        """All clauses in request shape, in the order they were first added."""
        return {column: clause.to_condition() for column, clause in self.clauses.items()}

    def _encode(self, operator: ComparisonOperator, value: Any) -> List[Dict[str, Any]]:
        if operator in _NO_VALUE_OPERATORS:
            return []
        if operator in _MULTI_VALUE_OPERATORS and isinstance(value, (list, tuple)):
            return [self.marshaler.marshal_value(v) for v in value]
        return [self.marshaler.marshal_value(value)]
