"""
Query Planner

Chooses between Scan and Query for a model's accumulated where() clauses.

A Query is planned when the first declared index key (in declaration order)
that has a clause uses a query-eligible operator. In that case the whole
clause set becomes KeyConditions, which DynamoDB only accepts when every
clause targets a key of that index. The whole clause set is also attached
as ScanFilter on both operations.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..core.comparison_operator import ComparisonOperator
from .filters import FilterClause

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    """Store iteration primitives."""

    SCAN = "Scan"
    QUERY = "Query"


class QueryPlan(BaseModel):
    """A Scan or Query request ready for DynamoDbClientService.get_iterator()."""

    operation: Operation = Operation.SCAN
    table_name: str = Field(..., alias='TableName')
    index_name: Optional[str] = Field(None, alias='IndexName')
    key_conditions: Optional[Dict[str, Dict[str, Any]]] = Field(None, alias='KeyConditions')
    scan_filter: Optional[Dict[str, Dict[str, Any]]] = Field(None, alias='ScanFilter')
    attributes_to_get: Optional[List[str]] = Field(None, alias='AttributesToGet')
    limit: Optional[int] = Field(None, alias='Limit')

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True
    )

    def to_request(self) -> Dict[str, Any]:
        """Render the request parameters, omitting unset ones."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude={'operation'})


def find_index_key(index_keys: Mapping[str, Optional[str]], clauses: Mapping[str, FilterClause]) -> Optional[str]:
    """Return the first declared index key that has a where() clause.

    Args:
        index_keys: Index key attribute -> index name, in declaration order
        clauses: Accumulated where() clauses

    Returns:
        The matching attribute name, or None
    """
    if not clauses:
        return None
    for key in index_keys:
        if key in clauses:
            return key
    return None


def plan_query(
    table_name: str,
    index_keys: Mapping[str, Optional[str]],
    clauses: Mapping[str, FilterClause],
    columns: Optional[Sequence[str]] = None,
    limit: int = -1
) -> QueryPlan:
    """
    Build the plan for one get()/all()/first() call.

    Args:
        table_name: Full DynamoDB table name
        index_keys: Index key attribute -> index name; None as index name
            targets the table's own key schema
        clauses: Accumulated where() clauses
        columns: Attributes to return, all when empty
        limit: Maximum number of items, -1 for no limit

    Returns:
        QueryPlan with operation Scan or Query
    """
    plan: Dict[str, Any] = {'table_name': table_name}
    if limit is not None and limit > -1:
        plan['limit'] = limit
    if columns:
        plan['attributes_to_get'] = list(columns)

    if clauses:
        conditions = {column: clause.to_condition() for column, clause in clauses.items()}
        key = find_index_key(index_keys, clauses)
        if key is not None:
            operator = clauses[key].comparison_operator
            if ComparisonOperator.is_valid_query_dynamodb_operator(operator):
                plan['operation'] = Operation.QUERY
                plan['index_name'] = index_keys[key]
                plan['key_conditions'] = conditions
            else:
                logger.debug(f"Operator {operator.value} on index key '{key}' cannot be queried; scanning {table_name}")
        plan['scan_filter'] = conditions

    query_plan = QueryPlan(**plan)
    logger.debug(f"Planned {query_plan.operation.value} on {table_name} (index: {query_plan.index_name})")
    return query_plan
