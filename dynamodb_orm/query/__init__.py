from .filters import NOT_GIVEN, FilterBuilder, FilterClause
from .planner import Operation, QueryPlan, find_index_key, plan_query

__all__ = [
    "NOT_GIVEN",
    "FilterBuilder",
    "FilterClause",
    "Operation",
    "QueryPlan",
    "find_index_key",
    "plan_query",
]
