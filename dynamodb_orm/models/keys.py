"""
Key Resolver

Turns an identity value (scalar id or mapping for composite keys) into a
marshaled DynamoDB Key.
"""

from collections.abc import Mapping
from typing import Any, Dict, Optional, Type

from ..core.marshaler import Marshaler
from ..exceptions import InvalidKeyError
from .meta import ModelMeta


def resolve_key(
    meta: Type[ModelMeta],
    key_value: Any,
    marshaler: Marshaler,
    model_name: Optional[str] = None
) -> Dict[str, Dict[str, Any]]:
    """Build a DynamoDB key from an identity value.

    Args:
        meta: The model's Meta class
        key_value: Scalar primary key value, or a mapping of key field -> value
        marshaler: Codec used to encode each key value
        model_name: Model class name for error context

    Returns:
        Key map ordered as the model declares its key fields

    Raises:
        InvalidKeyError: If a mapping misses a key field, a scalar is given
            for a composite key, or the value is None

    Examples:
        >>> resolve_key(UserMeta, "a1", marshaler)
        {'id': {'S': 'a1'}}

        >>> resolve_key(RunMeta, {"run_id": "r1", "pipeline_id": "p1"}, marshaler)
        {'pipeline_id': {'S': 'p1'}, 'run_id': {'S': 'r1'}}
    """
    key_fields = meta.get_key_fields()

    if isinstance(key_value, Mapping):
        missing = [field for field in key_fields if key_value.get(field) is None]
        if missing:
            raise InvalidKeyError(f"Missing key field(s) {missing}", model_name, dict(key_value))
        return {field: marshaler.marshal_value(key_value[field]) for field in key_fields}

    if meta.is_composite():
        raise InvalidKeyError(
            f"Composite key {key_fields} requires a mapping, got {type(key_value).__name__}",
            model_name,
            key_value
        )
    if key_value is None:
        raise InvalidKeyError(f"Missing value for primary key '{meta.primary_key}'", model_name)

    return {meta.primary_key: marshaler.marshal_value(key_value)}
