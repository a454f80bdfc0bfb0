from .base import MODEL_EVENTS, DynamoDbModel
from .keys import resolve_key
from .meta import ModelMeta, extract_model_meta

__all__ = [
    "DynamoDbModel",
    "MODEL_EVENTS",
    "ModelMeta",
    "extract_model_meta",
    "resolve_key",
]
