"""
Model metadata declarations.

Every DynamoDbModel declares its table through a nested Meta class:

    class User(DynamoDbModel):
        class Meta(ModelMeta):
            table_name = "users"
            primary_key = "id"
            index_keys = {"email": "email_index"}
            fillable = ["id", "name", "email"]
"""

from typing import Dict, List, Optional, Type


class ModelMeta:
    """Base class for model metadata definitions."""
    table_name: str = ""
    primary_key: str = "id"
    composite_key: List[str] = []
    index_keys: Dict[str, Optional[str]] = {}
    fillable: List[str] = []

    @classmethod
    def get_key_fields(cls) -> List[str]:
        """Get the attributes that form the item key.

        Composite key fields win over the single primary key when both
        are declared.
        """
        if cls.composite_key:
            return list(cls.composite_key)
        return [cls.primary_key]

    @classmethod
    def is_composite(cls) -> bool:
        return bool(cls.composite_key)

    @classmethod
    def is_fillable(cls, name: str) -> bool:
        """An empty allowlist makes every attribute fillable."""
        return not cls.fillable or name in cls.fillable


def extract_model_meta(model_class: type) -> Type[ModelMeta]:
    """Validate and return a model's Meta class.

    Raises:
        ValueError: If the model lacks a Meta class, a table name, or
            declares its keys with the wrong types
    """
    meta = getattr(model_class, 'Meta', None)
    if meta is None:
        raise ValueError(f"Model {model_class.__name__} must have a Meta class")
    if not getattr(meta, 'table_name', None):
        raise ValueError(f"Model {model_class.__name__}.Meta must define table_name")

    composite_key = getattr(meta, 'composite_key', [])
    if isinstance(composite_key, str):
        raise ValueError(f"Model {model_class.__name__}.Meta.composite_key must be a list of attribute names")
    if not composite_key and not getattr(meta, 'primary_key', None):
        raise ValueError(f"Model {model_class.__name__}.Meta must define primary_key or composite_key")

    if not issubclass(meta, ModelMeta):
        raise ValueError(f"Model {model_class.__name__}.Meta must inherit from ModelMeta")
    return meta
