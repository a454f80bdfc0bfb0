"""
DynamoDB Model

Active Record style model classes backed by DynamoDB tables:

    class User(DynamoDbModel):
        class Meta(ModelMeta):
            table_name = "users"
            index_keys = {"age": "age_index"}
            fillable = ["id", "name", "age"]

    User.create({"id": "a1", "name": "x", "age": 30})
    user = User.find("a1")
    adults = User.where("age", ">=", 18).where("name", "begins_with", "a").get()
    user.update({"name": "y"})
    user.delete()

Instance lifecycle: new -> hydrated (find/get) -> persisted (save) ->
deleted (delete; the instance stays usable but is no longer store-backed).

All models share one DynamoDbClientService, installed by the application
with DynamoDbModel.set_client_service() or passed to the first model
constructed. Without either, a service is built from the environment.
"""

import logging
import types
from decimal import DecimalException
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Sequence, Type

from ..core.client_service import DynamoDbClientService
from ..core.marshaler import Marshaler
from ..exceptions import StoreError
from ..query.filters import NOT_GIVEN, FilterBuilder, FilterClause
from ..query.planner import QueryPlan, plan_query
from .keys import resolve_key
from .meta import ModelMeta, extract_model_meta

logger = logging.getLogger(__name__)

MODEL_EVENTS = ('creating', 'saved', 'deleted')


class class_or_instance_method:
    """Bind to the instance when called on one, to the class otherwise."""

    def __init__(self, func: Callable):
        self.__func__ = func
        self.__doc__ = func.__doc__

    def __get__(self, instance, owner):
        return types.MethodType(self.__func__, owner if instance is None else instance)


class DynamoDbModel:
    """Base class for models stored in a DynamoDB table."""

    Meta: Type[ModelMeta] = ModelMeta

    # Shared by every model class; always read and written on DynamoDbModel
    _dynamo_db: Optional[DynamoDbClientService] = None

    _event_observers: Dict[str, List[Callable]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._event_observers = {}

    def __init__(self, attributes: Optional[Mapping] = None, dynamo_db: Optional[DynamoDbClientService] = None):
        """Initialize a model.

        Args:
            attributes: Initial attribute values, filtered by Meta.fillable
            dynamo_db: Client service to share, used only if none is installed yet
        """
        object.__setattr__(self, '_attributes', {})
        object.__setattr__(self, '_exists', False)

        if DynamoDbModel._dynamo_db is None:
            DynamoDbModel._dynamo_db = dynamo_db if dynamo_db is not None else DynamoDbClientService()

        self._filters = FilterBuilder(self.marshaler)
        if attributes:
            self.fill(attributes)

    # ------------------------------------------------------------------
    # Client service
    # ------------------------------------------------------------------

    @classmethod
    def set_client_service(cls, dynamo_db: DynamoDbClientService) -> None:
        """Install the client service shared by all models."""
        DynamoDbModel._dynamo_db = dynamo_db

    @classmethod
    def reset_client_service(cls) -> None:
        DynamoDbModel._dynamo_db = None

    @property
    def dynamo_db(self) -> DynamoDbClientService:
        return DynamoDbModel._dynamo_db

    @property
    def client(self):
        """The boto3 DynamoDB client."""
        return self.dynamo_db.client

    @property
    def marshaler(self) -> Marshaler:
        return self.dynamo_db.marshaler

    def marshal_item(self, item: Mapping) -> Dict[str, Dict[str, Any]]:
        """Marshal a native record to a DynamoDB item."""
        return self.marshaler.marshal_item(item)

    def unmarshal_item(self, item: Mapping) -> Dict[str, Any]:
        """Unmarshal a DynamoDB item to a native record."""
        return self.marshaler.unmarshal_item(item)

    # ------------------------------------------------------------------
    # Metadata and keys
    # ------------------------------------------------------------------

    @classmethod
    def get_meta(cls) -> Type[ModelMeta]:
        return extract_model_meta(cls)

    def get_table(self) -> str:
        """Full table name, including the configured prefix."""
        return self.dynamo_db.get_table_name(self.get_meta().table_name)

    def get_key_name(self) -> str:
        return self.get_meta().primary_key

    def get_key(self) -> Any:
        """Value of the primary key attribute."""
        return self.get_attribute(self.get_key_name())

    def get_key_as_dict(self) -> Dict[str, Any]:
        """Current values of every key field (composite or single)."""
        return {field: self.get_attribute(field) for field in self.get_meta().get_key_fields()}

    def get_model_key(self, key_value: Any) -> Dict[str, Dict[str, Any]]:
        """Marshaled DynamoDB key for a scalar id or a key mapping."""
        return resolve_key(self.get_meta(), key_value, self.marshaler, type(self).__name__)

    def _has_identity(self) -> bool:
        return all(value is not None for value in self.get_key_as_dict().values())

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        if name.startswith('_'):
            raise AttributeError(name)
        attributes = self.__dict__.get('_attributes', {})
        if name in attributes:
            return attributes[name]
        raise AttributeError(f"{type(self).__name__} has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith('_'):
            object.__setattr__(self, name, value)
        elif hasattr(type(self), name):
            # Model methods and properties cannot be shadowed by attribute assignment
            raise AttributeError(
                f"'{name}' is reserved on {type(self).__name__}; use set_attribute('{name}', value)"
            )
        else:
            self.set_attribute(name, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._attributes!r})"

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def set_attribute(self, name: str, value: Any) -> 'DynamoDbModel':
        self._attributes[name] = value
        return self

    def fill(self, attributes: Mapping) -> 'DynamoDbModel':
        """Assign attributes allowed by Meta.fillable; others are ignored."""
        meta = self.get_meta()
        for name, value in attributes.items():
            if meta.is_fillable(name):
                self.set_attribute(name, value)
        return self

    def _set_unfillable_attributes(self, attributes: Mapping) -> None:
        # Second hydration pass: restore attributes fill() refused
        meta = self.get_meta()
        for name, value in attributes.items():
            if not meta.is_fillable(name):
                self.set_attribute(name, value)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._attributes)

    @property
    def exists(self) -> bool:
        """True while the instance mirrors an item stored in DynamoDB."""
        return self._exists

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    @classmethod
    def observe(cls, event: str, callback: Callable[['DynamoDbModel'], Any]) -> None:
        """Register a callback for a lifecycle event of this model class.

        Args:
            event: One of "creating", "saved", "deleted"
            callback: Called with the model instance
        """
        if event not in MODEL_EVENTS:
            raise ValueError(f"Unknown model event '{event}'. Supported events: {MODEL_EVENTS}")
        cls._event_observers.setdefault(event, []).append(callback)

    @classmethod
    def flush_event_observers(cls) -> None:
        """Remove every callback registered on this model class."""
        cls._event_observers = {}

    def _fire_model_event(self, event: str) -> None:
        for klass in type(self).__mro__:
            observers = vars(klass).get('_event_observers', {})
            for callback in observers.get(event, []):
                callback(self)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @classmethod
    def _new_instance(cls) -> 'DynamoDbModel':
        return cls()

    @classmethod
    def _hydrate(cls, record: Mapping) -> 'DynamoDbModel':
        model = cls(record)
        model._set_unfillable_attributes(record)
        model._exists = True
        return model

    @classmethod
    def find(cls, key_value: Any, columns: Optional[Sequence[str]] = None) -> Optional['DynamoDbModel']:
        """
        Find a model by primary key (strongly consistent read).

        Args:
            key_value: Scalar id, or a mapping of key field -> value
            columns: Attributes to fetch, all when empty

        Returns:
            The hydrated model, or None if no item exists

        Raises:
            InvalidKeyError: If the key cannot be resolved
            StoreError: If the GetItem request fails
        """
        model = cls._new_instance()
        query = {
            'ConsistentRead': True,
            'TableName': model.get_table(),
            'Key': model.get_model_key(key_value),
        }
        if columns:
            query['AttributesToGet'] = list(columns)

        response = model.dynamo_db.get_item(query)
        item = response.get('Item')
        if not item:
            return None

        record = model.unmarshal_item(item)
        model.fill(record)
        model._set_unfillable_attributes(record)

        # Projections may omit the key attributes
        if isinstance(key_value, Mapping):
            for field in model.get_meta().get_key_fields():
                model.set_attribute(field, key_value[field])
        else:
            model.set_attribute(model.get_key_name(), key_value)

        model._exists = True
        return model

    @classmethod
    def all(cls, columns: Optional[Sequence[str]] = None, limit: int = -1) -> List['DynamoDbModel']:
        """Get every item of the table (Scan), optionally limited."""
        return cls._new_instance()._get_all(columns, limit)

    @class_or_instance_method
    def first(target, columns: Optional[Sequence[str]] = None) -> Optional['DynamoDbModel']:
        """Return the first matching model, or None.

        On the class this reads the first item of the table; on a model
        built with where() it applies the accumulated filters.
        """
        model = target if isinstance(target, DynamoDbModel) else target._new_instance()
        results = model._get_all(columns, 1)
        return results[0] if results else None

    @class_or_instance_method
    def where(target, column: Any, operator: Any = NOT_GIVEN, value: Any = NOT_GIVEN, boolean: str = 'and') -> 'DynamoDbModel':
        """
        Add a filter clause and return the model for chaining.

        Called on the class it starts a new model; called on a model it
        adds to that model's clauses.

        Examples:
            User.where('age', 30)
            User.where('age', '>', 30).where('name', 'begins_with', 'a')
            User.where({'name': 'x'})

        Raises:
            UnsupportedFeatureError: For "or" booleans, callables, or an empty mapping
        """
        model = target if isinstance(target, DynamoDbModel) else target._new_instance()
        model._filters.where(column, operator, value, boolean)
        return model

    @property
    def where_clauses(self) -> Dict[str, FilterClause]:
        """Copy of the accumulated filter clauses."""
        return dict(self._filters.clauses)

    def get(self, columns: Optional[Sequence[str]] = None) -> List['DynamoDbModel']:
        """Execute the accumulated filters."""
        return self._get_all(columns)

    def build_query_plan(self, columns: Optional[Sequence[str]] = None, limit: int = -1) -> QueryPlan:
        """Plan the Scan or Query the accumulated filters would run."""
        return plan_query(
            self.get_table(),
            self.get_meta().index_keys,
            self._filters.clauses,
            columns,
            limit
        )

    def _get_all(self, columns: Optional[Sequence[str]] = None, limit: int = -1) -> List['DynamoDbModel']:
        plan = self.build_query_plan(columns, limit)
        results = []
        for item in self.dynamo_db.get_iterator(plan.operation, plan.to_request()):
            results.append(type(self)._hydrate(self.unmarshal_item(item)))
        logger.debug(f"{plan.operation.value} on {plan.table_name} returned {len(results)} items")
        return results

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save(self, options: Optional[Mapping] = None) -> bool:
        """
        Write every attribute to DynamoDB (unconditional PutItem).

        Fires "creating" first when the model has no key value, so an
        observer may assign one.

        Returns:
            True on success, False if the write failed (the failure is logged)
        """
        if not self._has_identity():
            self._fire_model_event('creating')

        table_name = self.get_table()
        try:
            self.dynamo_db.put_item({
                'TableName': table_name,
                'Item': self.marshal_item(self._attributes),
            })
        except (StoreError, TypeError, DecimalException) as e:
            logger.error(f"Failed to save item in {table_name}: {e}")
            return False

        self._exists = True
        self._fire_model_event('saved')
        return True

    def update(self, attributes: Optional[Mapping] = None, options: Optional[Mapping] = None) -> bool:
        """Fill the given attributes and save."""
        return self.fill(attributes or {}).save(options)

    @classmethod
    def create(cls, attributes: Optional[Mapping] = None) -> 'DynamoDbModel':
        """
        Create and save a model.

        The model is returned even if the save failed; check `exists`
        to know whether it was stored.
        """
        model = cls._new_instance()
        model.fill(attributes or {}).save()
        return model

    def delete(self) -> bool:
        """
        Delete the item identified by this model's own key attributes.

        Returns:
            True only if DynamoDB answered with HTTP status 200

        Raises:
            InvalidKeyError: If a key attribute is missing on the model
            StoreError: If the DeleteItem request fails
        """
        key = self.get_model_key(self.get_key_as_dict())
        response = self.dynamo_db.delete_item({
            'TableName': self.get_table(),
            'Key': key,
        })
        status = response.get('ResponseMetadata', {}).get('HTTPStatusCode')
        if status != 200:
            return False

        self._exists = False
        self._fire_model_event('deleted')
        return True
