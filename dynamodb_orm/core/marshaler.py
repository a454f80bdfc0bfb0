"""
Attribute Codec

Converts between native Python records and DynamoDB's typed attribute
representation ({'S': 'abc'}, {'N': '42'}, {'M': {...}}, ...).

Built on boto3's TypeSerializer/TypeDeserializer with two additions:
- float values are accepted and stored as N through Decimal(str(value))
- numbers come back as int/float (or Decimal with wrap_numbers=True),
  Binary comes back as bytes

Type selection per native value:
    None -> NULL, bool -> BOOL, int/float/Decimal -> N, str -> S,
    bytes/bytearray/Binary -> B, list/tuple -> L, Mapping -> M,
    set of str -> SS, set of numbers -> NS, set of bytes -> BS
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Dict

from boto3.dynamodb.types import Binary, TypeDeserializer, TypeSerializer


def _float_to_decimal(value: float) -> Decimal:
    return Decimal(str(value))


def _native_number(value: Decimal):
    if value.as_tuple().exponent >= 0:
        return int(value)
    return float(value)


class _Serializer(TypeSerializer):
    def serialize(self, value):
        if isinstance(value, float):
            value = _float_to_decimal(value)
        elif isinstance(value, tuple):
            value = list(value)
        elif isinstance(value, (set, frozenset)):
            value = {_float_to_decimal(v) if isinstance(v, float) else v for v in value}
        return super().serialize(value)


class _Deserializer(TypeDeserializer):
    def __init__(self, wrap_numbers: bool = False):
        super().__init__()
        self.wrap_numbers = wrap_numbers

    def deserialize(self, value):
        return self._to_native(super().deserialize(value))

    def _to_native(self, value):
        if isinstance(value, Decimal):
            return value if self.wrap_numbers else _native_number(value)
        if isinstance(value, Binary):
            return value.value
        if isinstance(value, set):
            return {self._to_native(v) for v in value}
        return value


class Marshaler:
    """Marshal native records to DynamoDB items and back.

    Stateless apart from the number handling flag, so one instance is
    shared by every model through the client service.
    """

    def __init__(self, wrap_numbers: bool = False):
        """Initialize the codec.

        Args:
            wrap_numbers: Return numbers as Decimal instead of int/float
        """
        self.wrap_numbers = wrap_numbers
        self._serializer = _Serializer()
        self._deserializer = _Deserializer(wrap_numbers)

    def marshal_item(self, item: Mapping) -> Dict[str, Dict[str, Any]]:
        """Convert a native record to a DynamoDB item.

        Args:
            item: Mapping of attribute name to native value

        Returns:
            Mapping of attribute name to typed attribute value

        Raises:
            TypeError: If the record is not a mapping or holds a value
                DynamoDB cannot store
        """
        if not isinstance(item, Mapping):
            raise TypeError(f"Cannot marshal {type(item).__name__}, expected a mapping")
        return {name: self.marshal_value(value) for name, value in item.items()}

    def marshal_value(self, value: Any) -> Dict[str, Any]:
        """Convert a single native value to a typed attribute value."""
        return self._serializer.serialize(value)

    def unmarshal_item(self, item: Mapping) -> Dict[str, Any]:
        """Convert a DynamoDB item back to a native record."""
        return {name: self.unmarshal_value(value) for name, value in item.items()}

    def unmarshal_value(self, value: Mapping) -> Any:
        """Convert a single typed attribute value to its native value."""
        return self._deserializer.deserialize(value)


_default_marshaler = Marshaler()


def marshal(record: Mapping) -> Dict[str, Dict[str, Any]]:
    """Marshal a record with the default codec."""
    return _default_marshaler.marshal_item(record)


def unmarshal(item: Mapping) -> Dict[str, Any]:
    """Unmarshal an item with the default codec."""
    return _default_marshaler.unmarshal_item(item)
