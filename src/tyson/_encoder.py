"""Shape-dispatched encoding of object graphs into a JsonWriter."""

from collections.abc import Iterable
from collections.abc import Mapping
from typing import Any

from ._errors import KeyStringificationError
from ._errors import UnsupportedTypeError
from ._fields import resolve_fields
from ._options import DEFAULT_OPTIONS
from ._options import SerializerOptions
from ._types import PRIMITIVE_TYPES
from ._types import is_record_type
from ._writer import JsonWriter
from ._writer import primitive_text


class JsonEncoder:
    """
    Walks an object graph and drives a :class:`JsonWriter`.

    The shape of each value is taken from its runtime type: None, primitive,
    mapping, record or any other iterable. Records are written field by field
    in declaration order using the resolved field map.
    """

    def __init__(self, options: SerializerOptions = DEFAULT_OPTIONS) -> None:
        self.options = options

    def encode(self, value: Any, writer: JsonWriter) -> None:
        """Writes ``value`` to ``writer``."""
        if value is None:
            writer.write_null()
        elif isinstance(value, PRIMITIVE_TYPES):
            writer.write_primitive(value)
        elif isinstance(value, Mapping):
            self._encode_mapping(value, writer)
        elif is_record_type(type(value)):
            self._encode_record(value, writer)
        elif isinstance(value, Iterable) and not isinstance(
            value, bytes | bytearray
        ):
            self._encode_sequence(value, writer)
        else:
            name = type(value).__name__
            msg = f"Object of type {name} is not JSON serializable"
            raise UnsupportedTypeError(msg)

    def _key_string(self, key: Any) -> str:
        if key is None:
            raise KeyStringificationError(
                "Mapping key None has no string representation"
            )
        if isinstance(key, PRIMITIVE_TYPES):
            return primitive_text(key)
        try:
            return str(key)
        except (TypeError, ValueError) as e:
            msg = (
                f"Key of type {type(key).__name__} has no valid string "
                "representation"
            )
            raise KeyStringificationError(msg) from e

    def _encode_mapping(
        self, mapping: Mapping[Any, Any], writer: JsonWriter
    ) -> None:
        writer.write_start_object()
        is_first = True
        for key, value in mapping.items():
            key_string = self._key_string(key)
            if not is_first:
                writer.write_comma()
            writer.write_property_name(key_string)
            self.encode(value, writer)
            is_first = False
        writer.write_end_object()

    def _encode_sequence(
        self, items: Iterable[Any], writer: JsonWriter
    ) -> None:
        writer.write_start_array()
        is_first = True
        for item in items:
            if not is_first:
                writer.write_comma()
            self.encode(item, writer)
            is_first = False
        writer.write_end_array()

    def _encode_record(self, record: Any, writer: JsonWriter) -> None:
        field_map = resolve_fields(type(record), self.options.case_policy)
        writer.write_start_object()
        is_first = True
        for prop in field_map.included:
            value = getattr(record, prop.source_name, None)
            if value is None and self.options.ignore_null_values:
                continue
            if not is_first:
                writer.write_comma()
            writer.write_property_name(prop.json_name)
            self.encode(value, writer)
            is_first = False
        writer.write_end_object()
