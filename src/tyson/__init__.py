"""
Reflection-driven JSON serialization for typed Python object graphs.

Maps dataclasses and annotated classes to JSON and back without code
generation: field names, types and markers are read from type hints at
runtime, and a configurable naming policy turns field names into JSON keys.
"""

import logging
from typing import IO
from typing import Any
from typing import TypeVar
from typing import overload

from ._casing import CasePolicy
from ._casing import convert_case
from ._encoder import JsonEncoder
from ._errors import BoundsError
from ._errors import JsonSerializerError
from ._errors import KeyStringificationError
from ._errors import NullabilityError
from ._errors import PrimitiveParseError
from ._errors import ShapeMismatchError
from ._errors import UnsupportedTypeError
from ._fields import FieldMap
from ._fields import JsonIgnore
from ._fields import JsonPropertyName
from ._fields import PropertyDescriptor
from ._fields import json_field
from ._fields import resolve_fields
from ._options import DEFAULT_OPTIONS
from ._options import SerializerOptions
from ._profiling import HotPathStats
from ._profiling import ProfileContext
from ._profiling import clear_hot_path_stats
from ._profiling import get_hot_path_stats
from ._reader import JsonReader
from ._tokenizer import JsonTokenizer
from ._tokenizer import Token
from ._tokenizer import TokenKind
from ._tokenizer import tokenize
from ._types import Float32
from ._types import Float64
from ._types import FloatWidth
from ._types import Int8
from ._types import Int16
from ._types import Int32
from ._types import Int64
from ._types import Int128
from ._types import IntWidth
from ._types import UInt8
from ._types import UInt16
from ._types import UInt32
from ._types import UInt64
from ._types import UInt128
from ._writer import JsonWriter

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

T = TypeVar("T")


def serialize(value: Any, options: SerializerOptions | None = None) -> str:
    """
    Serializes ``value`` to JSON text.

    Records are written field by field in declaration order, with keys named
    by the options' case policy unless a field carries an explicit name.
    """
    options = options or DEFAULT_OPTIONS
    writer = JsonWriter(options)
    with ProfileContext("serialize"):
        JsonEncoder(options).encode(value, writer)
    result = writer.get_json()
    logger.debug(
        "Serialized %s into %d characters", type(value).__name__, len(result)
    )
    return result


@overload
def deserialize(
    text: str, cls: type[T], options: SerializerOptions | None = None
) -> T: ...


@overload
def deserialize(
    text: str, cls: Any, options: SerializerOptions | None = None
) -> Any: ...


def deserialize(
    text: str, cls: Any, options: SerializerOptions | None = None
) -> Any:
    """
    Deserializes JSON text into an instance of ``cls``.

    ``cls`` may be any supported type hint, e.g. a dataclass,
    ``list[int]`` or ``dict[str, Inner | None]``. Fails if the document's
    shape does not match.
    """
    if not isinstance(text, str):
        raise TypeError(
            f"the JSON object must be str, not {type(text).__name__}"
        )

    reader = JsonReader(text, options or DEFAULT_OPTIONS)
    result = reader.read(cls)
    logger.debug(
        "Deserialized %d tokens into %s",
        len(reader.tokens),
        type(result).__name__,
    )
    return result


def dumps(obj: Any, **kwargs: Any) -> str:
    """
    Serializes ``obj`` to a JSON string.

    Keyword arguments are :class:`SerializerOptions` fields.
    """
    return serialize(obj, SerializerOptions(**kwargs))


def loads(s: str, cls: Any = Any, **kwargs: Any) -> Any:
    """
    Parses a JSON string into ``cls``; untyped values when ``cls`` is Any.

    Keyword arguments are :class:`SerializerOptions` fields.
    """
    return deserialize(s, cls, SerializerOptions(**kwargs))


def dump(obj: Any, fp: IO[str], **kwargs: Any) -> None:
    """Serializes ``obj`` to a writable file-like object."""
    if not hasattr(fp, "write"):
        raise TypeError("fp must have a write() method")

    fp.write(dumps(obj, **kwargs))


def load(fp: IO[str], cls: Any = Any, **kwargs: Any) -> Any:
    """Parses JSON from a readable file-like object into ``cls``."""
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    return loads(fp.read(), cls, **kwargs)


__all__ = [
    "BoundsError",
    "CasePolicy",
    "FieldMap",
    "Float32",
    "Float64",
    "FloatWidth",
    "HotPathStats",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Int128",
    "IntWidth",
    "JsonEncoder",
    "JsonIgnore",
    "JsonPropertyName",
    "JsonReader",
    "JsonSerializerError",
    "JsonTokenizer",
    "JsonWriter",
    "KeyStringificationError",
    "NullabilityError",
    "PrimitiveParseError",
    "PropertyDescriptor",
    "SerializerOptions",
    "ShapeMismatchError",
    "Token",
    "TokenKind",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "UInt128",
    "UnsupportedTypeError",
    "clear_hot_path_stats",
    "convert_case",
    "deserialize",
    "dump",
    "dumps",
    "get_hot_path_stats",
    "json_field",
    "load",
    "loads",
    "resolve_fields",
    "serialize",
    "tokenize",
]
