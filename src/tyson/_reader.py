"""
Type-directed decoding of a token list.

The reader walks the tokens produced by the tokenizer with a single cursor,
guided by the target type hint: objects become mappings or records, arrays
become sequences, and literals are parsed by the rule of their primitive kind.
Every ``read_*`` method leaves the cursor on the last token of the value it
consumed.
"""

import logging
from collections.abc import Sequence
from typing import Any

from ._errors import BoundsError
from ._errors import JsonSerializerError
from ._errors import NullabilityError
from ._errors import PrimitiveParseError
from ._errors import ShapeMismatchError
from ._errors import UnsupportedTypeError
from ._fields import resolve_fields
from ._options import DEFAULT_OPTIONS
from ._options import SerializerOptions
from ._profiling import ProfileContext
from ._tokenizer import Token
from ._tokenizer import TokenKind
from ._tokenizer import tokenize
from ._types import Shape
from ._types import accepts_null
from ._types import infer_literal
from ._types import mapping_factory
from ._types import mapping_types
from ._types import primitive_parser
from ._types import sequence_factory
from ._types import sequence_item_type
from ._types import shape_of
from ._types import strip_annotated
from ._types import unwrap_optional

logger = logging.getLogger(__name__)

_ESCAPE_MAP = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_CONTAINER_STARTS = (TokenKind.START_OBJECT, TokenKind.START_ARRAY)
_CONTAINER_ENDS = (TokenKind.END_OBJECT, TokenKind.END_ARRAY)
_LITERALS = (TokenKind.VALUE, TokenKind.PROPERTY_NAME)


def _read_unicode_escape(text: str, i: int) -> tuple[str, int]:
    """Decodes ``\\uXXXX`` at ``i``, joining surrogate pairs."""
    hex_digits = text[i + 2 : i + 6]
    if len(hex_digits) != 4:
        raise ValueError("Incomplete unicode escape sequence")
    try:
        code_point = int(hex_digits, 16)
    except ValueError as e:
        raise ValueError(
            f"Invalid unicode escape sequence: \\u{hex_digits}"
        ) from e

    end = i + 6
    if 0xD800 <= code_point < 0xDC00 and text[end : end + 2] == "\\u":
        try:
            low = int(text[end + 2 : end + 6], 16)
        except ValueError:
            low = 0
        if 0xDC00 <= low < 0xE000:
            code_point = 0x10000 + ((code_point - 0xD800) << 10)
            code_point += low - 0xDC00
            end += 6
    return chr(code_point), end


def unescape_string(text: str) -> str:
    """Resolves JSON escape sequences in the contents of a quoted string."""
    if "\\" not in text:
        return text

    result = []
    i = 0
    while i < len(text):
        char = text[i]
        if char != "\\" or i + 1 >= len(text):
            result.append(char)
            i += 1
            continue

        next_char = text[i + 1]
        if next_char in _ESCAPE_MAP:
            result.append(_ESCAPE_MAP[next_char])
            i += 2
        elif next_char == "u":
            decoded, i = _read_unicode_escape(text, i)
            result.append(decoded)
        else:
            raise ValueError(f"Invalid escape sequence: \\{next_char}")

    return "".join(result)


def _type_name(tp: Any) -> str:
    base, _ = strip_annotated(tp)
    return getattr(base, "__name__", None) or repr(base)


class JsonReader:
    """
    Decodes a token list into typed Python values.

    ``position`` is the cursor: the index of the current token. It only moves
    forward; reading past the last token raises :class:`BoundsError`.
    """

    def __init__(
        self,
        source: str | Sequence[Token],
        options: SerializerOptions = DEFAULT_OPTIONS,
    ) -> None:
        if isinstance(source, str):
            self.doc = source
            self.tokens = tokenize(source)
        else:
            self.doc = ""
            self.tokens = list(source)
        self.options = options
        self.position = 0

    @property
    def current_token(self) -> Token:
        if self.position >= len(self.tokens):
            raise BoundsError(
                "Unexpected end of input", self.doc, len(self.doc)
            )
        return self.tokens[self.position]

    def next(self, step: int = 1) -> None:
        self.position += step

    def _error(
        self, error: type[JsonSerializerError], msg: str, token: Token
    ) -> JsonSerializerError:
        return error(msg, self.doc, token.start)

    def read(self, cls: Any) -> Any:
        """
        Decodes a whole document into ``cls``.

        Fails if tokens remain after the top-level value.
        """
        with ProfileContext("read", len(self.tokens)):
            value = self.read_value(cls)
            self.next()

        if self.position < len(self.tokens):
            token = self.tokens[self.position]
            raise self._error(ShapeMismatchError, "Extra data", token)
        return value

    def read_value(self, tp: Any) -> Any:
        """Decodes the value starting at the cursor into ``tp``."""
        token = self.current_token

        if token.kind in _LITERALS:
            return self._read_primitive(tp, token)

        target = unwrap_optional(tp) or tp
        shape = shape_of(target)
        if token.kind is TokenKind.START_OBJECT:
            if shape in (Shape.MAPPING, Shape.DYNAMIC):
                return self._read_mapping(target)
            if shape is Shape.RECORD:
                return self._read_record(strip_annotated(target)[0])
        elif token.kind is TokenKind.START_ARRAY:
            if shape in (Shape.SEQUENCE, Shape.DYNAMIC):
                return self._read_sequence(target)

        msg = f"Unexpected {token.kind.name} for type {_type_name(tp)}"
        raise self._error(ShapeMismatchError, msg, token)

    def _text(self, token: Token) -> str:
        if not token.quoted:
            return token.text
        try:
            return unescape_string(token.text)
        except ValueError as e:
            raise self._error(PrimitiveParseError, str(e), token) from e

    def _read_primitive(self, tp: Any, token: Token) -> Any:
        if token.text == "null" and not token.quoted:
            if not accepts_null(tp):
                name = _type_name(tp)
                msg = f"Cannot convert null to non-nullable type {name}"
                raise self._error(NullabilityError, msg, token)
            return None

        inner = unwrap_optional(tp)
        if inner is not None:
            return self._read_primitive(inner, token)

        shape = shape_of(tp)
        if shape is Shape.DYNAMIC:
            return self._infer(token)
        if shape in (Shape.RECORD, Shape.SEQUENCE, Shape.MAPPING):
            msg = f"Expected {shape.value} for type {_type_name(tp)}"
            raise self._error(ShapeMismatchError, msg, token)

        parser = primitive_parser(tp)
        if parser is None:
            msg = (
                "Tried to deserialize a literal into unsupported type "
                f"{_type_name(tp)}"
            )
            raise self._error(UnsupportedTypeError, msg, token)

        text = self._text(token)
        try:
            return parser(text)
        except (ValueError, ArithmeticError) as e:
            msg = f"Cannot parse {text!r} as {_type_name(tp)}: {e}"
            raise self._error(PrimitiveParseError, msg, token) from e

    def _infer(self, token: Token) -> Any:
        # Keys and quoted literals are always strings
        if token.quoted or token.kind is TokenKind.PROPERTY_NAME:
            return self._text(token)
        try:
            return infer_literal(token.text)
        except ValueError as e:
            msg = f"Invalid literal {token.text!r}"
            raise self._error(PrimitiveParseError, msg, token) from e

    def _expect_property_name(self) -> Token:
        token = self.current_token
        if token.kind is not TokenKind.PROPERTY_NAME:
            msg = "Expecting property name enclosed in double quotes"
            raise self._error(ShapeMismatchError, msg, token)
        return token

    def _read_mapping(self, tp: Any) -> Any:
        key_type, value_type = mapping_types(tp)
        result = mapping_factory(tp)()
        self.next()

        while self.current_token.kind is not TokenKind.END_OBJECT:
            self._expect_property_name()
            key = self.read_value(key_type)
            self.next()
            value = self.read_value(value_type)
            self.next()
            result[key] = value

        return result

    def _read_record(self, cls: type) -> Any:
        field_map = resolve_fields(cls, self.options.case_policy)
        values: dict[str, Any] = {}
        self.next()

        while self.current_token.kind is not TokenKind.END_OBJECT:
            token = self._expect_property_name()
            json_name = self._text(token)
            prop = field_map.lookup(json_name)
            self.next()

            if prop is None:
                logger.debug(
                    "Skipping unknown key %r for %s", json_name, cls.__name__
                )
                self._skip_value()
            else:
                values[prop.source_name] = self.read_value(prop.field_type)
            self.next()

        return field_map.build(values)

    def _read_sequence(self, tp: Any) -> Any:
        items: list[Any] = []
        self.next()

        while self.current_token.kind is not TokenKind.END_ARRAY:
            items.append(self.read_value(sequence_item_type(tp, len(items))))
            self.next()

        return sequence_factory(tp)(items)

    def _skip_value(self) -> None:
        """Moves the cursor to the last token of the value at the cursor."""
        token = self.current_token
        if token.kind in _CONTAINER_ENDS:
            raise self._error(ShapeMismatchError, "Expecting value", token)
        if token.kind not in _CONTAINER_STARTS:
            return

        depth = 0
        while True:
            kind = self.current_token.kind
            if kind in _CONTAINER_STARTS:
                depth += 1
            elif kind in _CONTAINER_ENDS:
                depth -= 1
                if depth == 0:
                    return
            self.next()
