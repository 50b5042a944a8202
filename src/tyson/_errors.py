"""Error taxonomy for JSON serialization and deserialization."""

Position = int


class JsonSerializerError(ValueError):
    """
    Base class for every failure raised by tyson.

    Carries the offending document and a character position when one is
    known, so that decode errors can point at a line and column the same way
    for every subclass.
    """

    def __init__(
        self, msg: str, doc: str = "", pos: Position | None = None
    ) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if pos is not None and (not isinstance(pos, int) or pos < 0):
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.doc = doc
        self.pos = pos

        if pos is None:
            self.lineno = None
            self.colno = None
            super().__init__(msg)
            return

        # Compute line and column numbers from position
        self.lineno = doc.count("\n", 0, pos) + 1 if doc else 1
        self.colno = pos - doc.rfind("\n", 0, pos) if doc else pos + 1
        super().__init__(f"{msg} at line {self.lineno}, column {self.colno}")

    def __reduce__(self) -> tuple[type, tuple[str, str, Position | None]]:
        return self.__class__, (self.msg, self.doc, self.pos)


class ShapeMismatchError(JsonSerializerError):
    """A token's structural kind does not fit the target type."""


class NullabilityError(JsonSerializerError):
    """A null literal targets a type that does not accept null."""


class UnsupportedTypeError(JsonSerializerError, TypeError):
    """A type or value is outside the supported type universe."""


class PrimitiveParseError(JsonSerializerError):
    """A literal fails the parsing rule of its primitive kind."""


class KeyStringificationError(JsonSerializerError, TypeError):
    """A mapping key has no usable string form."""


class BoundsError(JsonSerializerError, IndexError):
    """Decoding ran past the end of the token sequence or the input text."""
