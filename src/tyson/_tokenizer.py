"""
Flat tokenizer for JSON text.

The scan recognizes structure only: brackets, property names and opaque value
literals. Numbers, booleans and null are not validated here; the reader
resolves each literal against its target type. Bracket balance is not checked
either, so an unbalanced document is only noticed when the reader runs past
the end of the token list.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from ._errors import BoundsError
from ._errors import Position
from ._profiling import ProfileContext

logger = logging.getLogger(__name__)

# Only space and newline separate literals; tabs and carriage returns do not
_WHITESPACE = frozenset(" \n")


class TokenKind(Enum):
    """Lexical category of a token."""

    START_OBJECT = "start_object"
    END_OBJECT = "end_object"
    START_ARRAY = "start_array"
    END_ARRAY = "end_array"
    PROPERTY_NAME = "property_name"
    VALUE = "value"


_STRUCTURAL = {
    "{": TokenKind.START_OBJECT,
    "}": TokenKind.END_OBJECT,
    "[": TokenKind.START_ARRAY,
    "]": TokenKind.END_ARRAY,
}


@dataclass(frozen=True)
class Token:
    """
    A classified lexical unit of JSON text.

    ``text`` holds string contents with the surrounding quotes removed and
    escape sequences left as written. ``quoted`` tells a string literal apart
    from a bare one, so that ``"null"`` is not mistaken for null.
    """

    kind: TokenKind
    text: str
    quoted: bool = False
    start: Position = 0


class JsonTokenizer:
    """
    Scans JSON text left to right into a list of tokens.

    Bare characters accumulate into a pending literal which is flushed as a
    value on whitespace, a comma or a closing bracket, and as a property name
    on a colon.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.length = len(text)
        self.tokens: list[Token] = []
        self._literal: list[str] | None = None
        self._literal_start: Position = 0
        self._quoted = False

    def tokenize(self) -> list[Token]:
        """Scans the whole input and returns the token list."""
        with ProfileContext("tokenize", self.length):
            while self.pos < self.length:
                char = self.text[self.pos]

                if char in _WHITESPACE or char == ",":
                    self._flush(TokenKind.VALUE)
                elif char == '"':
                    self._scan_string()
                elif char == ":":
                    self._flush_property_name()
                elif char in "{[":
                    self._emit(_STRUCTURAL[char], char, self.pos)
                elif char in "}]":
                    self._flush(TokenKind.VALUE)
                    self._emit(_STRUCTURAL[char], char, self.pos)
                else:
                    self._append(char)

                self.pos += 1

            self._flush(TokenKind.VALUE)

        logger.debug(
            "Tokenized %d characters into %d tokens",
            self.length,
            len(self.tokens),
        )
        return self.tokens

    def _append(self, char: str) -> None:
        if self._literal is None:
            self._literal = []
            self._literal_start = self.pos
        self._literal.append(char)

    def _scan_string(self) -> None:
        """Scans a quoted string, leaving ``pos`` on the closing quote."""
        start = self.pos
        if self._literal is None:
            self._literal = []
            self._literal_start = start
        self._quoted = True
        self.pos += 1

        while True:
            if self.pos >= self.length:
                raise BoundsError(
                    "Unterminated string starting at", self.text, start
                )

            char = self.text[self.pos]
            if char == '"':
                return
            if char == "\\" and self.pos + 1 < self.length:
                # Keep the escape as written; \" must not end the string
                self._literal.append(char)
                self.pos += 1
                char = self.text[self.pos]
            self._literal.append(char)
            self.pos += 1

    def _emit(self, kind: TokenKind, text: str, start: Position) -> None:
        self.tokens.append(Token(kind, text, False, start))

    def _flush(self, kind: TokenKind) -> None:
        """Emits the pending literal, if any, as a token of ``kind``."""
        if self._literal is None:
            return
        self.tokens.append(
            Token(
                kind,
                "".join(self._literal),
                self._quoted,
                self._literal_start,
            )
        )
        self._literal = None
        self._quoted = False

    def _flush_property_name(self) -> None:
        # A colon always yields a property name, even with nothing before it
        if self._literal is None:
            self._literal = []
            self._literal_start = self.pos
        self._flush(TokenKind.PROPERTY_NAME)


def tokenize(text: str) -> list[Token]:
    """Converts JSON text into a flat, ordered list of tokens."""
    return JsonTokenizer(text).tokenize()
