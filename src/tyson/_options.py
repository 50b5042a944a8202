"""Immutable configuration shared by every encode and decode call."""

from dataclasses import dataclass

from ._casing import CasePolicy


@dataclass(frozen=True)
class SerializerOptions:
    """
    Configures naming, formatting and null handling with immutable settings.

    A single instance is safe to share between concurrent calls; nothing in
    the encoder, writer or reader mutates it.
    """

    case_policy: CasePolicy = CasePolicy.CAMEL_CASE
    pretty_print: bool = False
    indent_size: int = 4
    ignore_null_values: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.case_policy, CasePolicy):
            raise TypeError("case_policy must be a CasePolicy")
        if not isinstance(self.pretty_print, bool):
            raise TypeError("pretty_print must be a boolean")
        if not isinstance(self.indent_size, int) or isinstance(
            self.indent_size, bool
        ):
            raise TypeError("indent_size must be an integer")
        if self.indent_size < 0:
            raise ValueError("indent_size must be non-negative")
        if not isinstance(self.ignore_null_values, bool):
            raise TypeError("ignore_null_values must be a boolean")


DEFAULT_OPTIONS = SerializerOptions()
