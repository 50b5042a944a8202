"""Naming policies bridging Python identifiers and JSON keys."""

import unicodedata
from enum import Enum

_UPPER = ("Lu", "Lt")
_LOWER = "Ll"
_DIGIT = "Nd"
# Marks "a separator was just dropped" so the next letter opens a new segment
_SEPARATOR = "Zs"


class CasePolicy(Enum):
    """Naming convention applied when a field has no explicit JSON name."""

    CAMEL_CASE = "camel_case"
    SNAKE_CASE = "snake_case"


def convert_case(name: str, policy: CasePolicy) -> str:
    """
    Converts a source identifier into a JSON key under ``policy``.

    >>> convert_case("AEasyInt", CasePolicy.CAMEL_CASE)
    'aEasyInt'
    >>> convert_case("AEasyInt", CasePolicy.SNAKE_CASE)
    'a_easy_int'
    """
    if policy is CasePolicy.CAMEL_CASE:
        return _to_camel_case(name)
    elif policy is CasePolicy.SNAKE_CASE:
        return _to_snake_case(name)
    else:
        expected = ", ".join(p.name for p in CasePolicy)
        msg = f"Unexpected case policy {policy!r}. Expected one of: {expected}"
        raise ValueError(msg)


def _to_camel_case(name: str) -> str:
    """Lowercases the first character, assuming a PascalCase source."""
    if not name:
        return name
    return name[0].lower() + name[1:]


def _starts_new_word(name: str, index: int, previous: str | None) -> bool:
    """Decides whether the uppercase letter at ``index`` opens a segment."""
    if previous in (_SEPARATOR, _LOWER):
        return True
    # Last capital of an acronym run, e.g. the "E" in "AEasy"
    return (
        previous is not None
        and previous != _DIGIT
        and 0 < index < len(name) - 1
        and name[index + 1].islower()
    )


def _to_snake_case(name: str) -> str:
    """Segments ``name`` into lowercase words joined by underscores."""
    if not name:
        return name

    result: list[str] = []
    previous: str | None = None

    for index, char in enumerate(name):
        if char == "_":
            result.append("_")
            previous = None
            continue

        category = unicodedata.category(char)
        if category in _UPPER:
            if _starts_new_word(name, index, previous):
                result.append("_")
            char = char.lower()
        elif category in (_LOWER, _DIGIT):
            if previous == _SEPARATOR:
                result.append("_")
        else:
            # Anything else (spaces, dashes, punctuation) is dropped
            if previous is not None:
                previous = _SEPARATOR
            continue

        result.append(char)
        previous = category

    return "".join(result)
