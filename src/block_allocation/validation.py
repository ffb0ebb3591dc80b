"""Fail-fast checks applied before an allocation run touches any state."""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, List, Tuple, Union

from .allocators import Strategy


class InvalidInput(ValueError):
    """Raised when sizes or the strategy selector cannot be used as given."""


_SEPARATORS = re.compile(r"[\s,;]+")


def validate_sizes(values: Any, field: str) -> Tuple[int, ...]:
    """
    Return `values` as a tuple of non-negative ints.

    Strings, mappings and other non-sequence containers are refused outright,
    and so is every element that is not a real int (bools and floats such as
    3.0 included).
    """
    if isinstance(values, (str, bytes, bytearray, Mapping)) or values is None:
        raise InvalidInput(f"{field} must be a list of integers, got {type(values).__name__}")
    try:
        items = list(values)
    except TypeError:
        raise InvalidInput(
            f"{field} must be a list of integers, got {type(values).__name__}"
        ) from None
    for position, value in enumerate(items):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInput(
                f"{field}[{position}] must be a non-negative integer, got {value!r}"
            )
        if value < 0:
            raise InvalidInput(
                f"{field}[{position}] must be a non-negative integer, got {value}"
            )
    return tuple(items)


def parse_strategy(value: Union[str, Strategy]) -> Strategy:
    if isinstance(value, Strategy):
        return value
    if not isinstance(value, str):
        raise InvalidInput(f"allocationType must be a string, got {type(value).__name__}")
    normalised = re.sub(r"[\s_]+", "-", value.strip().lower())
    try:
        return Strategy(normalised)
    except ValueError:
        known = ", ".join(strategy.value for strategy in Strategy)
        raise InvalidInput(
            f"Unknown allocationType {value!r}. Expected one of: {known}"
        ) from None


def parse_sizes(text: str, field: str) -> List[int]:
    """
    Parse free text such as "100, 500 200" into integers.

    Every token must be a plain decimal number; "12kb" or "3.5" are errors
    rather than being truncated.
    """
    tokens = [token for token in _SEPARATORS.split(text.strip()) if token]
    sizes: List[int] = []
    for position, token in enumerate(tokens):
        if not (token.isascii() and token.isdigit()):
            raise InvalidInput(
                f"{field}[{position}] must be a non-negative integer, got {token!r}"
            )
        sizes.append(int(token))
    return sizes
