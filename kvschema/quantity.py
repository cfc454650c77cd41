"""Parsing and conversion of resource quantities such as ``512Mi`` or ``250m``."""

from __future__ import annotations

import re
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation

from kvschema.schema import ExpandError

_FORMAT = r"^([+-]?[0-9.]+)([eEinumkKMGTP]*[-+]?[0-9]*)$"
_QUANTITY = re.compile(_FORMAT)
_NUMBER = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")
_EXPONENT = re.compile(r"[eE]([+-]?[0-9]+)")

FORMAT_ERROR = f"quantities must match the regular expression '{_FORMAT}'"
NUMERIC_ERROR = "unable to parse numeric part of quantity"
SUFFIX_ERROR = "unable to parse quantity's suffix"

_BINARY_SUFFIXES = {
    "Ki": 2**10,
    "Mi": 2**20,
    "Gi": 2**30,
    "Ti": 2**40,
    "Pi": 2**50,
    "Ei": 2**60,
}
_DECIMAL_SUFFIXES = {
    "n": Decimal("1e-9"),
    "u": Decimal("1e-6"),
    "m": Decimal("1e-3"),
    "": Decimal(1),
    "k": Decimal("1e3"),
    "M": Decimal("1e6"),
    "G": Decimal("1e9"),
    "T": Decimal("1e12"),
    "P": Decimal("1e15"),
    "E": Decimal("1e18"),
}


def _multiplier(suffix: str) -> Decimal:
    if suffix in _BINARY_SUFFIXES:
        return Decimal(_BINARY_SUFFIXES[suffix])
    if suffix in _DECIMAL_SUFFIXES:
        return _DECIMAL_SUFFIXES[suffix]
    exponent = _EXPONENT.fullmatch(suffix)
    if exponent is not None:
        return Decimal(10) ** int(exponent.group(1))
    raise ExpandError(SUFFIX_ERROR)


def parse_quantity(value):
    """Return the numeric amount a quantity string denotes.

    Raises :class:`ExpandError` if the text is not a valid quantity.
    """
    text = str(value)
    match = _QUANTITY.match(text)
    if match is None:
        raise ExpandError(FORMAT_ERROR)
    number, suffix = match.groups()
    if _NUMBER.fullmatch(number) is None:
        raise ExpandError(NUMERIC_ERROR)
    try:
        amount = Decimal(number)
    except InvalidOperation:
        raise ExpandError(NUMERIC_ERROR) from None
    return amount * _multiplier(suffix)


def expand_resource_list(mapping):
    """Validate a mapping of resource names to quantities and return it as strings."""
    resources: dict[str, str] = {}
    for name, value in (mapping or {}).items():
        text = str(value)
        parse_quantity(text)
        resources[str(name)] = text
    return resources


def flatten_resource_list(resources):
    """Turn a resource list into a mapping of names to quantity strings."""
    if not isinstance(resources, Mapping):
        return {}
    return {str(name): str(value) for name, value in resources.items()}