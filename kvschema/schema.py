"""Field descriptions for resource configuration and the validators they use."""

from __future__ import annotations

import enum
import ipaddress
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Pattern, Union

Validator = Callable[[Any], Any]


class FieldType(enum.Enum):
    """Kinds of value a configuration field can hold."""

    STRING = "string"
    INT = "int"
    BOOL = "bool"
    LIST = "list"
    SET = "set"
    MAP = "map"


class ExpandError(ValueError):
    """Raised when configuration cannot be turned into an API object."""


_TYPE_CHECKS: dict[FieldType, Callable[[Any], bool]] = {
    FieldType.STRING: lambda v: isinstance(v, str),
    FieldType.INT: lambda v: isinstance(v, int) and not isinstance(v, bool),
    FieldType.BOOL: lambda v: isinstance(v, bool),
    FieldType.LIST: lambda v: isinstance(v, (list, tuple)),
    FieldType.SET: lambda v: isinstance(v, (set, frozenset, list, tuple)),
    FieldType.MAP: lambda v: isinstance(v, Mapping),
}


@dataclass
class Field:
    """Description of one configuration attribute.

    ``elem`` is either a :class:`Field` describing the items of a list, set
    or map, or a mapping of names to fields describing a nested block.
    """

    type: FieldType
    description: str = ""
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False
    max_items: int = 0
    default: Any = None
    elem: Union[Field, Mapping[str, Field], None] = None
    validate_func: Validator | None = None
    conflicts_with: tuple[str, ...] = ()

    def validate(self, value):
        """Return *value* unchanged if it conforms; raise ValueError otherwise."""
        self._check(value, "")
        return value

    def _check(self, value: Any, path: str) -> None:
        label = path or "value"
        if value is None:
            if self.required:
                raise ValueError(f"{label}: required field is not set")
            return
        if not _TYPE_CHECKS[self.type](value):
            raise ValueError(
                f"{label}: expected {self.type.value}, got {type(value).__name__}"
            )
        if self.type in (FieldType.LIST, FieldType.SET):
            if self.max_items and len(value) > self.max_items:
                raise ValueError(
                    f"{label}: attribute supports {self.max_items} item maximum, "
                    f"config has {len(value)} declared"
                )
            for index, item in enumerate(value):
                self._check_item(item, f"{label}.{index}")
        elif self.type is FieldType.MAP and isinstance(self.elem, Field):
            for key, item in value.items():
                self.elem._check(item, f"{label}.{key}")
        if self.validate_func is not None:
            try:
                self.validate_func(value)
            except ValueError as exc:
                raise ValueError(f"{label}: {exc}") from exc

    def _check_item(self, item: Any, path: str) -> None:
        if isinstance(self.elem, Field):
            self.elem._check(item, path)
        elif isinstance(self.elem, Mapping):
            _check_block(self.elem, item, path)


def _check_block(fields: Mapping[str, Field], value: Any, path: str) -> None:
    if value is None:
        return
    if not isinstance(value, Mapping):
        raise ValueError(f"{path}: expected a block, got {type(value).__name__}")
    unknown = sorted(set(value) - set(fields))
    if unknown:
        raise ValueError(f"{path}: unsupported argument {unknown[0]!r}")
    for name, field in fields.items():
        field._check(value.get(name), f"{path}.{name}")


def string_in_slice(allowed, ignore_case):
    """Build a validator accepting only strings from *allowed*."""
    choices = tuple(allowed)
    folded = {c.lower() for c in choices}

    def check(value):
        if not isinstance(value, str):
            raise ValueError(f"expected type to be string, got {type(value).__name__}")
        if value in choices or (ignore_case and value.lower() in folded):
            return value
        raise ValueError(f"expected value to be one of {list(choices)!r}, got {value}")

    return check


def string_match(pattern, message):
    """Build a validator accepting strings in which *pattern* matches."""
    regex: Pattern[str] = re.compile(pattern) if isinstance(pattern, str) else pattern

    def check(value):
        if not isinstance(value, str):
            raise ValueError(f"expected type to be string, got {type(value).__name__}")
        if regex.search(value) is None:
            raise ValueError(
                message or f"invalid value ({value}), should match {regex.pattern!r}"
            )
        return value

    return check


def is_ip_address(value):
    """Return *value* if it is a textual IPv4 or IPv6 address."""
    if not isinstance(value, str):
        raise ValueError(f"expected type to be string, got {type(value).__name__}")
    try:
        ipaddress.ip_address(value)
    except ValueError:
        raise ValueError(f"expected to contain a valid IP, got: {value}") from None
    return value