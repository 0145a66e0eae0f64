"""
Property-readable capability.

Dotted paths such as `user.address.city` are traversed one segment at a
time through a registered getter table keyed by the value's type. Mappings
are read by key, sequences by integer index and every other object by
public attribute. Applications register readers for their own types.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from functools import singledispatch
from typing import Any


class PropertyNotFound(LookupError):
    """The value has no readable property with the requested name."""

    def __init__(self, value: Any, name: str):
        super().__init__(f"{type(value).__name__} has no property '{name}'")
        self.name = name


@singledispatch
def read_property(value: Any, name: str) -> Any:
    """
    Reads property `name` from `value`.

    Default reader for record-like objects: public attributes and
    properties only.

    Raises:
        PropertyNotFound: If the property cannot be read
    """
    if name.startswith("_"):
        raise PropertyNotFound(value, name)
    try:
        return getattr(value, name)
    except AttributeError:
        raise PropertyNotFound(value, name) from None


@read_property.register(Mapping)
def _read_mapping(value: Mapping, name: str) -> Any:
    try:
        return value[name]
    except KeyError:
        raise PropertyNotFound(value, name) from None


@read_property.register(Sequence)
def _read_sequence(value: Sequence, name: str) -> Any:
    if not name.isdigit():
        raise PropertyNotFound(value, name)
    try:
        return value[int(name)]
    except IndexError:
        raise PropertyNotFound(value, name) from None


@read_property.register(str)
def _read_string(value: str, name: str) -> Any:
    # strings are scalars for path traversal
    raise PropertyNotFound(value, name)


def register_reader(cls: type):
    """
    Decorator registering a property reader for `cls` and its subclasses.

    Example:
        @register_reader(Row)
        def _read_row(row, name):
            return row.column(name)
    """
    return read_property.register(cls)


__all__ = ["PropertyNotFound", "read_property", "register_reader"]
