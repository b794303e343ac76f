"""Lenient enum parsing for host-rendered values"""

from enum import Enum
from typing import Any, Iterable, List, Type, TypeVar

from .exceptions import InvalidArgument

E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: Type[E], value: Any) -> E:
    """Accept a member, its value, or its name, case-insensitively"""
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip()
    for candidate in (text, text.lower(), text.upper()):
        try:
            return enum_cls(candidate)
        except ValueError:
            pass
    try:
        return enum_cls[text.upper()]
    except KeyError:
        raise InvalidArgument(f"Unknown {enum_cls.__name__}: {value}")


def parse_enum_values(enum_cls: Type[E], values: Iterable[Any]) -> List[str]:
    return [parse_enum(enum_cls, value).value for value in values]
