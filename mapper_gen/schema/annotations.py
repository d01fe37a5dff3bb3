"""Declarative mapping markers.

Field markers go inside ``typing.Annotated``; the class marker is a
decorator:

    @maps_from("app.entity.user.User", mapper_name="UserReadMapper")
    @dataclass
    class UserReadDto:
        user_id: int
        emails: Annotated[list[AddressDto], MapCollection(AddressDto)]

    class User:
        _id: Annotated[int, MapTo("user_id")]
        _name: Annotated[str, MapTo("full_name", mapper="format_name")]
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T", bound=type)

MAPS_FROM_ATTR = "__maps_from__"


@dataclass(frozen=True)
class MapTo:
    """Map this field to ``target`` on the other side.

    Args:
        target: Property name on the destination type.
        mapper: Static function applied to the value. A bare name refers to
            a static method of the destination class; a dotted path names an
            importable function.
    """

    target: str
    mapper: str | None = None


@dataclass(frozen=True)
class MapCollection:
    """Declare the element type of a collection field."""

    item_type: type | str


@dataclass(frozen=True)
class MapsFrom:
    """Class-level pairing with a source type."""

    source: type | str
    mapper_name: str | None = None


def maps_from(source: type | str, mapper_name: str | None = None) -> Callable[[T], T]:
    """Class decorator pairing a DTO with its source type."""

    def decorate(cls: T) -> T:
        setattr(cls, MAPS_FROM_ATTR, MapsFrom(source, mapper_name))
        return cls

    return decorate
