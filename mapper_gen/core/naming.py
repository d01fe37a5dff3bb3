"""Naming conventions.

Entities and DTOs live in parallel namespaces that differ by one segment,
one class per module, DTO class names carrying a fixed suffix:

    app.entity.address.Address  <->  app.dto.address_dto.AddressDto

Generated mappers live in the output namespace, one per module:

    generated.mapper.address_mapper.AddressMapper
"""

from __future__ import annotations

import re
from collections.abc import Collection

from mapper_gen.core.types import TypeRef

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case(name: str) -> str:
    """``UserReadMapper`` -> ``user_read_mapper``."""
    return _WORD_BOUNDARY.sub("_", name).lower()


def pascal_case(segment: str) -> str:
    """``legacy_models`` -> ``LegacyModels``."""
    return "".join(part[:1].upper() + part[1:] for part in segment.split("_") if part)


def disambiguate(name: str, module: str, taken: Collection[str], own: str | None = None) -> str:
    """Return ``name``, or a variant of it that is not in ``taken``.

    Variants are prefixed with a segment of ``module``, nearest first,
    skipping ``own`` (defaults to the snake_case form of ``name``). A
    numeric suffix is the last resort.

    - ``Address`` in ``app.dto.address``      -> ``DtoAddress``
    - ``AddressMapper`` for ``app.legacy.address.Address`` -> ``LegacyAddressMapper``
    """
    if name not in taken:
        return name

    own = snake_case(name) if own is None else own
    for segment in reversed(module.split(".")):
        if segment == own:
            continue
        candidate = pascal_case(segment) + name
        if candidate not in taken:
            return candidate

    counter = 2
    while f"{name}{counter}" in taken:
        counter += 1
    return f"{name}{counter}"


def default_mapper_name(
    source: TypeRef,
    target: TypeRef,
    dto_suffix: str = "Dto",
    mapper_suffix: str = "Mapper",
) -> str:
    """Derive a mapper class name when no override names the pair.

    - ``User`` / ``UserDto``        -> ``UserMapper``
    - ``User`` / ``UserProfileDto`` -> ``UserToProfileMapper``
    - ``User`` / ``ContactDto``     -> ``UserToContactMapper``
    """
    source_short = source.short_name
    target_short = target.short_name
    if target_short.endswith(dto_suffix) and target_short != dto_suffix:
        target_short = target_short[: -len(dto_suffix)]

    if source_short == target_short:
        return f"{source_short}{mapper_suffix}"

    if target_short.startswith(source_short):
        suffix = target_short[len(source_short) :]
        return f"{source_short}To{suffix}{mapper_suffix}"

    return f"{source_short}To{target_short}{mapper_suffix}"


def mapper_type(name: str, namespace: str) -> TypeRef:
    """Reference to a generated mapper class inside the output namespace."""
    return TypeRef(f"{namespace}.{snake_case(name)}", name)


def dto_type_for(
    entity: TypeRef,
    entity_segment: str = "entity",
    dto_segment: str = "dto",
    dto_suffix: str = "Dto",
) -> TypeRef:
    """Guess the DTO paired with an entity type."""
    name = entity.short_name
    dto_name = name if name.endswith(dto_suffix) else name + dto_suffix
    module = _swap_module(entity.module, entity_segment, dto_segment, name, dto_name)
    return TypeRef(module, _rename(entity.name, dto_name))


def entity_type_for(
    dto: TypeRef,
    entity_segment: str = "entity",
    dto_segment: str = "dto",
    dto_suffix: str = "Dto",
) -> TypeRef:
    """Guess the entity paired with a DTO type. Inverse of dto_type_for."""
    name = dto.short_name
    entity_name = name
    if name.endswith(dto_suffix) and name != dto_suffix:
        entity_name = name[: -len(dto_suffix)]
    module = _swap_module(dto.module, dto_segment, entity_segment, name, entity_name)
    return TypeRef(module, _rename(dto.name, entity_name))


def _swap_module(module: str, old_segment: str, new_segment: str, old_name: str, new_name: str) -> str:
    parts = [new_segment if part == old_segment else part for part in module.split(".")]
    if parts[-1] == snake_case(old_name):
        parts[-1] = snake_case(new_name)
    return ".".join(parts)


def _rename(qualname: str, short_name: str) -> str:
    outer, dot, _ = qualname.rpartition(".")
    return f"{outer}{dot}{short_name}"
