"""Nested mapper dependency collection.

A property needs a nested mapper when its mapping entry declares a
collection item type, or when its declared type is a complex class rather
than a plain value. Each nested type is paired with its counterpart by
naming convention and given a deterministic mapper name in the output
namespace. Cycles in the type graph are not detected.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from mapper_gen.core.config import NamingConfig, OverrideTable
from mapper_gen.core.enums import Direction
from mapper_gen.core.naming import disambiguate, dto_type_for, entity_type_for, mapper_type, snake_case
from mapper_gen.core.types import TypeRef, is_complex
from mapper_gen.mapping.table import PropertyMappingTable
from mapper_gen.schema.model import TypeSchema


@dataclass(frozen=True)
class MapperDescriptor:
    """A generated (or to-be-generated) mapper class."""

    ref: TypeRef  # output module + class name
    source_type: TypeRef
    target_type: TypeRef
    dependencies: tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.ref.name


@dataclass(frozen=True)
class NestedBinding:
    """A property converted through a dependency mapper."""

    property_name: str
    mapper: MapperDescriptor
    collection: bool = False


@dataclass(frozen=True)
class Dependencies:
    """Nested mappers required by one direction of a pair."""

    mappers: list[MapperDescriptor] = field(default_factory=list)
    bindings: dict[str, NestedBinding] = field(default_factory=dict)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(m.name for m in self.mappers)


class DependencyCollector:
    """Determines the nested mappers a schema requires.

    Args:
        namespace: Output namespace of generated mappers.
        naming: Naming rules for pairing types and passthrough detection.
        overrides: Optional override table; an explicit mapper name for a
            derived pair wins over the default name.
    """

    def __init__(
        self,
        namespace: str,
        naming: NamingConfig | None = None,
        overrides: OverrideTable | None = None,
    ) -> None:
        self._namespace = namespace
        self._naming = naming or NamingConfig()
        self._overrides = overrides

    def collect(
        self,
        schema: TypeSchema,
        table: PropertyMappingTable,
        direction: Direction = Direction.FORWARD,
        named: Iterable[MapperDescriptor] = (),
    ) -> Dependencies:
        """Collect dependencies of every readable property of ``schema``.

        Two distinct nested types with the same short name never share a
        mapper: the later one is renamed after its module
        (``LegacyAddressMapper``).

        Args:
            schema: Schema of the side being converted from.
            table: Mapping table resolved for that side.
            direction: FORWARD when ``schema`` is the entity side, BACKWARD
                when it is the DTO side.
            named: Mappers already named for the same pair, typically those
                of the other direction. A nested type found there keeps its
                name.
        """
        mappers: dict[str, MapperDescriptor] = {}
        bindings: dict[str, NestedBinding] = {}
        known = {m.name: m for m in named}

        for prop, member in schema.readers().items():
            entry = table.entry_for(prop)
            declared = member.declared_type

            if entry.collection_item_type is not None:
                nested, collection = entry.collection_item_type, True
            elif declared is not None and declared.item is not None and self._is_complex(declared.item):
                nested, collection = declared.item, True
            elif declared is not None and self._is_complex(declared):
                nested, collection = declared, False
            else:
                continue

            descriptor = self._claim(self.descriptor_for(nested, direction), {**known, **mappers})
            descriptor = mappers.setdefault(descriptor.name, descriptor)
            bindings[prop] = NestedBinding(prop, descriptor, collection)

        return Dependencies(mappers=list(mappers.values()), bindings=bindings)

    def _claim(self, descriptor: MapperDescriptor, taken: dict[str, MapperDescriptor]) -> MapperDescriptor:
        for existing in taken.values():
            if existing.source_type == descriptor.source_type:
                return existing
        if descriptor.name not in taken:
            return descriptor

        entity = descriptor.source_type
        name = disambiguate(descriptor.name, entity.module, taken, snake_case(entity.short_name))
        return replace(descriptor, ref=mapper_type(name, self._namespace))

    def descriptor_for(self, nested: TypeRef, direction: Direction = Direction.FORWARD) -> MapperDescriptor:
        """Pair a nested type with its counterpart and name the mapper.

        The side of ``nested`` is read from its module path when it lies in
        the entity or DTO namespace, else from ``direction``. A seeded
        backward table carries entity item types, for instance.
        """
        naming = self._naming
        segments = nested.module.split(".")
        if naming.entity_segment in segments:
            direction = Direction.FORWARD
        elif naming.dto_segment in segments:
            direction = Direction.BACKWARD

        if direction is Direction.FORWARD:
            entity = nested
            dto = dto_type_for(nested, naming.entity_segment, naming.dto_segment, naming.dto_suffix)
        else:
            dto = nested
            entity = entity_type_for(nested, naming.entity_segment, naming.dto_segment, naming.dto_suffix)

        name = None
        if self._overrides is not None:
            name = self._overrides.get_mapper_name(entity, dto)
        if not name:
            name = entity.short_name + naming.mapper_suffix

        return MapperDescriptor(
            ref=mapper_type(name, self._namespace),
            source_type=TypeRef(entity.module, entity.name),
            target_type=TypeRef(dto.module, dto.name),
        )

    def _is_complex(self, ref: TypeRef | None) -> bool:
        return is_complex(ref, self._naming.passthrough_modules)
