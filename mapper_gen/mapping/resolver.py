"""Mapping resolution.

Precedence for each field of the source schema:
    1. explicit MapTo marker on the field
    2. entry for the same property in the seed table
    3. identity (same property name, no custom mapper)

The collection item type is resolved separately: the field's own marker,
else the seed entry's item type.
"""

from __future__ import annotations

from mapper_gen.mapping.table import PropertyMappingEntry, PropertyMappingTable
from mapper_gen.schema.model import TypeSchema


class MappingResolver:
    """Builds one directional PropertyMappingTable for a source schema."""

    def resolve(
        self,
        schema: TypeSchema,
        seed: PropertyMappingTable | None = None,
    ) -> PropertyMappingTable:
        """Resolve every field of ``schema`` in declaration order.

        Args:
            schema: Schema of the side being converted from.
            seed: Optional table consulted before falling back to identity,
                typically the inverse of the opposite direction.

        Returns:
            A table keyed by property name. Never raises: missing
            information defaults to identity.
        """
        entries: list[PropertyMappingEntry] = []
        for info in schema.fields:
            prop = info.property_name
            annotation = schema.field_annotations.get(info.name)
            seeded = seed.get(prop) if seed is not None else None

            custom_mapper: str | None = None
            if annotation is not None and annotation.explicit_target_name:
                target = annotation.explicit_target_name
                custom_mapper = annotation.custom_mapper
            elif seeded is not None:
                target = seeded.target_field
                custom_mapper = seeded.custom_mapper
            else:
                target = prop

            if annotation is not None and annotation.collection_item_type is not None:
                item_type = annotation.collection_item_type
            else:
                item_type = seeded.collection_item_type if seeded is not None else None

            entries.append(
                PropertyMappingEntry(
                    source_field=prop,
                    target_field=target,
                    custom_mapper=custom_mapper,
                    collection_item_type=item_type,
                )
            )
        return PropertyMappingTable(entries)


def invert(table: PropertyMappingTable) -> PropertyMappingTable:
    """Reverse a table so it can seed the opposite direction.

    The collection item type is kept. The custom mapper is dropped since a
    forward transform is not its own inverse.
    """
    return PropertyMappingTable(
        [
            PropertyMappingEntry(
                source_field=entry.target_field,
                target_field=entry.source_field,
                collection_item_type=entry.collection_item_type,
            )
            for entry in table
        ]
    )
