"""Property mapping tables.

A table maps each property of one side to a property of the other side,
for a single direction. The forward and backward tables of a pair are
built independently; neither is derived from the other unless a caller
threads one in as the seed of the other.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from mapper_gen.core.types import TypeRef


@dataclass(frozen=True)
class PropertyMappingEntry:
    """Where one source property goes on the destination."""

    source_field: str
    target_field: str
    custom_mapper: str | None = None
    collection_item_type: TypeRef | None = None


class PropertyMappingTable:
    """Ordered source property -> PropertyMappingEntry mapping."""

    def __init__(self, entries: list[PropertyMappingEntry] | None = None) -> None:
        self._entries: dict[str, PropertyMappingEntry] = {}
        for entry in entries or []:
            self._entries[entry.source_field] = entry

    def get(self, source_field: str) -> PropertyMappingEntry | None:
        return self._entries.get(source_field)

    def entry_for(self, source_field: str) -> PropertyMappingEntry:
        """Entry for a property, or an identity entry when none was resolved."""
        entry = self._entries.get(source_field)
        if entry is None:
            return PropertyMappingEntry(source_field=source_field, target_field=source_field)
        return entry

    def target_of(self, source_field: str) -> str:
        return self.entry_for(source_field).target_field

    def __contains__(self, source_field: object) -> bool:
        return source_field in self._entries

    def __iter__(self) -> Iterator[PropertyMappingEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{e.source_field}->{e.target_field}" for e in self)
        return f"PropertyMappingTable({pairs})"
