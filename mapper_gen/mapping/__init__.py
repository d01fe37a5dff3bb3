"""Mapping layer - resolve property correspondences and nested dependencies."""

from __future__ import annotations

from mapper_gen.mapping.dependencies import (
    Dependencies,
    DependencyCollector,
    MapperDescriptor,
    NestedBinding,
)
from mapper_gen.mapping.resolver import MappingResolver, invert
from mapper_gen.mapping.table import PropertyMappingEntry, PropertyMappingTable

__all__ = [
    "PropertyMappingEntry",
    "PropertyMappingTable",
    "MappingResolver",
    "invert",
    "DependencyCollector",
    "Dependencies",
    "MapperDescriptor",
    "NestedBinding",
]
