"""Schema layer - introspect classes into TypeSchema descriptions."""

from __future__ import annotations

from mapper_gen.schema.annotations import MapCollection, MapsFrom, MapTo, maps_from
from mapper_gen.schema.extractor import TypeSchemaExtractor
from mapper_gen.schema.model import (
    ClassAnnotation,
    ConstructorParam,
    FieldAnnotation,
    FieldInfo,
    Member,
    TypeSchema,
)

__all__ = [
    "MapTo",
    "MapCollection",
    "MapsFrom",
    "maps_from",
    "TypeSchemaExtractor",
    "TypeSchema",
    "FieldInfo",
    "ConstructorParam",
    "FieldAnnotation",
    "ClassAnnotation",
    "Member",
]
