"""mapper-gen - static bidirectional entity <-> DTO mapper generation."""

from __future__ import annotations

from mapper_gen.core.config import GeneratorConfig, NamingConfig, OverrideEntry, OverrideTable
from mapper_gen.core.discovery import MappingPair, PairDiscovery
from mapper_gen.core.enums import AccessKind, Direction, PairOutcome, Visibility
from mapper_gen.core.exceptions import (
    ConfigurationError,
    MapperGenError,
    MissingPathError,
    OverrideFileError,
    SchemaError,
    TypeNotFoundError,
)
from mapper_gen.core.manager import GenerationManager, GenerationReport
from mapper_gen.core.types import TypeRef
from mapper_gen.generation.emitter import CodeEmitter, MapperUnit
from mapper_gen.generation.generator import GeneratedMapper, MapperGenerator
from mapper_gen.mapping.dependencies import DependencyCollector, MapperDescriptor
from mapper_gen.mapping.resolver import MappingResolver
from mapper_gen.mapping.table import PropertyMappingEntry, PropertyMappingTable
from mapper_gen.schema.annotations import MapCollection, MapTo, maps_from
from mapper_gen.schema.extractor import TypeSchemaExtractor
from mapper_gen.schema.model import TypeSchema

__all__ = [
    # Markers
    "MapTo",
    "MapCollection",
    "maps_from",
    # Configuration
    "GeneratorConfig",
    "NamingConfig",
    "OverrideEntry",
    "OverrideTable",
    # Pipeline
    "TypeRef",
    "TypeSchema",
    "TypeSchemaExtractor",
    "PropertyMappingEntry",
    "PropertyMappingTable",
    "MappingResolver",
    "DependencyCollector",
    "MapperDescriptor",
    "MapperUnit",
    "CodeEmitter",
    "MapperGenerator",
    "GeneratedMapper",
    # Orchestration
    "MappingPair",
    "PairDiscovery",
    "GenerationManager",
    "GenerationReport",
    # Enums
    "AccessKind",
    "Direction",
    "PairOutcome",
    "Visibility",
    # Exceptions
    "MapperGenError",
    "ConfigurationError",
    "MissingPathError",
    "OverrideFileError",
    "SchemaError",
    "TypeNotFoundError",
]
