"""Generation layer - turn resolved mappings into mapper module source."""

from __future__ import annotations

from mapper_gen.generation.emitter import CodeEmitter, MapperUnit
from mapper_gen.generation.generator import GeneratedMapper, MapperGenerator
from mapper_gen.generation.imports import ImportedName, ImportRegistry

__all__ = [
    "CodeEmitter",
    "MapperUnit",
    "MapperGenerator",
    "GeneratedMapper",
    "ImportRegistry",
    "ImportedName",
]
