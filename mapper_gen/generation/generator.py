"""Per-pair generation pipeline.

extract both schemas -> resolve forward table -> resolve backward table
-> collect dependencies of both directions -> emit module source.

Nothing is cached between calls; each pair is introspected afresh.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from mapper_gen.core.config import NamingConfig, OverrideTable
from mapper_gen.core.enums import Direction
from mapper_gen.core.naming import mapper_type
from mapper_gen.core.types import TypeRef
from mapper_gen.generation.emitter import CodeEmitter, MapperUnit
from mapper_gen.mapping.dependencies import DependencyCollector, MapperDescriptor
from mapper_gen.mapping.resolver import MappingResolver, invert
from mapper_gen.schema.extractor import TypeSchemaExtractor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedMapper:
    """Source text of one mapper module and what it depends on."""

    descriptor: MapperDescriptor
    source_text: str
    required: tuple[MapperDescriptor, ...] = ()


class MapperGenerator:
    """Generates the module of one (source, target) mapper.

    Args:
        namespace: Output namespace the generated mappers live in.
        naming: Naming rules; defaults to NamingConfig().
        overrides: Override table consulted when naming nested mappers.
    """

    def __init__(
        self,
        namespace: str,
        naming: NamingConfig | None = None,
        overrides: OverrideTable | None = None,
    ) -> None:
        self._namespace = namespace
        self._naming = naming or NamingConfig()
        self._extractor = TypeSchemaExtractor(self._naming.passthrough_modules)
        self._resolver = MappingResolver()
        self._collector = DependencyCollector(namespace, self._naming, overrides)
        self._emitter = CodeEmitter(self._naming)

    def generate(
        self,
        source: TypeRef | type | str,
        target: TypeRef | type | str,
        mapper_name: str,
    ) -> GeneratedMapper:
        """Run the full pipeline for one pair.

        Raises:
            SchemaError: If either type cannot be introspected.
        """
        source_schema = self._extractor.extract(source)
        target_schema = self._extractor.extract(target)

        forward_table = self._resolver.resolve(source_schema)
        seed = invert(forward_table) if self._naming.thread_reverse_mapping else None
        backward_table = self._resolver.resolve(target_schema, seed)

        forward_deps = self._collector.collect(source_schema, forward_table, Direction.FORWARD)
        backward_deps = self._collector.collect(
            target_schema, backward_table, Direction.BACKWARD, named=forward_deps.mappers
        )

        unit = MapperUnit(
            name=mapper_name,
            source=source_schema,
            target=target_schema,
            forward_table=forward_table,
            backward_table=backward_table,
            forward_dependencies=forward_deps,
            backward_dependencies=backward_deps,
        )
        required = tuple(unit.mappers)
        source_text = self._emitter.emit(unit)

        descriptor = MapperDescriptor(
            ref=mapper_type(mapper_name, self._namespace),
            source_type=source_schema.type_ref,
            target_type=target_schema.type_ref,
            dependencies=tuple(m.name for m in required),
        )
        logger.debug(
            "Generated %s (%s -> %s), dependencies: %s",
            mapper_name,
            source_schema.type_ref,
            target_schema.type_ref,
            ", ".join(descriptor.dependencies) or "none",
        )
        return GeneratedMapper(descriptor=descriptor, source_text=source_text, required=required)
