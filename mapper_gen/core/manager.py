"""Generation run orchestration.

A run validates the configured directories, builds a worklist (override
entries first, then pairs discovered by naming convention), generates
each pair and writes one module per mapper:

    generated/mapper/user_read_mapper.py  -> generated.mapper.user_read_mapper

Nested mappers a generated module depends on are appended to the worklist
when first seen. Existing modules are never overwritten.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from mapper_gen.core.config import GeneratorConfig, OverrideTable
from mapper_gen.core.discovery import MappingPair, PairDiscovery
from mapper_gen.core.enums import PairOutcome
from mapper_gen.core.exceptions import MissingPathError, SchemaError
from mapper_gen.core.naming import default_mapper_name, snake_case
from mapper_gen.core.types import TypeRef
from mapper_gen.generation.generator import MapperGenerator

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[MappingPair, str, PairOutcome], None]


@dataclass
class GenerationReport:
    """Outcome of a run, by mapper name."""

    output_path: Path
    generated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)  # mapper name -> error

    @property
    def total(self) -> int:
        return len(self.generated) + len(self.skipped) + len(self.failed)


class GenerationManager:
    """Runs the generator over every pair of a project.

    Args:
        config: Paths, namespaces and naming rules of the run.
        overrides: Explicit pairings; ``@maps_from`` pairings found during
            discovery are added to it.
    """

    def __init__(self, config: GeneratorConfig, overrides: OverrideTable | None = None) -> None:
        self._config = config
        self._overrides = overrides if overrides is not None else OverrideTable()
        self._discovery = PairDiscovery(config)
        self._generator = MapperGenerator(config.namespace, config.naming, self._overrides)

    @property
    def overrides(self) -> OverrideTable:
        return self._overrides

    def validate(self) -> None:
        """Check that both input directories exist.

        Raises:
            MissingPathError: If the entity or DTO directory is missing.
        """
        if not self._config.entity_path.is_dir():
            raise MissingPathError("Entity", str(self._config.entity_path))
        if not self._config.dto_path.is_dir():
            raise MissingPathError("DTO", str(self._config.dto_path))

    def clear(self) -> int:
        """Delete the files of the output directory. Returns how many were removed."""
        output = self._config.output_path
        if not output.is_dir():
            return 0
        removed = 0
        for path in sorted(output.iterdir()):
            if path.is_file():
                path.unlink()
                removed += 1
        logger.info("Cleared %d file(s) from %s", removed, output)
        return removed

    def pairs(self) -> list[MappingPair]:
        """Initial worklist: override entries, then discovered pairs."""
        discovered = self._discovery.discover(self._overrides)
        explicit = [
            MappingPair(TypeRef.parse(entry.source), TypeRef.parse(entry.target), entry.mapper_name)
            for entry in self._overrides.entries
        ]
        return explicit + discovered

    def mapper_name(self, pair: MappingPair) -> str:
        """Override name, else the default name derived from the pair."""
        if pair.mapper_name:
            return pair.mapper_name
        name = self._overrides.get_mapper_name(pair.source, pair.target)
        if name:
            return name
        naming = self._config.naming
        return default_mapper_name(pair.source, pair.target, naming.dto_suffix, naming.mapper_suffix)

    def output_file(self, mapper_name: str) -> Path:
        return self._config.output_path / f"{snake_case(mapper_name)}.py"

    def run(self, on_progress: ProgressCallback | None = None) -> GenerationReport:
        """Validate, optionally clear, then generate every pair.

        Args:
            on_progress: Called once per processed pair.

        Raises:
            MissingPathError: If an input directory is missing. Nothing is
                generated in that case.
        """
        self.validate()
        if self._config.clear:
            self.clear()
        self._ensure_package()

        report = GenerationReport(output_path=self._config.output_path)
        queue = deque(self.pairs())
        seen_pairs: set[tuple[str, str]] = set()
        seen_names: set[str] = set()

        while queue:
            pair = queue.popleft()
            name = self.mapper_name(pair)
            if pair.key in seen_pairs or name in seen_names:
                continue
            seen_pairs.add(pair.key)
            seen_names.add(name)

            outcome = self._process(pair, name, report, queue)
            if on_progress is not None:
                on_progress(pair, name, outcome)

        logger.info(
            "Generated %d mapper(s) in %s (%d skipped, %d failed)",
            len(report.generated),
            report.output_path,
            len(report.skipped),
            len(report.failed),
        )
        return report

    def _process(
        self,
        pair: MappingPair,
        name: str,
        report: GenerationReport,
        queue: deque[MappingPair],
    ) -> PairOutcome:
        output_file = self.output_file(name)
        if output_file.exists():
            logger.debug("Skipping %s: %s already exists", name, output_file)
            report.skipped.append(name)
            return PairOutcome.SKIPPED

        try:
            generated = self._generator.generate(pair.source, pair.target, name)
        except SchemaError as e:
            logger.error("Failed to generate %s: %s", name, e)
            report.failed[name] = str(e)
            return PairOutcome.FAILED

        try:
            output_file.write_text(generated.source_text, encoding="utf-8")
        except OSError as e:
            logger.error("Cannot write %s: %s", output_file, e)
        report.generated.append(name)

        if self._config.follow_dependencies:
            for dependency in generated.required:
                queue.append(MappingPair(dependency.source_type, dependency.target_type, dependency.name))
        return PairOutcome.GENERATED

    def _ensure_package(self) -> None:
        output = self._config.output_path
        output.mkdir(parents=True, exist_ok=True)
        init_file = output / "__init__.py"
        if not init_file.exists():
            init_file.write_text("", encoding="utf-8")