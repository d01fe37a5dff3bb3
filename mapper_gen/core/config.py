"""Generator configuration and the mapper override table.

GeneratorConfig / NamingConfig are Pydantic models for type-safe settings.
OverrideTable holds explicit (source, target, mapper_name) pairings loaded
from YAML. It is mutated in memory during a run as class-level pairings are
discovered and is never written back.

Override file format:

    mappers:
      - source: app.entity.user.User        # alias: entity
        target: app.dto.user_read_dto.UserReadDto   # alias: dto
        mapper_name: UserReadMapper         # optional
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from mapper_gen.core.exceptions import OverrideFileError, SchemaError
from mapper_gen.core.types import PASSTHROUGH_MODULES, TypeRef


class NamingConfig(BaseModel):
    """Naming rules shared by dependency collection and emission."""

    entity_segment: str = "entity"
    dto_segment: str = "dto"
    dto_suffix: str = "Dto"
    mapper_suffix: str = "Mapper"
    forward_method: str = "to_dto"
    backward_method: str = "to_entity"
    # Types from these modules are copied as-is, never given a nested mapper.
    passthrough_modules: list[str] = list(PASSTHROUGH_MODULES)
    # Seed the backward table with the inverted forward table.
    thread_reverse_mapping: bool = True


class GeneratorConfig(BaseModel):
    """Configuration for a generation run."""

    entity_path: Path = Path("src/entity")
    entity_namespace: str = "app.entity"
    dto_path: Path = Path("src/dto")
    dto_namespace: str = "app.dto"
    output_path: Path = Path("generated/mapper")
    namespace: str = "generated.mapper"
    clear: bool = False
    follow_dependencies: bool = True
    naming: NamingConfig = Field(default_factory=NamingConfig)


class OverrideEntry(BaseModel):
    """One explicit pairing from the override file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str = Field(validation_alias=AliasChoices("source", "entity"))
    target: str = Field(validation_alias=AliasChoices("target", "dto"))
    mapper_name: str | None = None


def _key(value: TypeRef | type | str) -> str:
    return TypeRef.coerce(value).qualified_name


class OverrideTable:
    """Ordered list of explicit pairings, keyed by (source, target)."""

    def __init__(self, entries: list[OverrideEntry] | None = None) -> None:
        self._entries: list[OverrideEntry] = []
        for entry in entries or []:
            self.add(entry.source, entry.target, entry.mapper_name)

    @classmethod
    def from_yaml_file(cls, file_path: Path | str) -> OverrideTable:
        """Load the table from YAML. A missing file yields an empty table.

        Raises:
            OverrideFileError: If the file is not valid YAML or an entry is malformed.
        """
        path = Path(file_path)
        if not path.exists():
            return cls()

        try:
            data: Any = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise OverrideFileError(str(path), str(e)) from e

        if not isinstance(data, dict):
            raise OverrideFileError(str(path), "top level must be a mapping")

        try:
            entries = [OverrideEntry.model_validate(item) for item in data.get("mappers") or []]
            return cls(entries)
        except (ValidationError, SchemaError) as e:
            raise OverrideFileError(str(path), str(e)) from e

    @property
    def entries(self) -> list[OverrideEntry]:
        return list(self._entries)

    def entries_for_source(self, source: TypeRef | type | str) -> list[OverrideEntry]:
        key = _key(source)
        return [e for e in self._entries if e.source == key]

    def is_mapped(self, source: TypeRef | type | str, target: TypeRef | type | str) -> bool:
        return self._find(_key(source), _key(target)) is not None

    def get_mapper_name(self, source: TypeRef | type | str, target: TypeRef | type | str) -> str | None:
        entry = self._find(_key(source), _key(target))
        return entry.mapper_name if entry is not None else None

    def add(
        self,
        source: TypeRef | type | str,
        target: TypeRef | type | str,
        mapper_name: str | None = None,
    ) -> None:
        """Register a pairing unless the pair is already known."""
        source_key, target_key = _key(source), _key(target)
        if self._find(source_key, target_key) is None:
            self._entries.append(
                OverrideEntry(source=source_key, target=target_key, mapper_name=mapper_name)
            )

    def _find(self, source: str, target: str) -> OverrideEntry | None:
        for entry in self._entries:
            if entry.source == source and entry.target == target:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries)
