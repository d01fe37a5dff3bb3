"""Entity/DTO pair discovery.

Modules are found by scanning directories, and module names are built
from the configured namespace plus the relative path:

    src/entity/user.py          -> app.entity.user
    src/entity/billing/plan.py  -> app.entity.billing.plan

An entity ``User`` pairs with every DTO whose class name matches
``User*Dto`` (``UserDto``, ``UserReadDto``, ...).
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType

from mapper_gen.core.config import GeneratorConfig, OverrideTable
from mapper_gen.core.exceptions import SchemaError
from mapper_gen.core.types import TypeRef
from mapper_gen.schema.annotations import MAPS_FROM_ATTR, MapsFrom

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MappingPair:
    """One (source, target) pair queued for generation."""

    source: TypeRef
    target: TypeRef
    mapper_name: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.source.qualified_name, self.target.qualified_name)


def module_names(root_dir: Path | str, namespace: str) -> list[str]:
    """Dotted module names of every ``.py`` file under ``root_dir``, sorted by path."""
    root = Path(root_dir)
    if not root.is_dir():
        return []

    names: list[str] = []
    for py_file in sorted(root.rglob("*.py")):
        parts = list(py_file.relative_to(root).with_suffix("").parts)
        if parts[-1] == "__init__":
            parts.pop()
        names.append(".".join([namespace, *parts]))
    return names


class PairDiscovery:
    """Finds entity/DTO pairs in the configured directories.

    Args:
        config: Paths, namespaces and naming rules of the run.
    """

    def __init__(self, config: GeneratorConfig) -> None:
        self._config = config

    def entity_classes(self) -> list[type]:
        return self._classes(self._config.entity_path, self._config.entity_namespace)

    def dto_classes(self) -> list[type]:
        return self._classes(self._config.dto_path, self._config.dto_namespace)

    def discover(self, overrides: OverrideTable) -> list[MappingPair]:
        """Pairs found by naming convention that the override table does not already hold.

        DTOs decorated with ``@maps_from`` are registered in ``overrides``
        first, so they are generated as override entries whatever their name.
        """
        suffix = self._config.naming.dto_suffix
        dtos = self.dto_classes()

        for dto in dtos:
            marker = vars(dto).get(MAPS_FROM_ATTR)
            if not isinstance(marker, MapsFrom):
                continue
            try:
                overrides.add(marker.source, dto, marker.mapper_name)
            except SchemaError as e:
                logger.warning("Ignoring @maps_from on %s: %s", dto.__qualname__, e)
                continue
            logger.debug("%s maps from %s", dto.__qualname__, marker.source)

        pairs: list[MappingPair] = []
        for entity in self.entity_classes():
            for dto in dtos:
                name = dto.__name__
                if not (name.startswith(entity.__name__) and name.endswith(suffix)):
                    continue
                if overrides.is_mapped(entity, dto):
                    continue
                pairs.append(MappingPair(TypeRef.of(entity), TypeRef.of(dto)))

        logger.info("Discovered %d pair(s) by naming convention", len(pairs))
        return pairs

    def _classes(self, root_dir: Path, namespace: str) -> list[type]:
        classes: list[type] = []
        for name in module_names(root_dir, namespace):
            module = self._import(name)
            if module is None:
                continue
            classes.extend(
                obj for obj in vars(module).values() if isinstance(obj, type) and obj.__module__ == module.__name__
            )
        return classes

    def _import(self, name: str) -> ModuleType | None:
        try:
            return importlib.import_module(name)
        except Exception as e:
            logger.warning("Skipping module %s: %s", name, e)
            return None
