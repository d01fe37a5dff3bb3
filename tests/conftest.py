"""Shared test fixtures."""

from __future__ import annotations

import importlib
from pathlib import Path
from types import ModuleType
from uuid import uuid4

import pytest

import sample_app
from mapper_gen.core.config import GeneratorConfig
from mapper_gen.schema.extractor import TypeSchemaExtractor


@pytest.fixture
def extractor() -> TypeSchemaExtractor:
    return TypeSchemaExtractor()


@pytest.fixture
def sample_root() -> Path:
    """Directory of the ``sample_app`` fixture package."""
    return Path(sample_app.__file__).parent


@pytest.fixture
def output_namespace() -> str:
    """Unique package name, so generated modules never clash across tests."""
    return f"gen_{uuid4().hex}"


@pytest.fixture
def sample_config(tmp_path: Path, sample_root: Path, output_namespace: str) -> GeneratorConfig:
    """Generator config pointing at ``sample_app``, writing into tmp_path."""
    return GeneratorConfig(
        entity_path=sample_root / "entity",
        entity_namespace="sample_app.entity",
        dto_path=sample_root / "dto",
        dto_namespace="sample_app.dto",
        output_path=tmp_path / output_namespace,
        namespace=output_namespace,
    )


@pytest.fixture
def import_generated(tmp_path: Path, output_namespace: str, monkeypatch: pytest.MonkeyPatch):
    """Helper to import a generated mapper module by file stem.

    Usage:
        module = import_generated("user_read_mapper")
    """
    monkeypatch.syspath_prepend(str(tmp_path))

    def _import(stem: str) -> ModuleType:
        importlib.invalidate_caches()
        return importlib.import_module(f"{output_namespace}.{stem}")

    return _import
