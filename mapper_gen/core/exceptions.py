"""mapper-gen exception hierarchy.

Only configuration and schema problems are errors. A property that has no
counterpart on the other side is not: it degrades to ``None`` in the
generated code.
"""

from __future__ import annotations


class MapperGenError(Exception):
    """Base exception for all mapper-gen errors."""


# --- Configuration ---


class ConfigurationError(MapperGenError):
    """Base for configuration errors. Fatal before any generation starts."""


class MissingPathError(ConfigurationError):
    """Raised when a source or target directory does not exist."""

    def __init__(self, kind: str, path: str) -> None:
        self.kind = kind
        self.path = path
        super().__init__(f"{kind} directory not found: {path}")


class OverrideFileError(ConfigurationError):
    """Raised when the override file cannot be parsed."""

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        super().__init__(f"Invalid override file '{path}': {detail}")


# --- Schema ---


class SchemaError(MapperGenError):
    """Raised when a type cannot be introspected.

    Fatal to the pair being generated; the batch continues.
    """

    def __init__(self, type_id: str, detail: str) -> None:
        self.type_id = type_id
        super().__init__(f"Cannot introspect '{type_id}': {detail}")


class TypeNotFoundError(SchemaError):
    """Raised when a type identifier does not resolve to a class."""
