"""Enumerations shared across the pipeline."""

from __future__ import annotations

from enum import Enum


class Visibility(Enum):
    """Field visibility, derived from the leading-underscore convention."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class AccessKind(Enum):
    """How a property is read or written on an instance."""

    METHOD = "method"
    ATTRIBUTE = "attribute"


class Direction(Enum):
    """Conversion direction of a mapping table or generated method."""

    FORWARD = "forward"
    BACKWARD = "backward"


class PairOutcome(Enum):
    """Result of processing one (source, target) pair."""

    GENERATED = "generated"
    SKIPPED = "skipped"
    FAILED = "failed"
