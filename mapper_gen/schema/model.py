"""TypeSchema data classes.

Frozen dataclasses describing one introspected type. They carry no
behavior beyond read-only views over the collected members.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mapper_gen.core.enums import AccessKind, Visibility
from mapper_gen.core.types import TypeRef


@dataclass(frozen=True)
class FieldInfo:
    """A declared field or ``@property`` of a type."""

    name: str
    property_name: str  # name without leading underscores
    declared_type: TypeRef | None
    visibility: Visibility
    read_only: bool = False


@dataclass(frozen=True)
class ConstructorParam:
    """A parameter of the type's constructor."""

    name: str
    declared_type: TypeRef | None
    has_default: bool = False
    default_value: Any = None
    positional_only: bool = False


@dataclass(frozen=True)
class FieldAnnotation:
    """Per-field mapping metadata."""

    explicit_target_name: str | None = None
    custom_mapper: str | None = None
    collection_item_type: TypeRef | None = None


@dataclass(frozen=True)
class ClassAnnotation:
    """Per-type pairing metadata."""

    paired_source_type: TypeRef | None = None
    explicit_mapper_name: str | None = None


@dataclass(frozen=True)
class Member:
    """How one property is read from or written to an instance."""

    property_name: str
    member_name: str
    kind: AccessKind
    declared_type: TypeRef | None


@dataclass(frozen=True)
class TypeSchema:
    """Introspected description of one type."""

    type_ref: TypeRef
    fields: list[FieldInfo] = field(default_factory=list)
    accessors: dict[str, str] = field(default_factory=dict)  # property -> method
    mutators: dict[str, str] = field(default_factory=dict)  # property -> method
    constructor_params: list[ConstructorParam] = field(default_factory=list)
    field_annotations: dict[str, FieldAnnotation] = field(default_factory=dict)
    class_annotation: ClassAnnotation | None = None
    accessor_types: dict[str, TypeRef | None] = field(default_factory=dict)
    mutator_types: dict[str, TypeRef | None] = field(default_factory=dict)

    @property
    def public_fields(self) -> list[FieldInfo]:
        return [f for f in self.fields if f.visibility is Visibility.PUBLIC]

    def readers(self) -> dict[str, Member]:
        """Readable properties: accessor methods, then public fields.

        An accessor wins over a public field of the same property.
        """
        declared = {info.property_name: info.declared_type for info in self.fields}
        readers: dict[str, Member] = {}
        for prop, method in self.accessors.items():
            value_type = self.accessor_types.get(prop) or declared.get(prop)
            readers[prop] = Member(prop, method, AccessKind.METHOD, value_type)
        for info in self.public_fields:
            readers.setdefault(
                info.property_name,
                Member(info.property_name, info.name, AccessKind.ATTRIBUTE, info.declared_type),
            )
        return readers

    def writers(self) -> dict[str, Member]:
        """Writable properties: mutator methods, then writable public fields."""
        writers: dict[str, Member] = {}
        for prop, method in self.mutators.items():
            writers[prop] = Member(prop, method, AccessKind.METHOD, self.mutator_types.get(prop))
        for info in self.public_fields:
            if info.read_only:
                continue
            writers.setdefault(
                info.property_name,
                Member(info.property_name, info.name, AccessKind.ATTRIBUTE, info.declared_type),
            )
        return writers
