"""Type schema extraction.

Builds a TypeSchema from a class using ``inspect`` and ``typing``.
Supports dataclasses, Pydantic models, and plain classes.

Member conventions:
    get_name() / getName()  -> accessor of property "name"
    is_active() / isActive() -> accessor of property "active"
    set_name(v) / setName(v) -> mutator of property "name"
    _name: str               -> protected field of property "name"
"""

from __future__ import annotations

import collections.abc
import importlib
import inspect
import logging
import re
import types
from enum import Enum
from typing import Annotated, Any, ClassVar, Union, get_args, get_origin

from mapper_gen.core.enums import Visibility
from mapper_gen.core.exceptions import TypeNotFoundError
from mapper_gen.core.types import PASSTHROUGH_MODULES, TypeRef, is_complex
from mapper_gen.schema.annotations import MAPS_FROM_ATTR, MapCollection, MapsFrom, MapTo
from mapper_gen.schema.model import (
    ClassAnnotation,
    ConstructorParam,
    FieldAnnotation,
    FieldInfo,
    TypeSchema,
)

logger = logging.getLogger(__name__)

_ACCESSOR_PATTERN = re.compile(r"^(?:get|is)(?:_(?P<snake>\w+)|(?P<camel>[A-Z]\w*))$")
_MUTATOR_PATTERN = re.compile(r"^set(?:_(?P<snake>\w+)|(?P<camel>[A-Z]\w*))$")

# Bases whose members are framework plumbing, never part of a user schema.
_FRAMEWORK_MODULES = ("builtins", "pydantic", "pydantic_core", "typing", "abc", "enum")

_COLLECTION_ORIGINS = {
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Collection,
    collections.abc.Iterable,
    collections.abc.MutableSequence,
    collections.abc.MutableSet,
    collections.abc.Sequence,
    collections.abc.Set,
}
_MAPPING_ORIGINS = {dict, collections.abc.Mapping, collections.abc.MutableMapping}
_UNEVALUATED = (NameError, AttributeError, SyntaxError, TypeError)


def _property_name(match: re.Match[str]) -> str:
    if match.group("snake"):
        return match.group("snake")
    camel = match.group("camel")
    return camel[0].lower() + camel[1:]


def _is_framework(klass: type) -> bool:
    return klass is object or klass.__module__.split(".")[0] in _FRAMEWORK_MODULES


def _user_mro(cls: type) -> list[type]:
    """Classes of the MRO that carry user declarations, base first."""
    return [klass for klass in reversed(cls.__mro__) if not _is_framework(klass)]


def _annotations_of(obj: Any) -> dict[str, Any]:
    """Own annotations of a class or function.

    String annotations are evaluated when all of them resolve; otherwise
    the raw annotations are returned and unresolved ones stay strings.
    """
    try:
        return inspect.get_annotations(obj, eval_str=True)
    except _UNEVALUATED as e:
        logger.debug("Leaving annotations of %s unresolved: %s", obj.__qualname__, e)
    try:
        return inspect.get_annotations(obj)
    except NameError as e:
        logger.debug("Cannot read annotations of %s: %s", obj.__qualname__, e)
        return {}


def _signature(cls: type) -> inspect.Signature:
    """Constructor signature with annotations evaluated where possible."""
    try:
        return inspect.signature(cls, eval_str=True)
    except _UNEVALUATED as e:
        logger.debug("Leaving constructor annotations of %s unresolved: %s", cls.__qualname__, e)
    return inspect.signature(cls)


def _unmangle(klass: type, name: str) -> tuple[str, Visibility]:
    mangled_prefix = f"_{klass.__name__.lstrip('_')}__"
    if name.startswith(mangled_prefix):
        return "__" + name[len(mangled_prefix) :], Visibility.PRIVATE
    if name.startswith("__"):
        return name, Visibility.PRIVATE
    if name.startswith("_"):
        return name, Visibility.PROTECTED
    return name, Visibility.PUBLIC


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.split("[", 1)[0].rpartition(".")[2] == "ClassVar"
    if get_origin(annotation) is Annotated:
        return _is_class_var(get_args(annotation)[0])
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def _markers(annotation: Any) -> list[Any]:
    """Metadata objects attached through Annotated, looking inside Optional."""
    origin = get_origin(annotation)
    if origin is Annotated:
        return list(annotation.__metadata__) + _markers(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        found: list[Any] = []
        for arg in get_args(annotation):
            found.extend(_markers(arg))
        return found
    return []


def type_ref(annotation: Any) -> TypeRef | None:
    """Convert a type annotation into a TypeRef.

    Optional[X] collapses to X, typed collections become ``builtins.list``
    with an item type, anything not naming a single class yields None.
    """
    if annotation is None or annotation is inspect.Parameter.empty or isinstance(annotation, str):
        return None

    origin = get_origin(annotation)
    if origin is Annotated:
        return type_ref(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        return type_ref(members[0]) if len(members) == 1 else None
    if origin in _COLLECTION_ORIGINS:
        args = [arg for arg in get_args(annotation) if arg is not Ellipsis]
        return TypeRef("builtins", "list", item=type_ref(args[0]) if args else None)
    if origin in _MAPPING_ORIGINS:
        return TypeRef("builtins", "dict")
    if origin is not None:
        return TypeRef.of(origin) if isinstance(origin, type) else None

    if not isinstance(annotation, type) or annotation is type(None):
        return None
    if annotation in _COLLECTION_ORIGINS:
        return TypeRef("builtins", "list")
    if annotation in _MAPPING_ORIGINS:
        return TypeRef("builtins", "dict")
    if issubclass(annotation, Enum):
        return TypeRef(annotation.__module__, annotation.__qualname__, scalar=True)
    return TypeRef.of(annotation)


class TypeSchemaExtractor:
    """Introspects classes into TypeSchema instances.

    Every operation accepts a class, a TypeRef, or a dotted type identifier.

    Args:
        passthrough_modules: Modules whose types count as plain values when
            inferring collection item types.
    """

    def __init__(self, passthrough_modules: tuple[str, ...] | list[str] = PASSTHROUGH_MODULES) -> None:
        self._passthrough_modules = tuple(passthrough_modules)

    def resolve_class(self, type_or_ref: TypeRef | type | str) -> type:
        """Import the class named by a type identifier.

        Raises:
            TypeNotFoundError: If the module cannot be imported or the name
                does not resolve to a class.
        """
        if isinstance(type_or_ref, type):
            return type_or_ref

        ref = TypeRef.coerce(type_or_ref)
        try:
            obj: Any = importlib.import_module(ref.module)
        except Exception as e:
            raise TypeNotFoundError(str(ref), f"module '{ref.module}' cannot be imported: {e}") from e

        for part in ref.name.split("."):
            try:
                obj = getattr(obj, part)
            except AttributeError:
                raise TypeNotFoundError(str(ref), f"'{part}' not found in '{ref.module}'") from None

        if not isinstance(obj, type):
            raise TypeNotFoundError(str(ref), "not a class")
        return obj

    def extract(self, type_or_ref: TypeRef | type | str) -> TypeSchema:
        """Build the complete schema of one type."""
        cls = self.resolve_class(type_or_ref)
        fields = self._fields(cls)
        accessors = self._methods(cls, _ACCESSOR_PATTERN, required=0)
        mutators = self._methods(cls, _MUTATOR_PATTERN, required=1)

        field_annotations: dict[str, FieldAnnotation] = {}
        for name, (klass, annotation) in self._annotations(cls).items():
            if _is_dunder(name) or _is_class_var(annotation):
                continue
            metadata = self._annotation_from(annotation)
            if metadata is not None:
                field_annotations[_unmangle(klass, name)[0]] = metadata

        schema = TypeSchema(
            type_ref=TypeRef.of(cls),
            fields=fields,
            accessors={prop: name for prop, (name, _) in accessors.items()},
            mutators={prop: name for prop, (name, _) in mutators.items()},
            constructor_params=self._constructor_params(cls),
            field_annotations=field_annotations,
            class_annotation=self._class_annotation(cls),
            accessor_types={prop: ref for prop, (_, ref) in accessors.items()},
            mutator_types={prop: ref for prop, (_, ref) in mutators.items()},
        )
        logger.debug(
            "Extracted %s: %d fields, %d accessors, %d mutators, %d constructor params",
            schema.type_ref,
            len(schema.fields),
            len(schema.accessors),
            len(schema.mutators),
            len(schema.constructor_params),
        )
        return schema

    def fields(self, type_or_ref: TypeRef | type | str) -> list[str]:
        """Names of public, non-static fields in declaration order."""
        cls = self.resolve_class(type_or_ref)
        return [f.name for f in self._fields(cls) if f.visibility is Visibility.PUBLIC]

    def accessors(self, type_or_ref: TypeRef | type | str) -> dict[str, str]:
        """Property name -> accessor method name."""
        cls = self.resolve_class(type_or_ref)
        return {prop: name for prop, (name, _) in self._methods(cls, _ACCESSOR_PATTERN, 0).items()}

    def mutators(self, type_or_ref: TypeRef | type | str) -> dict[str, str]:
        """Property name -> mutator method name."""
        cls = self.resolve_class(type_or_ref)
        return {prop: name for prop, (name, _) in self._methods(cls, _MUTATOR_PATTERN, 1).items()}

    def constructor_params(self, type_or_ref: TypeRef | type | str) -> list[ConstructorParam]:
        """Constructor parameters in declaration order, empty without ``__init__``."""
        return self._constructor_params(self.resolve_class(type_or_ref))

    def field_annotation(self, type_or_ref: TypeRef | type | str, field_name: str) -> FieldAnnotation | None:
        """Mapping metadata declared on one field, or None."""
        return self._field_annotation(self.resolve_class(type_or_ref), field_name)

    def class_annotation(self, type_or_ref: TypeRef | type | str) -> ClassAnnotation | None:
        """Pairing metadata declared with ``@maps_from``, or None."""
        return self._class_annotation(self.resolve_class(type_or_ref))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _annotations(self, cls: type) -> dict[str, tuple[type, Any]]:
        """Field name -> (declaring class, annotation), base classes first."""
        merged: dict[str, tuple[type, Any]] = {}
        for klass in _user_mro(cls):
            for name, annotation in _annotations_of(klass).items():
                merged[name] = (klass, annotation)
        return merged

    def _fields(self, cls: type) -> list[FieldInfo]:
        fields: dict[str, FieldInfo] = {}
        for name, (klass, annotation) in self._annotations(cls).items():
            if _is_dunder(name) or _is_class_var(annotation):
                continue
            field_name, visibility = _unmangle(klass, name)
            fields[name] = FieldInfo(
                name=field_name,
                property_name=field_name.lstrip("_"),
                declared_type=type_ref(annotation),
                visibility=visibility,
            )

        for klass in _user_mro(cls):
            for name, attr in vars(klass).items():
                if not isinstance(attr, property) or name.startswith("_") or name in fields:
                    continue
                returns = _annotations_of(attr.fget).get("return") if attr.fget else None
                fields[name] = FieldInfo(
                    name=name,
                    property_name=name,
                    declared_type=type_ref(returns),
                    visibility=Visibility.PUBLIC,
                    read_only=attr.fset is None,
                )

        return list(fields.values())

    def _methods(
        self,
        cls: type,
        pattern: re.Pattern[str],
        required: int,
    ) -> dict[str, tuple[str, TypeRef | None]]:
        """Public instance methods matching ``pattern`` with exactly ``required`` arguments.

        Returns property name -> (method name, value type). The value type is
        the return type for accessors and the argument type for mutators.
        """
        found: dict[str, tuple[str, TypeRef | None]] = {}
        for klass in _user_mro(cls):
            for name, attr in vars(klass).items():
                if name.startswith("_") or not inspect.isfunction(attr):
                    continue
                match = pattern.match(name)
                if match is None:
                    continue
                try:
                    params = list(inspect.signature(attr).parameters.values())[1:]
                except (TypeError, ValueError):
                    continue
                mandatory = [
                    p
                    for p in params
                    if p.default is inspect.Parameter.empty
                    and p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
                ]
                if len(mandatory) != required:
                    continue

                hints = _annotations_of(attr)
                value_type = hints.get(mandatory[0].name) if mandatory else hints.get("return")
                found[_property_name(match)] = (name, type_ref(value_type))
        return found

    def _constructor_params(self, cls: type) -> list[ConstructorParam]:
        if cls.__init__ is object.__init__:  # type: ignore[misc]
            return []
        try:
            signature = _signature(cls)
        except (TypeError, ValueError):
            return []

        field_annotations = {name: annotation for name, (_, annotation) in self._annotations(cls).items()}

        params: list[ConstructorParam] = []
        for param in signature.parameters.values():
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue
            annotation = param.annotation
            if annotation is inspect.Parameter.empty or isinstance(annotation, str):
                annotation = field_annotations.get(param.name, annotation)
            has_default = param.default is not inspect.Parameter.empty
            params.append(
                ConstructorParam(
                    name=param.name,
                    declared_type=type_ref(annotation),
                    has_default=has_default,
                    default_value=param.default if has_default else None,
                    positional_only=param.kind is inspect.Parameter.POSITIONAL_ONLY,
                )
            )
        return params

    def _field_annotation(self, cls: type, field_name: str) -> FieldAnnotation | None:
        for name, (klass, annotation) in self._annotations(cls).items():
            if _unmangle(klass, name)[0] == field_name:
                return self._annotation_from(annotation)
        return None

    def _annotation_from(self, annotation: Any) -> FieldAnnotation | None:
        markers = _markers(annotation)
        map_to = next((m for m in markers if isinstance(m, MapTo)), None)
        collection = next((m for m in markers if isinstance(m, MapCollection)), None)

        item_type: TypeRef | None = None
        if collection is not None:
            item_type = TypeRef.coerce(collection.item_type)
        else:
            declared = type_ref(annotation)
            if declared is not None and declared.item is not None and is_complex(
                declared.item, self._passthrough_modules
            ):
                item_type = declared.item

        if map_to is None and item_type is None:
            return None
        return FieldAnnotation(
            explicit_target_name=map_to.target if map_to else None,
            custom_mapper=map_to.mapper if map_to else None,
            collection_item_type=item_type,
        )

    def _class_annotation(self, cls: type) -> ClassAnnotation | None:
        marker = vars(cls).get(MAPS_FROM_ATTR)
        if not isinstance(marker, MapsFrom):
            return None
        return ClassAnnotation(
            paired_source_type=TypeRef.coerce(marker.source),
            explicit_mapper_name=marker.mapper_name,
        )
