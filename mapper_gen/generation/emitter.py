"""Mapper module emission.

Builds the generated module as an ``ast`` tree and prints it with
``ast.unparse``. One mapper class per module, with an optional
constructor receiving the nested mappers and two conversion methods.

Construction mode, per direction:
    destination has constructor params -> one constructor call, one
                                          keyword argument per param
    otherwise                          -> no-argument construction, then
                                          one mutation per mapped property

Value expression precedence, identical in both modes and directions:
    collection binding > nested binding > custom mapper > plain read
"""

from __future__ import annotations

import ast
import sys
from dataclasses import dataclass
from typing import Any

from mapper_gen.core.config import NamingConfig
from mapper_gen.core.enums import AccessKind
from mapper_gen.core.naming import snake_case
from mapper_gen.core.types import TypeRef
from mapper_gen.generation.imports import ImportRegistry
from mapper_gen.mapping.dependencies import Dependencies, MapperDescriptor, NestedBinding
from mapper_gen.mapping.table import PropertyMappingEntry, PropertyMappingTable
from mapper_gen.schema.model import ConstructorParam, Member, TypeSchema

_LITERAL_TYPES = (bool, int, float, str, bytes, type(None))
_ITEM = "item"


@dataclass(frozen=True)
class MapperUnit:
    """Everything needed to emit one mapper module."""

    name: str
    source: TypeSchema
    target: TypeSchema
    forward_table: PropertyMappingTable
    backward_table: PropertyMappingTable
    forward_dependencies: Dependencies
    backward_dependencies: Dependencies

    @property
    def mappers(self) -> list[MapperDescriptor]:
        """Nested mappers of both directions, first-seen order, no duplicates."""
        mappers: dict[str, MapperDescriptor] = {}
        for mapper in self.forward_dependencies.mappers + self.backward_dependencies.mappers:
            mappers.setdefault(mapper.name, mapper)
        return list(mappers.values())


@dataclass(frozen=True)
class _Side:
    """One conversion method: reads ``variable``, builds ``result``."""

    method: str
    variable: str
    result: str
    source: TypeSchema
    destination: TypeSchema
    destination_name: str
    table: PropertyMappingTable
    bindings: dict[str, NestedBinding]  # keyed by source property
    counterpart_bindings: dict[str, NestedBinding]  # keyed by destination property


def _type_params() -> dict[str, Any]:
    return {"type_params": []} if sys.version_info >= (3, 12) else {}


def _name(dotted: str) -> ast.expr:
    head, *rest = dotted.split(".")
    node: ast.expr = ast.Name(id=head, ctx=ast.Load())
    for part in rest:
        node = ast.Attribute(value=node, attr=part, ctx=ast.Load())
    return node


def _attribute(owner: str, attr: str, ctx: ast.expr_context | None = None) -> ast.Attribute:
    return ast.Attribute(value=_name(owner), attr=attr, ctx=ctx or ast.Load())


def _call(func: ast.expr, args: list[ast.expr] | None = None, keywords: list[ast.keyword] | None = None) -> ast.Call:
    return ast.Call(func=func, args=args or [], keywords=keywords or [])


def _arg(name: str, annotation: ast.expr | None = None) -> ast.arg:
    return ast.arg(arg=name, annotation=annotation, type_comment=None)


def _assign(target: ast.expr, value: ast.expr) -> ast.Assign:
    return ast.Assign(targets=[target], value=value, type_comment=None)


def _arguments(*params: ast.arg) -> ast.arguments:
    return ast.arguments(
        posonlyargs=[],
        args=list(params),
        vararg=None,
        kwonlyargs=[],
        kw_defaults=[],
        kwarg=None,
        defaults=[],
    )


def _function(name: str, args: ast.arguments, body: list[ast.stmt], returns: ast.expr) -> ast.FunctionDef:
    return ast.FunctionDef(
        name=name,
        args=args,
        body=body,
        decorator_list=[],
        returns=returns,
        type_comment=None,
        **_type_params(),
    )


def _default_literal(param: ConstructorParam) -> ast.expr:
    """Literal for an unresolved parameter: its simple default, else None."""
    if param.has_default and isinstance(param.default_value, _LITERAL_TYPES):
        return ast.Constant(value=param.default_value)
    return ast.Constant(value=None)


class CodeEmitter:
    """Renders MapperUnit instances into Python source text.

    Args:
        naming: Method names of the generated conversions.
    """

    def __init__(self, naming: NamingConfig | None = None) -> None:
        self._naming = naming or NamingConfig()

    def emit(self, unit: MapperUnit) -> str:
        """Render the complete module for one mapper."""
        imports = ImportRegistry(reserved=[unit.name])
        mappers = unit.mappers
        final = imports.register(TypeRef("typing", "Final")) if mappers else ""
        source_name = imports.register(unit.source.type_ref)
        target_name = imports.register(unit.target.type_ref)

        mapper_fields: dict[str, str] = {}
        mapper_params: list[tuple[str, str]] = []
        for mapper in mappers:
            display = imports.register(mapper.ref)
            param = snake_case(display.replace(".", ""))
            mapper_fields[mapper.name] = f"_{param}"
            mapper_params.append((param, display))

        forward = _Side(
            method=self._naming.forward_method,
            variable="entity",
            result="dto",
            source=unit.source,
            destination=unit.target,
            destination_name=target_name,
            table=unit.forward_table,
            bindings=unit.forward_dependencies.bindings,
            counterpart_bindings=unit.backward_dependencies.bindings,
        )
        backward = _Side(
            method=self._naming.backward_method,
            variable="dto",
            result="entity",
            source=unit.target,
            destination=unit.source,
            destination_name=source_name,
            table=unit.backward_table,
            bindings=unit.backward_dependencies.bindings,
            counterpart_bindings=unit.forward_dependencies.bindings,
        )

        body: list[ast.stmt] = [
            ast.Expr(
                value=ast.Constant(
                    value=f"Converts between {unit.source.type_ref.short_name} "
                    f"and {unit.target.type_ref.short_name}."
                )
            )
        ]
        if mapper_params:
            body.append(self._constructor(mapper_params, final))
        body.append(self._conversion(forward, source_name, mapper_fields, imports))
        body.append(self._conversion(backward, target_name, mapper_fields, imports))

        class_def = ast.ClassDef(
            name=unit.name,
            bases=[],
            keywords=[],
            body=body,
            decorator_list=[],
            **_type_params(),
        )
        module = ast.Module(
            body=[
                ast.Expr(value=ast.Constant(value="Generated by mapper-gen. Do not edit by hand.")),
                *self._import_statements(imports),
                class_def,
            ],
            type_ignores=[],
        )
        return ast.unparse(ast.fix_missing_locations(module)) + "\n"

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _import_statements(self, imports: ImportRegistry) -> list[ast.stmt]:
        grouped: dict[str, list[ast.alias]] = {}
        for imported in imports.imports():
            grouped.setdefault(imported.module, []).append(
                ast.alias(name=imported.name, asname=imported.alias)
            )
        ordered = sorted(grouped, key=lambda module: (module != "typing", module))
        return [
            ast.ImportFrom(module=module, names=sorted(grouped[module], key=lambda a: a.name), level=0)
            for module in ordered
        ]

    def _constructor(self, params: list[tuple[str, str]], final: str) -> ast.FunctionDef:
        body: list[ast.stmt] = [
            ast.AnnAssign(
                target=_attribute("self", f"_{param}", ast.Store()),
                annotation=_name(final),
                value=ast.Name(id=param, ctx=ast.Load()),
                simple=0,
            )
            for param, _ in params
        ]
        args = _arguments(
            _arg("self"),
            *(_arg(param, _name(display)) for param, display in params),
        )
        return _function("__init__", args, body, ast.Constant(value=None))

    def _conversion(
        self,
        side: _Side,
        source_name: str,
        mapper_fields: dict[str, str],
        imports: ImportRegistry,
    ) -> ast.FunctionDef:
        result = ast.Name(id=side.result, ctx=ast.Store())
        readers = side.source.readers()
        params = side.destination.constructor_params

        if params:
            args: list[ast.expr] = []
            keywords: list[ast.keyword] = []
            for param in params:
                value = self._argument(side, param, readers, mapper_fields, imports)
                if param.positional_only:
                    args.append(value)
                else:
                    keywords.append(ast.keyword(arg=param.name, value=value))
            body: list[ast.stmt] = [
                _assign(result, _call(_name(side.destination_name), args, keywords))
            ]
        else:
            body = [_assign(result, _call(_name(side.destination_name)))]
            body.extend(self._mutations(side, readers, mapper_fields, imports))

        body.append(ast.Return(value=ast.Name(id=side.result, ctx=ast.Load())))
        args_def = _arguments(_arg("self"), _arg(side.variable, _name(source_name)))
        return _function(side.method, args_def, body, _name(side.destination_name))

    def _argument(
        self,
        side: _Side,
        param: ConstructorParam,
        readers: dict[str, Member],
        mapper_fields: dict[str, str],
        imports: ImportRegistry,
    ) -> ast.expr:
        for prop, member in readers.items():
            entry = side.table.entry_for(prop)
            if entry.target_field == param.name:
                return self._value(side, member, entry, mapper_fields, imports)
        return _default_literal(param)

    def _mutations(
        self,
        side: _Side,
        readers: dict[str, Member],
        mapper_fields: dict[str, str],
        imports: ImportRegistry,
    ) -> list[ast.stmt]:
        writers = side.destination.writers()
        statements: list[ast.stmt] = []
        for prop, member in readers.items():
            entry = side.table.entry_for(prop)
            writer = writers.get(entry.target_field)
            if writer is None:
                continue
            value = self._value(side, member, entry, mapper_fields, imports)
            if writer.kind is AccessKind.METHOD:
                statements.append(ast.Expr(value=_call(_attribute(side.result, writer.member_name), [value])))
            else:
                target = _attribute(side.result, writer.member_name, ast.Store())
                statements.append(_assign(target, value))
        return statements

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _value(
        self,
        side: _Side,
        member: Member,
        entry: PropertyMappingEntry,
        mapper_fields: dict[str, str],
        imports: ImportRegistry,
    ) -> ast.expr:
        read = self._read(side.variable, member)
        binding = side.bindings.get(member.property_name) or side.counterpart_bindings.get(entry.target_field)

        if binding is not None:
            mapper = _attribute("self", mapper_fields[binding.mapper.name])
            convert = ast.Attribute(value=mapper, attr=side.method, ctx=ast.Load())
            if binding.collection:
                return ast.ListComp(
                    elt=_call(convert, [ast.Name(id=_ITEM, ctx=ast.Load())]),
                    generators=[
                        ast.comprehension(
                            target=ast.Name(id=_ITEM, ctx=ast.Store()),
                            iter=read,
                            ifs=[],
                            is_async=0,
                        )
                    ],
                )
            return _call(convert, [read])

        if entry.custom_mapper:
            if "." in entry.custom_mapper:
                func = _name(imports.register_path(entry.custom_mapper))
            else:
                func = _attribute(side.destination_name, entry.custom_mapper)
            return _call(func, [read])

        return read

    def _read(self, variable: str, member: Member) -> ast.expr:
        if member.kind is AccessKind.METHOD:
            return _call(_attribute(variable, member.member_name))
        return _attribute(variable, member.member_name)
