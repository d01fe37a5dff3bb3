"""Type identifiers.

A TypeRef names a class by module and qualified name without holding the
class itself, so it can describe types that are not generated yet (mappers)
or not importable at all.

    "app.entity.user.User"        -> TypeRef("app.entity.user", "User")
    "app.entity.user:User.Status" -> TypeRef("app.entity.user", "User.Status")
"""

from __future__ import annotations

from dataclasses import dataclass

from mapper_gen.core.exceptions import TypeNotFoundError

# Types from these modules are value-like and copied as-is.
PASSTHROUGH_MODULES: tuple[str, ...] = (
    "builtins",
    "collections",
    "datetime",
    "decimal",
    "enum",
    "pathlib",
    "typing",
    "uuid",
)


@dataclass(frozen=True)
class TypeRef:
    """Reference to a class by module path and qualified name."""

    module: str
    name: str
    item: TypeRef | None = None  # element type of a typed collection
    scalar: bool = False  # value type copied as-is (Enum subclasses)

    @classmethod
    def parse(cls, type_id: str) -> TypeRef:
        """Parse ``module.Name`` or ``module:Qualified.Name``."""
        type_id = type_id.strip()
        if ":" in type_id:
            module, _, name = type_id.partition(":")
        else:
            module, _, name = type_id.rpartition(".")
        if not module or not name:
            raise TypeNotFoundError(type_id, "expected a fully qualified 'module.Name'")
        return cls(module, name)

    @classmethod
    def of(cls, klass: type) -> TypeRef:
        """Build a reference to an existing class."""
        return cls(klass.__module__, klass.__qualname__)

    @classmethod
    def coerce(cls, value: TypeRef | type | str) -> TypeRef:
        """Accept a TypeRef, a class, or a textual identifier."""
        if isinstance(value, TypeRef):
            return value
        if isinstance(value, type):
            return cls.of(value)
        return cls.parse(value)

    @property
    def short_name(self) -> str:
        """Innermost class name."""
        return self.name.rpartition(".")[2]

    @property
    def qualified_name(self) -> str:
        return f"{self.module}.{self.name}"

    @property
    def is_builtin(self) -> bool:
        return self.module == "builtins"

    def __str__(self) -> str:
        return self.qualified_name


def is_complex(ref: TypeRef | None, passthrough_modules: tuple[str, ...] | list[str] = PASSTHROUGH_MODULES) -> bool:
    """True when values of ``ref`` need a nested mapper rather than a plain copy."""
    if ref is None or ref.scalar:
        return False
    return not any(
        ref.module == module or ref.module.startswith(module + ".") for module in passthrough_modules
    )
