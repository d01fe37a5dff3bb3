"""Import and display-name management for one generated module.

Every referenced class or function is registered once. A later
registration whose short name collides with an earlier, distinct
registration gets an alias prefixed with its nearest distinguishing
namespace segment:

    app.entity.user.User  -> User
    app.dto.user.User     -> DtoUser   (from app.dto.user import User as DtoUser)
"""

from __future__ import annotations

from dataclasses import dataclass

from mapper_gen.core.naming import disambiguate
from mapper_gen.core.types import TypeRef


@dataclass(frozen=True)
class ImportedName:
    """One ``from module import name [as alias]`` clause."""

    module: str
    name: str
    alias: str | None = None

    @property
    def display(self) -> str:
        return self.alias or self.name


class ImportRegistry:
    """Allocates collision-free display names within one module.

    Args:
        reserved: Names already bound in the module (the mapper class
            itself, for instance) that imports must not shadow.
    """

    def __init__(self, reserved: list[str] | None = None) -> None:
        self._taken: set[str] = set(reserved or [])
        self._imports: dict[tuple[str, str], ImportedName] = {}

    def reserve(self, name: str) -> None:
        self._taken.add(name)

    def register(self, ref: TypeRef) -> str:
        """Register a referenced class and return the expression naming it.

        Nested classes are imported through their outermost class, so the
        result may be dotted (``Alias.Inner``).
        """
        top, dot, rest = ref.name.partition(".")
        if ref.is_builtin:
            return ref.name

        key = (ref.module, top)
        imported = self._imports.get(key)
        if imported is None:
            display = self._allocate(ref.module, top)
            imported = ImportedName(ref.module, top, None if display == top else display)
            self._imports[key] = imported
            self._taken.add(display)
        return f"{imported.display}{dot}{rest}"

    def register_path(self, dotted_path: str) -> str:
        """Register a function or class given as ``module.name``."""
        return self.register(TypeRef.parse(dotted_path))

    def imports(self) -> list[ImportedName]:
        """Registered imports in registration order."""
        return list(self._imports.values())

    def _allocate(self, module: str, name: str) -> str:
        return disambiguate(name, module, self._taken)
