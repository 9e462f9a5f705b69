from __future__ import annotations

import logging

from jython_complete.core.types import is_assignable
from jython_complete.parsing.type_inference.models import (
    UNKNOWN,
    ClassType,
    TypeDescriptor,
    TypeInferenceContext,
    describe,
)

logger = logging.getLogger(__name__)


class Scope:
    """A lexical region (module, function or class body) and its bindings.

    Scopes form a tree: each child registers itself with its parent on
    construction and inherits the parent's inference context.
    """

    def __init__(
        self,
        parent: Scope | None = None,
        context: TypeInferenceContext | None = None,
        class_name: str | None = None,
    ):
        self._parent = parent
        self.class_name = class_name
        if context is None:
            context = parent.context if parent is not None else TypeInferenceContext()
        self.context = context

        self.imports: dict[str, TypeDescriptor] = {}
        self.vars: dict[str, TypeDescriptor] = {}
        self.children: list[Scope] = []

        if parent is not None:
            parent.children.append(self)

    @property
    def parent(self) -> Scope | None:
        return self._parent

    @property
    def is_class(self) -> bool:
        return self.class_name is not None

    def is_empty(self) -> bool:
        return not self.imports and not self.vars and not self.children

    def _chain(self):
        scope: Scope | None = self
        while scope is not None:
            yield scope
            scope = scope._parent

    def find(self, name: str) -> TypeDescriptor:
        """Resolve ``name`` lexically, falling back to builtins."""
        for scope in self._chain():
            if name in scope.vars:
                return scope.vars[name]
            if name in scope.imports:
                return scope.imports[name]
        return self._find_builtin(name)

    def _find_builtin(self, name: str) -> TypeDescriptor:
        prefix = f"{self.context.builtin_module}.{name}."
        suffixes = [
            entry[len(prefix):]
            for entry in self.context.builtin_entries()
            if entry.startswith(prefix)
        ]
        if suffixes:
            return ClassType(name, [], [], suffixes, self)

        logger.debug(f"Name not found: {name}")
        return UNKNOWN

    def _builtin_names(self) -> list[str]:
        prefix = f"{self.context.builtin_module}."
        names = []
        for entry in self.context.builtin_entries():
            if entry.startswith(prefix):
                name = entry[len(prefix):].split(".", 1)[0]
                if name:
                    names.append(name)
        return names

    def find_starts_with(self, prefix: str) -> set[str]:
        names = set()
        for scope in self._chain():
            names.update(n for n in scope.vars if n.startswith(prefix))
            names.update(n for n in scope.imports if n.startswith(prefix))
        names.update(n for n in self._builtin_names() if n.startswith(prefix))
        return names

    def find_starts_with2(self, prefix: str) -> dict[str, str | None]:
        """Like ``find_starts_with`` but maps each name to its type name.

        The innermost binding of a name wins. Builtins map to ``None``.
        """
        found: dict[str, str | None] = {}
        for scope in self._chain():
            for bindings in (scope.vars, scope.imports):
                for name, descriptor in bindings.items():
                    if name.startswith(prefix) and name not in found:
                        found[name] = descriptor.type_name
        for name in self._builtin_names():
            if name.startswith(prefix):
                found.setdefault(name, None)
        return found

    def find_vars_by_type(
        self, target_type_name: str, target_host_type: str | None = None
    ) -> list[str]:
        """Variables whose value can be passed as ``target_type_name``.

        Innermost scopes come first; a shadowed outer variable is not
        reported. Synthetic capture variables are never returned.
        """
        capture_prefix = self.context.capture_prefix
        seen: set[str] = set()
        names: list[str] = []
        for scope in self._chain():
            for name, descriptor in scope.vars.items():
                if name in seen:
                    continue
                seen.add(name)
                if name.startswith(capture_prefix):
                    continue
                if is_assignable(descriptor.type_name, target_type_name, target_host_type):
                    names.append(name)
        return names

    def get_last(self) -> Scope:
        scope = self
        while scope.children:
            scope = scope.children[-1]
        return scope

    def get_vars(self) -> dict[str, TypeDescriptor]:
        merged: dict[str, TypeDescriptor] = {}
        for scope in self._chain():
            for name, descriptor in scope.vars.items():
                merged.setdefault(name, descriptor)
        return merged

    def dump(self, indent: int = 0) -> str:
        pad = "  " * indent
        header = f"class {self.class_name}" if self.class_name else "scope"
        lines = [f"{pad}{header}"]
        for name, descriptor in self.imports.items():
            lines.append(f"{pad}  import {name}: {describe(descriptor)}")
        for name, descriptor in self.vars.items():
            lines.append(f"{pad}  {name}: {describe(descriptor)}")
        for child in self.children:
            lines.append(child.dump(indent + 1))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"Scope(class_name={self.class_name!r}, vars={list(self.vars)}, "
            f"imports={list(self.imports)}, children={len(self.children)})"
        )
