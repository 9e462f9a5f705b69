from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from jython_complete.core.errors import HostClassNotFoundError
from jython_complete.core.types import PLACEHOLDER_CLASS, HostMember

if TYPE_CHECKING:
    from jython_complete.config.settings import Settings
    from jython_complete.core.protocols import (
        BuiltinSymbolIndex,
        HostReflectionProvider,
        ModuleIndex,
    )
    from jython_complete.parsing.type_inference.scope import Scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletionEntry:
    """A member offered to the user.

    ``parameters`` is ``None`` for non-callable members.
    """

    name: str
    declaring_type: str | None = None
    type_name: str | None = None
    parameters: tuple[str, ...] | None = None
    is_static: bool = False

    @property
    def is_callable(self) -> bool:
        return self.parameters is not None

    @classmethod
    def from_host_member(cls, member: HostMember) -> CompletionEntry:
        return cls(
            name=member.name,
            declaring_type=member.declaring_type,
            type_name=member.value_type_name,
            parameters=None if member.is_field else tuple(member.parameter_types),
            is_static=member.is_static,
        )


@dataclass
class TypeInferenceContext:
    """Capabilities available to a single scope build.

    Every provider call goes through this object so that provider failures
    degrade to "nothing known" instead of propagating.
    """

    reflection: HostReflectionProvider | None = None
    modules: ModuleIndex | None = None
    builtins: BuiltinSymbolIndex | None = None
    capture_prefix: str = "____GRAB____"
    builtin_module: str = "__builtin__"

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> TypeInferenceContext:
        from jython_complete.config import get_settings
        from jython_complete.providers import (
            CatalogReflectionProvider,
            FileModuleIndex,
            StaticBuiltinIndex,
        )

        settings = settings or get_settings()

        if settings.providers.reflection_catalog:
            reflection = CatalogReflectionProvider.from_file(
                settings.providers.reflection_catalog
            )
        else:
            reflection = CatalogReflectionProvider()

        if settings.providers.builtin_entries_file:
            builtins = StaticBuiltinIndex.from_file(settings.providers.builtin_entries_file)
        else:
            builtins = StaticBuiltinIndex.from_interpreter(settings.builtin_module)

        return cls(
            reflection=reflection,
            modules=FileModuleIndex.from_settings(settings),
            builtins=builtins,
            capture_prefix=settings.capture_prefix,
            builtin_module=settings.builtin_module,
        )

    def reflect(self, class_name: str | None) -> list[HostMember] | None:
        if not class_name or self.reflection is None:
            return None
        try:
            return self.reflection.members(class_name)
        except HostClassNotFoundError:
            return None
        except Exception as e:
            logger.debug(f"Reflection failed for {class_name}: {e}")
            return None

    def module_members(self, module_path: str | None) -> list[str] | None:
        if not module_path or self.modules is None:
            return None
        try:
            return self.modules.module_members(module_path)
        except Exception as e:
            logger.debug(f"Module lookup failed for {module_path}: {e}")
            return None

    def builtin_entries(self) -> list[str]:
        if self.builtins is None:
            return []
        try:
            return self.builtins.entries()
        except Exception as e:
            logger.debug(f"Builtin index failed: {e}")
            return []


@dataclass(frozen=True)
class Unknown:
    """Nothing is known about the value."""

    @property
    def type_name(self) -> str | None:
        return None

    def members(self, context: TypeInferenceContext) -> list[CompletionEntry]:
        return []


UNKNOWN = Unknown()


@dataclass(frozen=True)
class Instance:
    """A value of a named host type, or of a script class when ``scope`` can see one."""

    type_name: str
    scope: Scope | None = field(default=None, compare=False, repr=False)

    def members(self, context: TypeInferenceContext) -> list[CompletionEntry]:
        host_members = context.reflect(self.type_name)
        if host_members is not None:
            return [
                CompletionEntry.from_host_member(m) for m in host_members if not m.is_static
            ]

        if self.scope is not None:
            script_class = self.scope.find(self.type_name)
            if isinstance(script_class, ClassType):
                return script_class.members(context)

        return []


@dataclass(frozen=True)
class Static:
    """A module, a host class or a dotted member reached through an import."""

    name: str

    @property
    def type_name(self) -> str:
        return self.name

    def members(self, context: TypeInferenceContext) -> list[CompletionEntry]:
        module_members = context.module_members(self.name)
        if module_members is not None:
            return [CompletionEntry(name=m, declaring_type=self.name) for m in module_members]

        host_members = context.reflect(self.name)
        if host_members is not None:
            return [CompletionEntry.from_host_member(m) for m in host_members if m.is_static]

        return self._method_return_members(context)

    def _method_return_members(self, context: TypeInferenceContext) -> list[CompletionEntry]:
        """Members of the return types of ``Owner.method``."""
        owner, _, method_name = self.name.rpartition(".")
        if not owner:
            return []

        owner_members = context.reflect(owner)
        if not owner_members:
            return []

        return_types: list[str] = []
        for m in owner_members:
            if m.is_field or m.name != method_name or not m.value_type_name:
                continue
            if m.value_type_name not in return_types:
                return_types.append(m.value_type_name)

        entries: list[CompletionEntry] = []
        for return_type in return_types:
            for m in context.reflect(return_type) or []:
                if not m.is_static:
                    entries.append(CompletionEntry.from_host_member(m))
        return entries


@dataclass(eq=False)
class Function:
    name: str
    return_type_name: str | None
    param_names: list[str]
    scope: Scope = field(repr=False)

    @property
    def type_name(self) -> str | None:
        return self.return_type_name

    def members(self, context: TypeInferenceContext) -> list[CompletionEntry]:
        if not self.return_type_name:
            return []
        return Instance(self.return_type_name, self.scope).members(context)


@dataclass(eq=False)
class ClassType:
    """A script-defined class, a parameter placeholder, or a synthesized builtin.

    Instances are shared by reference: members registered through any alias
    are visible through all of them.
    """

    name: str
    superclass_names: list[str]
    constructor_params: list[str]
    member_names: list[str]
    scope: Scope = field(repr=False)

    @property
    def type_name(self) -> str:
        return self.name

    @property
    def is_placeholder(self) -> bool:
        return self.name == PLACEHOLDER_CLASS

    def put(self, member_name: str) -> None:
        if member_name not in self.member_names:
            self.member_names.append(member_name)

    def mutate_into_plus(self, other: ClassType) -> None:
        """Become ``other`` in place, keeping members discovered so far."""
        self.name = other.name
        self.superclass_names = list(other.superclass_names)
        self.constructor_params = list(other.constructor_params)
        for member_name in other.member_names:
            self.put(member_name)
        self.scope = other.scope

    def members(self, context: TypeInferenceContext) -> list[CompletionEntry]:
        return _unique_by_name(self._collect_members(context, set()))

    def _collect_members(
        self, context: TypeInferenceContext, visited: set[int]
    ) -> list[CompletionEntry]:
        visited.add(id(self))
        entries = [self._own_entry(name) for name in self.member_names]

        for superclass in self.superclass_names:
            host_members = context.reflect(superclass)
            if host_members is not None:
                entries.extend(CompletionEntry.from_host_member(m) for m in host_members)
                continue

            script_class = self.find_script_class(superclass)
            if script_class is None:
                logger.debug(f"Superclass {superclass} of {self.name} not found")
            elif id(script_class) not in visited:
                entries.extend(script_class._collect_members(context, visited))

        return entries

    def body_binding(self, member_name: str) -> TypeDescriptor | None:
        """The binding of ``member_name`` in this class's own body, if any."""
        if self.scope is None or self.scope.class_name != self.name:
            return None
        return self.scope.vars.get(member_name)

    def _own_entry(self, member_name: str) -> CompletionEntry:
        bound = self.body_binding(member_name)

        if isinstance(bound, Function):
            return CompletionEntry(
                name=member_name,
                declaring_type=self.name,
                type_name=bound.return_type_name,
                parameters=tuple(bound.param_names[1:]),
            )
        if isinstance(bound, ClassType):
            return CompletionEntry(
                name=member_name,
                declaring_type=self.name,
                type_name=bound.name,
                parameters=tuple(bound.constructor_params),
            )
        return CompletionEntry(name=member_name, declaring_type=self.name)

    def find_script_class(self, class_name: str) -> ClassType | None:
        if self.scope is None:
            return None
        lookup_scope = self.scope.parent or self.scope
        found = lookup_scope.find(class_name)
        return found if isinstance(found, ClassType) else None


TypeDescriptor = Unknown | Instance | Static | Function | ClassType


def describe(descriptor: TypeDescriptor) -> str:
    """Short human-readable form used by scope dumps."""
    if isinstance(descriptor, Instance):
        return f"Instance({descriptor.type_name})"
    if isinstance(descriptor, Static):
        return f"Static({descriptor.name})"
    if isinstance(descriptor, Function):
        params = ", ".join(descriptor.param_names)
        return f"Function({descriptor.name}({params}) -> {descriptor.return_type_name})"
    if isinstance(descriptor, ClassType):
        bases = ", ".join(descriptor.superclass_names)
        members = ", ".join(descriptor.member_names)
        return f"Class({descriptor.name}({bases}) [{members}])"
    return "Unknown"


def _unique_by_name(entries: list[CompletionEntry]) -> list[CompletionEntry]:
    seen: set[str] = set()
    unique = []
    for entry in entries:
        if entry.name not in seen:
            seen.add(entry.name)
            unique.append(entry)
    return unique
