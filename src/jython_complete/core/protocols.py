from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from jython_complete.core.types import HostMember


@runtime_checkable
class HostReflectionProvider(Protocol):
    """Lists the public members of a host class.

    Implementations raise ``HostClassNotFoundError`` for unknown names.
    """

    def members(self, class_name: str) -> list[HostMember]: ...


@runtime_checkable
class ModuleIndex(Protocol):
    def module_members(self, module_path: str) -> list[str] | None: ...
    def clear_all(self) -> None: ...


@runtime_checkable
class BuiltinSymbolIndex(Protocol):
    def entries(self) -> list[str]: ...
