"""Reference implementations of the host reflection, module and builtin providers."""

from jython_complete.providers.builtins import StaticBuiltinIndex
from jython_complete.providers.modules import FileModuleIndex, LoadedModule, top_level_names
from jython_complete.providers.reflection import (
    CatalogReflectionProvider,
    HostCatalog,
    HostClassSpec,
    HostMemberSpec,
)
from jython_complete.providers.watcher import ModuleWatcher

__all__ = [
    "CatalogReflectionProvider",
    "HostCatalog",
    "HostClassSpec",
    "HostMemberSpec",
    "FileModuleIndex",
    "LoadedModule",
    "ModuleWatcher",
    "StaticBuiltinIndex",
    "top_level_names",
]
