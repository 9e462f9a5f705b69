from __future__ import annotations

import logging
import sys
from collections import OrderedDict
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock
from typing import TYPE_CHECKING

from jython_complete.core.errors import ModuleIndexError
from jython_complete.parsing.parser import ScriptParser, safe_decode_text, statements_of
from jython_complete.parsing.type_inference.walker import CONTROL_BLOCKS, target_names
from jython_complete.providers.watcher import ModuleWatcher

if TYPE_CHECKING:
    from tree_sitter import Node

    from jython_complete.config.settings import Settings

logger = logging.getLogger(__name__)


@dataclass
class LoadedModule:
    name: str
    path: Path
    members: list[str] = field(default_factory=list)

    @property
    def is_package(self) -> bool:
        return self.path.name == "__init__.py"


def top_level_names(statements: list[Node]) -> list[str]:
    """Names a module binds at import time, in source order."""
    names: list[str] = []

    def add(name: str | None) -> None:
        if name and name not in names:
            names.append(name)

    for statement in statements:
        if statement.type == "decorated_definition":
            statement = statement.child_by_field_name("definition")
            if statement is None:
                continue

        if statement.type in ("function_definition", "class_definition"):
            add(safe_decode_text(statement.child_by_field_name("name")))
        elif statement.type == "expression_statement":
            for child in statement.named_children:
                while child is not None and child.type == "assignment":
                    for name in target_names(child.child_by_field_name("left")):
                        add(name)
                    child = child.child_by_field_name("right")
        elif statement.type in ("import_statement", "import_from_statement"):
            for name_node in statement.children_by_field_name("name"):
                if name_node.type == "aliased_import":
                    add(safe_decode_text(name_node.child_by_field_name("alias")))
                elif statement.type == "import_statement":
                    dotted = safe_decode_text(name_node)
                    add(dotted.split(".", 1)[0] if dotted else None)
                else:
                    add(safe_decode_text(name_node))
        elif statement.type in CONTROL_BLOCKS:
            for child in statement.named_children:
                if child.type == "block":
                    for name in top_level_names(statements_of(child)):
                        add(name)
                elif child.type in CONTROL_BLOCKS:
                    for name in top_level_names([child]):
                        add(name)

    return names


def _is_module_path(module_path: str) -> bool:
    return bool(module_path) and all(part.isidentifier() for part in module_path.split("."))


class FileModuleIndex:
    """Module table over a set of search roots.

    ``a.b.c`` resolves to ``<root>/a/b/c.py`` or ``<root>/a/b/c/__init__.py``.
    Lookups, misses included, are cached in a bounded LRU. Loading and
    clearing are serialized by one lock. When watching is enabled, any change
    to a ``.py`` file next to a loaded module clears the whole cache.
    """

    def __init__(
        self,
        search_paths: list[Path] | None = None,
        watch: bool = True,
        max_entries: int = 256,
        parser: ScriptParser | None = None,
    ):
        self.search_paths = [Path(p) for p in search_paths or []]
        self.max_entries = max_entries
        self.parser = parser or ScriptParser(tolerate_syntax_errors=True)

        self._cache: OrderedDict[str, LoadedModule | None] = OrderedDict()
        self._lock = Lock()
        self._watcher = ModuleWatcher(self._on_module_changed) if watch else None

    @classmethod
    def from_settings(cls, settings: Settings) -> FileModuleIndex:
        paths = list(settings.modules.module_paths)
        if settings.modules.include_interpreter_paths:
            paths.extend(Path(p) for p in sys.path if p and Path(p).is_dir())

        return cls(
            search_paths=paths,
            watch=settings.watch_modules,
            max_entries=settings.modules.module_cache_entries,
        )

    @property
    def cached_modules(self) -> list[str]:
        with self._lock:
            return [name for name, module in self._cache.items() if module is not None]

    @property
    def watched_directories(self) -> set[Path]:
        return self._watcher.watched_directories if self._watcher else set()

    def add_path(self, path: Path) -> None:
        path = Path(path)
        with self._lock:
            if path not in self.search_paths:
                self.search_paths.append(path)
            # Cached misses may now resolve.
            self._cache.clear()

    def module_members(self, module_path: str) -> list[str] | None:
        module = self.load_module(module_path)
        return list(module.members) if module is not None else None

    def load_module(self, module_path: str) -> LoadedModule | None:
        if not _is_module_path(module_path):
            return None

        with self._lock:
            if module_path in self._cache:
                self._cache.move_to_end(module_path)
                return self._cache[module_path]

            module = self._load(module_path)
            self._cache[module_path] = module
            while len(self._cache) > self.max_entries:
                self._cache.popitem(last=False)

        if module is not None:
            logger.debug(f"Loaded module {module_path} from {module.path}")
            if self._watcher is not None:
                self._watcher.watch(module.path.parent)
        return module

    def clear_all(self) -> None:
        with self._lock:
            self._cache.clear()

    def close(self) -> None:
        if self._watcher is not None:
            self._watcher.stop()

    def _on_module_changed(self, path: Path) -> None:
        logger.info(f"Clearing module cache after change to {path}")
        self.clear_all()

    def _load(self, module_path: str) -> LoadedModule | None:
        parts = module_path.split(".")
        for root in self.search_paths:
            base = root.joinpath(*parts)
            package_init = base / "__init__.py"
            if package_init.is_file():
                members = self._read_members(package_init)
                for submodule in self._submodules(base):
                    if submodule not in members:
                        members.append(submodule)
                return LoadedModule(module_path, package_init, members)

            module_file = base.parent / f"{base.name}.py"
            if module_file.is_file():
                return LoadedModule(module_path, module_file, self._read_members(module_file))

        return None

    def _read_members(self, path: Path) -> list[str]:
        try:
            source = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise ModuleIndexError(
                f"Cannot read module file {path}", module_path=str(path), cause=e
            ) from e

        tree = self.parser.parse_tree(source)
        return top_level_names(statements_of(tree.root_node))

    def _submodules(self, package_dir: Path) -> list[str]:
        names = []
        for child in sorted(package_dir.iterdir()):
            if child.is_file() and child.suffix == ".py" and child.stem != "__init__":
                names.append(child.stem)
            elif child.is_dir() and (child / "__init__.py").is_file():
                names.append(child.name)
        return names
