from __future__ import annotations

import builtins
import inspect
import logging
from pathlib import Path

from jython_complete.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


class StaticBuiltinIndex:
    """Builtin symbols as ``"<module>.<name>[.<member>]"`` entries."""

    def __init__(self, entries: list[str] | None = None):
        self._entries = list(entries or [])

    @classmethod
    def from_file(cls, path: Path) -> StaticBuiltinIndex:
        """One entry per line; blank lines and ``#`` comments are ignored."""
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise ConfigurationError(f"Cannot read builtin entries: {path}", cause=e) from e

        entries = [
            line.strip() for line in lines if line.strip() and not line.lstrip().startswith("#")
        ]
        logger.debug(f"Loaded {len(entries)} builtin entries from {path}")
        return cls(entries)

    @classmethod
    def from_interpreter(cls, module_name: str = "__builtin__") -> StaticBuiltinIndex:
        """Entries for the running interpreter's public builtins.

        Builtin types also contribute their public members, e.g.
        ``__builtin__.str.join``.
        """
        entries = []
        for name in sorted(dir(builtins)):
            if name.startswith("_"):
                continue
            entries.append(f"{module_name}.{name}")
            value = getattr(builtins, name)
            if inspect.isclass(value):
                entries.extend(
                    f"{module_name}.{name}.{member}"
                    for member in sorted(dir(value))
                    if not member.startswith("_")
                )
        return cls(entries)

    def entries(self) -> list[str]:
        return self._entries
