from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from jython_complete.core.errors import ConfigurationError, HostClassNotFoundError
from jython_complete.core.types import HostMember, MemberKind

logger = logging.getLogger(__name__)


class HostMemberSpec(BaseModel):
    name: str
    kind: MemberKind = MemberKind.METHOD
    static: bool = False
    type: str | None = None
    parameters: list[str] = Field(default_factory=list)


class HostClassSpec(BaseModel):
    superclass: str | None = None
    members: list[HostMemberSpec] = Field(default_factory=list)


class HostCatalog(BaseModel):
    classes: dict[str, HostClassSpec] = Field(default_factory=dict)


class CatalogReflectionProvider:
    """Host reflection backed by a table of class descriptions.

    Inherited members are reported after the class's own members by
    following the ``superclass`` chain.
    """

    def __init__(self, catalog: HostCatalog | None = None):
        self.catalog = catalog or HostCatalog()
        self._members: dict[str, list[HostMember]] = {}

    @classmethod
    def from_file(cls, path: Path) -> CatalogReflectionProvider:
        try:
            catalog = HostCatalog.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            raise ConfigurationError(f"Invalid reflection catalog: {path}", cause=e) from e

        logger.info(f"Loaded {len(catalog.classes)} host classes from {path}")
        return cls(catalog)

    def register(self, class_name: str, spec: HostClassSpec) -> None:
        self.catalog.classes[class_name] = spec
        self._members.clear()

    def __contains__(self, class_name: str) -> bool:
        return class_name in self.catalog.classes

    def members(self, class_name: str) -> list[HostMember]:
        if class_name not in self.catalog.classes:
            raise HostClassNotFoundError(class_name)

        if class_name not in self._members:
            self._members[class_name] = self._collect(class_name)
        return self._members[class_name]

    def _collect(self, class_name: str) -> list[HostMember]:
        members: list[HostMember] = []
        visited: set[str] = set()
        current: str | None = class_name

        while current is not None and current not in visited:
            visited.add(current)
            spec = self.catalog.classes.get(current)
            if spec is None:
                logger.debug(f"Superclass {current} of {class_name} is not in the catalog")
                break
            members.extend(
                HostMember(
                    name=m.name,
                    is_static=m.static,
                    is_field=m.kind is MemberKind.FIELD,
                    declaring_type=current,
                    value_type_name=m.type,
                    parameter_types=tuple(m.parameters),
                )
                for m in spec.members
            )
            current = spec.superclass

        return members
