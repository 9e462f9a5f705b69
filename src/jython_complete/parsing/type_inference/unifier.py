from __future__ import annotations

import logging

from jython_complete.parsing.type_inference.models import ClassType, Function

logger = logging.getLogger(__name__)


class ClassUnifier:
    """Merges the per-method ``self`` placeholders of a class into the class.

    Runs once, after the class body has been walked:

    1. every member a method registered on its first-parameter placeholder is
       added to the class, so instances expose all ``self.attr`` members;
    2. every placeholder is mutated in place into the class, keeping the
       members it already had first.

    While the body is still being walked, a method only sees the members it
    registered on its own placeholder.
    """

    def __init__(self, cls: ClassType):
        self.cls = cls

    def placeholders(self) -> list[ClassType]:
        found: list[ClassType] = []
        for descriptor in self.cls.scope.vars.values():
            if not isinstance(descriptor, Function) or not descriptor.param_names:
                continue
            bound = descriptor.scope.vars.get(descriptor.param_names[0])
            if not isinstance(bound, ClassType) or not bound.is_placeholder:
                continue
            if bound.scope is not descriptor.scope:
                continue
            if all(bound is not p for p in found):
                found.append(bound)
        return found

    def unify(self) -> list[ClassType]:
        placeholders = self.placeholders()

        for placeholder in placeholders:
            for member_name in placeholder.member_names:
                self.cls.put(member_name)

        for placeholder in placeholders:
            placeholder.mutate_into_plus(self.cls)

        logger.debug(
            f"Unified {len(placeholders)} method receivers into {self.cls.name}: "
            f"{self.cls.member_names}"
        )
        return placeholders
