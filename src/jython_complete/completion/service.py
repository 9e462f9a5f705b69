from __future__ import annotations

import logging
from dataclasses import dataclass

from jython_complete.core.types import BOXED_TYPES
from jython_complete.parsing.type_inference.engine import TypeInferenceEngine
from jython_complete.parsing.type_inference.models import ClassType, CompletionEntry
from jython_complete.parsing.type_inference.scope import Scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NameCompletion:
    name: str
    type_name: str | None = None
    constructor_params: tuple[str, ...] | None = None


def sort_completions(entries: list[CompletionEntry], seed: str) -> list[CompletionEntry]:
    """Names starting with ``seed`` first, then alphabetical."""
    lowered = seed.lower()
    return sorted(
        entries,
        key=lambda e: (not e.name.lower().startswith(lowered), e.name.lower(), e.name),
    )


def filter_completions(entries: list[CompletionEntry], seed: str) -> list[CompletionEntry]:
    lowered = seed.lower()
    return [e for e in entries if lowered in e.name.lower()]


class CompletionService:
    """Answers completion requests against the text typed so far.

    Member completion of an arbitrary expression appends a synthetic
    assignment of that expression to a reserved capture name, builds the
    scope tree, and reads the capture's descriptor from the last scope.
    """

    def __init__(self, engine: TypeInferenceEngine | None = None):
        self.engine = engine or TypeInferenceEngine()

    @property
    def capture_name(self) -> str:
        return self.engine.context.capture_prefix

    def last_scope(self, source: str) -> Scope:
        return self.engine.build_scope_from_source(source).get_last()

    def complete_names(self, source: str, prefix: str) -> list[NameCompletion]:
        scope = self.last_scope(source)
        completions = []
        for name, type_name in sorted(scope.find_starts_with2(prefix).items()):
            if name.startswith(self.capture_name):
                continue
            descriptor = scope.find(name)
            constructor_params = None
            if isinstance(descriptor, ClassType):
                constructor_params = tuple(descriptor.constructor_params)
            completions.append(NameCompletion(name, type_name, constructor_params))
        return completions

    def complete_members(
        self, source: str, expression: str, seed: str = "", indent: str = ""
    ) -> list[CompletionEntry]:
        """Members of ``expression`` evaluated at the end of ``source``.

        Args:
            source: Script text before the cursor, without the expression.
            expression: The expression left of the final dot.
            seed: Partial member name typed after the dot.
            indent: Indentation of the line being completed.

        Returns:
            Matching members, best matches first.
        """
        code = self._with_capture(source, expression, indent)
        scope = self.last_scope(code)
        descriptor = scope.find(self.capture_name)
        logger.debug(f"Captured {expression!r} as {descriptor}")

        entries = descriptor.members(self.engine.context)
        return sort_completions(filter_completions(entries, seed), seed)

    def complete_assigned_members(
        self, source: str, name: str, seed: str = ""
    ) -> list[CompletionEntry]:
        descriptor = self.last_scope(source).find(name)
        entries = descriptor.members(self.engine.context)
        return sort_completions(filter_completions(entries, seed), seed)

    def parameter_choices(
        self, source: str, param_type: str, host_type: str | None = None
    ) -> list[str]:
        """Variables in scope that can be passed as a ``param_type`` argument."""
        if host_type is None:
            host_type = BOXED_TYPES.get(param_type)
        return self.last_scope(source).find_vars_by_type(param_type, host_type)

    def _with_capture(self, source: str, expression: str, indent: str) -> str:
        if source and not source.endswith("\n"):
            source += "\n"
        return f"{source}{indent}{self.capture_name} = {expression}\n"
