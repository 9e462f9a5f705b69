from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from jython_complete.core.errors import ParsingError
from jython_complete.parsing.parser import ScriptParser
from jython_complete.parsing.type_inference.expressions import ExpressionInferencer
from jython_complete.parsing.type_inference.models import (
    TypeDescriptor,
    TypeInferenceContext,
)
from jython_complete.parsing.type_inference.scope import Scope
from jython_complete.parsing.type_inference.walker import StatementWalker

if TYPE_CHECKING:
    from tree_sitter import Node

    from jython_complete.config.settings import Settings

logger = logging.getLogger(__name__)


class TypeInferenceEngine:
    """Builds scope trees for script fragments.

    Each build starts from scratch; nothing is carried over between calls
    except the providers held by the context.
    """

    def __init__(
        self,
        context: TypeInferenceContext | None = None,
        parser: ScriptParser | None = None,
        tolerate_syntax_errors: bool = False,
    ):
        self.context = context or TypeInferenceContext()
        self.parser = parser or ScriptParser(tolerate_syntax_errors=tolerate_syntax_errors)
        self.inferencer = ExpressionInferencer()
        self.walker = StatementWalker(self.inferencer)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> TypeInferenceEngine:
        from jython_complete.config import get_settings

        settings = settings or get_settings()
        return cls(
            context=TypeInferenceContext.from_settings(settings),
            tolerate_syntax_errors=settings.tolerate_syntax_errors,
        )

    def build_scope(self, statements: list[Node]) -> Scope:
        root = Scope(context=self.context)
        self.walker.walk(statements, root)
        return root

    def build_scope_from_source(self, source: str) -> Scope:
        """Parse ``source`` and build its scope tree.

        Malformed text yields an empty root scope.
        """
        try:
            statements = self.parser.parse(source)
        except ParsingError as e:
            logger.debug(f"Returning empty scope: {e}")
            return Scope(context=self.context)
        return self.build_scope(statements)

    def infer_type(self, node: Node, scope: Scope) -> TypeDescriptor:
        return self.inferencer.infer_type(node, scope)
