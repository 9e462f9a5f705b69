"""Scope tracking and type inference for Jython script fragments.

Builds a tree of lexical scopes from the text typed so far and assigns a
best-effort type descriptor to every binding, so that completion can list
visible names and the members of any bound value.

Key components:
- TypeInferenceEngine: parses a fragment and builds its scope tree
- Scope: name lookup, prefix search and type-directed variable search
- ExpressionInferencer / StatementWalker: expression and statement handling
- ClassUnifier: merges ``self`` members discovered in methods into the class

Usage:
    from jython_complete.parsing.type_inference import TypeInferenceEngine

    engine = TypeInferenceEngine()
    scope = engine.build_scope_from_source("from ij import IJ\\nimp = IJ.getImage()\\n")
    members = scope.get_last().find("imp").members(engine.context)
"""

from jython_complete.parsing.type_inference.engine import TypeInferenceEngine
from jython_complete.parsing.type_inference.expressions import ExpressionInferencer
from jython_complete.parsing.type_inference.models import (
    UNKNOWN,
    ClassType,
    CompletionEntry,
    Function,
    Instance,
    Static,
    TypeDescriptor,
    TypeInferenceContext,
    Unknown,
    describe,
)
from jython_complete.parsing.type_inference.scope import Scope
from jython_complete.parsing.type_inference.unifier import ClassUnifier
from jython_complete.parsing.type_inference.walker import StatementWalker

__all__ = [
    "TypeInferenceEngine",
    "ExpressionInferencer",
    "StatementWalker",
    "ClassUnifier",
    "Scope",
    "TypeInferenceContext",
    "TypeDescriptor",
    "CompletionEntry",
    "Unknown",
    "UNKNOWN",
    "Instance",
    "Static",
    "Function",
    "ClassType",
    "describe",
]
