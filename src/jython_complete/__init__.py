"""jython-complete - scope tracking and type inference for Jython autocompletion."""

__version__ = "0.1.0"

from jython_complete.completion import CompletionService
from jython_complete.config import Settings, get_settings
from jython_complete.parsing.type_inference import Scope, TypeInferenceContext, TypeInferenceEngine

__all__ = [
    "CompletionService",
    "get_settings",
    "Scope",
    "Settings",
    "TypeInferenceContext",
    "TypeInferenceEngine",
]
