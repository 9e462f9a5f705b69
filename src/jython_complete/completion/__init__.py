"""Request-level completion driver."""

from jython_complete.completion.service import (
    CompletionService,
    NameCompletion,
    filter_completions,
    sort_completions,
)

__all__ = [
    "CompletionService",
    "NameCompletion",
    "filter_completions",
    "sort_completions",
]
