"""Core abstractions and shared types for jython-complete."""

from jython_complete.core.errors import (
    ConfigurationError,
    HostClassNotFoundError,
    JythonCompleteError,
    ModuleIndexError,
    ParsingError,
    ReflectionError,
)
from jython_complete.core.protocols import (
    BuiltinSymbolIndex,
    HostReflectionProvider,
    ModuleIndex,
)
from jython_complete.core.types import (
    FLOATING_TYPE,
    INTEGRAL_TYPE,
    STRING_TYPE,
    HostMember,
    MemberKind,
    is_assignable,
)

__all__ = [
    "BuiltinSymbolIndex",
    "HostReflectionProvider",
    "ModuleIndex",
    "FLOATING_TYPE",
    "INTEGRAL_TYPE",
    "STRING_TYPE",
    "HostMember",
    "MemberKind",
    "is_assignable",
    "ConfigurationError",
    "HostClassNotFoundError",
    "JythonCompleteError",
    "ModuleIndexError",
    "ParsingError",
    "ReflectionError",
]
