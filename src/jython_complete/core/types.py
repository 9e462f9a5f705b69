from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

INTEGRAL_TYPE = "long"
FLOATING_TYPE = "double"
STRING_TYPE = "java.lang.String"
PLACEHOLDER_CLASS = "<unknown>"

# Widening order of host numeric types, primitive and boxed.
NUMERIC_RANKS: dict[str, int] = {
    "byte": 0,
    "java.lang.Byte": 0,
    "short": 1,
    "java.lang.Short": 1,
    "int": 2,
    "java.lang.Integer": 2,
    "long": 3,
    "java.lang.Long": 3,
    "float": 4,
    "java.lang.Float": 4,
    "double": 5,
    "java.lang.Double": 5,
}

FLOATING_TYPES = frozenset({"float", "double", "java.lang.Float", "java.lang.Double"})

BOXED_TYPES: dict[str, str] = {
    "boolean": "java.lang.Boolean",
    "byte": "java.lang.Byte",
    "char": "java.lang.Character",
    "short": "java.lang.Short",
    "int": "java.lang.Integer",
    "long": "java.lang.Long",
    "float": "java.lang.Float",
    "double": "java.lang.Double",
}


class MemberKind(str, Enum):
    FIELD = "field"
    METHOD = "method"


@dataclass(frozen=True)
class HostMember:
    """A public field or method reported by host reflection.

    For methods ``value_type_name`` is the return type.
    """

    name: str
    is_static: bool
    is_field: bool
    declaring_type: str
    value_type_name: str | None = None
    parameter_types: tuple[str, ...] = ()


def is_numeric(type_name: str | None) -> bool:
    return type_name is not None and type_name in NUMERIC_RANKS


def is_assignable(
    value_type: str | None,
    target_type: str,
    target_host_type: str | None = None,
) -> bool:
    """Whether a value of ``value_type`` can be passed where ``target_type`` is expected.

    Floating values fit any numeric target; integral values fit numeric
    targets of equal or wider rank. Everything else needs an exact name match.
    """
    if value_type is None:
        return False
    if value_type == target_type or value_type == target_host_type:
        return True

    if not is_numeric(value_type):
        return False

    target_rank = NUMERIC_RANKS.get(target_type)
    if target_rank is None and target_host_type:
        target_rank = NUMERIC_RANKS.get(target_host_type)
    if target_rank is None:
        return False

    if value_type in FLOATING_TYPES:
        return True
    return NUMERIC_RANKS[value_type] <= target_rank
