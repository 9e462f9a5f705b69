"""Expression type inference.

Maps a right-hand-side expression to a type descriptor:
- Literals (numbers, strings)
- Names, resolved through the scope chain
- Attribute access through host reflection, script classes and modules
- Calls (constructors, host methods, script functions)
- Arithmetic on number literals
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from jython_complete.core.types import FLOATING_TYPE, INTEGRAL_TYPE, STRING_TYPE
from jython_complete.parsing.parser import safe_decode_text
from jython_complete.parsing.type_inference.models import (
    UNKNOWN,
    ClassType,
    Function,
    Instance,
    Static,
    TypeDescriptor,
    TypeInferenceContext,
    Unknown,
)

if TYPE_CHECKING:
    from tree_sitter import Node

    from jython_complete.parsing.type_inference.scope import Scope

logger = logging.getLogger(__name__)

NUMBER_LITERALS = frozenset({"integer", "float"})
STRING_LITERALS = frozenset({"string", "concatenated_string"})


class ExpressionInferencer:
    def infer_type(self, node: Node | None, scope: Scope) -> TypeDescriptor:
        """Infer the descriptor of an expression evaluated in ``scope``.

        Args:
            node: Tree-sitter expression node.
            scope: Scope the expression is evaluated in.

        Returns:
            The inferred descriptor; ``UNKNOWN`` for anything unsupported.
        """
        if node is None:
            return UNKNOWN

        node_type = node.type
        if node_type == "identifier":
            name = safe_decode_text(node)
            return scope.find(name) if name else UNKNOWN
        elif node_type == "integer":
            return Instance(INTEGRAL_TYPE)
        elif node_type == "float":
            return Instance(FLOATING_TYPE)
        elif node_type in STRING_LITERALS:
            return Instance(STRING_TYPE)
        elif node_type == "attribute":
            return self._infer_attribute(node, scope)
        elif node_type == "call":
            return self._infer_call(node, scope)
        elif node_type == "binary_operator":
            return self._infer_binary_operator(node, scope)
        elif node_type == "yield":
            return self.infer_type(_first_named_child(node), scope)
        elif node_type == "parenthesized_expression":
            return self.infer_type(_first_named_child(node), scope)
        elif node_type == "unary_operator":
            return self.infer_type(node.child_by_field_name("argument"), scope)

        return UNKNOWN

    def _infer_attribute(self, node: Node, scope: Scope) -> TypeDescriptor:
        base = self.infer_type(node.child_by_field_name("object"), scope)
        attr = safe_decode_text(node.child_by_field_name("attribute"))
        if isinstance(base, Unknown) or not attr:
            return UNKNOWN

        type_name = base.type_name
        if not type_name:
            return UNKNOWN

        context = scope.context
        host_type = self._host_member_type(type_name, attr, context)
        if host_type is not None:
            return Instance(host_type)

        script_class = self._script_class_of(base)
        if script_class is not None:
            found = self._class_attribute(script_class, attr, context, set())
            if found is not None:
                return found

        if not type_name.startswith("<"):
            qualified = f"{type_name}.{attr}"
            if context.module_members(qualified) is not None:
                return Static(qualified)
            if context.reflect(qualified) is not None:
                return Static(qualified)
            if isinstance(base, Static) and attr in (context.module_members(type_name) or []):
                return Static(qualified)

        logger.debug(f"Cannot resolve attribute {attr} of {type_name}")
        return UNKNOWN

    def _script_class_of(self, base: TypeDescriptor) -> ClassType | None:
        if isinstance(base, ClassType):
            return base
        if isinstance(base, Instance) and base.scope is not None:
            found = base.scope.find(base.type_name)
            if isinstance(found, ClassType):
                return found
        return None

    def _class_attribute(
        self,
        cls: ClassType,
        attr: str,
        context: TypeInferenceContext,
        visited: set[int],
    ) -> TypeDescriptor | None:
        """Resolve ``attr`` on a script class: its own body, then each superclass in order."""
        visited.add(id(cls))
        bound = cls.body_binding(attr)
        if bound is not None:
            return bound

        for superclass in cls.superclass_names:
            if context.reflect(superclass) is not None:
                host_type = self._host_member_type(superclass, attr, context)
                if host_type is not None:
                    return Instance(host_type)
                continue

            parent = cls.find_script_class(superclass)
            if parent is not None and id(parent) not in visited:
                found = self._class_attribute(parent, attr, context, visited)
                if found is not None:
                    return found
        return None

    def _host_member_type(
        self, type_name: str, attr: str, context: TypeInferenceContext
    ) -> str | None:
        """Return type of the first method named ``attr``, else the field's type."""
        host_members = context.reflect(type_name)
        if not host_members:
            return None

        for member in host_members:
            if not member.is_field and member.name == attr and member.value_type_name:
                return member.value_type_name
        for member in host_members:
            if member.is_field and member.name == attr and member.value_type_name:
                return member.value_type_name
        return None

    def _infer_call(self, node: Node, scope: Scope) -> TypeDescriptor:
        callee = self.infer_type(node.child_by_field_name("function"), scope)

        if isinstance(callee, ClassType):
            # Constructor call: the instance shares the class descriptor.
            return callee
        if isinstance(callee, Static):
            return Instance(callee.name)
        if isinstance(callee, Function):
            if callee.return_type_name:
                return Instance(callee.return_type_name, callee.scope)
            return UNKNOWN
        return callee

    def _infer_binary_operator(self, node: Node, scope: Scope) -> TypeDescriptor:
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        left_type = left.type if left is not None else None
        right_type = right.type if right is not None else None

        if left_type in NUMBER_LITERALS or right_type in NUMBER_LITERALS:
            if left_type == "float" or right_type == "float":
                return Instance(FLOATING_TYPE)
            if left_type == "integer" and right_type == "integer":
                return Instance(INTEGRAL_TYPE)

        inferred = self.infer_type(left, scope)
        if not isinstance(inferred, Unknown):
            return inferred
        return self.infer_type(right, scope)


def _first_named_child(node: Node) -> Node | None:
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None
