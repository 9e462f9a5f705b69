"""Statement walker that populates a scope tree.

Handles:
- import / from-import (including wildcard imports via the module index)
- Assignments: simple, chained, tuple destructuring, dotted targets
- Function definitions (parameter placeholders, last-statement return type)
- Class definitions (superclasses, constructor parameters, member unification)
- Control blocks, walked into the enclosing scope
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from jython_complete.core.types import PLACEHOLDER_CLASS
from jython_complete.parsing.parser import safe_decode_text, statements_of
from jython_complete.parsing.type_inference.models import (
    UNKNOWN,
    ClassType,
    Function,
    Static,
    TypeDescriptor,
)
from jython_complete.parsing.type_inference.scope import Scope
from jython_complete.parsing.type_inference.unifier import ClassUnifier

if TYPE_CHECKING:
    from tree_sitter import Node

    from jython_complete.parsing.type_inference.expressions import ExpressionInferencer

logger = logging.getLogger(__name__)

CONTROL_BLOCKS = frozenset({
    "if_statement",
    "elif_clause",
    "else_clause",
    "for_statement",
    "while_statement",
    "try_statement",
    "except_clause",
    "except_group_clause",
    "finally_clause",
    "with_statement",
})

DESTRUCTURING_TARGETS = frozenset({"pattern_list", "tuple_pattern", "list_pattern"})
SEQUENCE_LITERALS = frozenset({"expression_list", "tuple", "list"})
SPLAT_NODES = frozenset({"list_splat_pattern", "dictionary_splat_pattern", "list_splat"})


class StatementWalker:
    def __init__(self, inferencer: ExpressionInferencer):
        self.inferencer = inferencer

    def walk(self, statements: list[Node], scope: Scope) -> None:
        for statement in statements:
            try:
                self.walk_statement(statement, scope)
            except Exception as e:
                logger.debug(
                    f"Skipping statement at line {statement.start_point[0] + 1}: {e}"
                )

    def walk_statement(self, node: Node, scope: Scope) -> None:
        node_type = node.type
        if node_type == "import_statement":
            self._walk_import(node, scope)
        elif node_type == "import_from_statement":
            self._walk_import_from(node, scope)
        elif node_type == "expression_statement":
            for child in node.named_children:
                if child.type == "assignment":
                    self._walk_assignment(child, scope)
        elif node_type == "function_definition":
            self._walk_function(node, scope)
        elif node_type == "class_definition":
            self._walk_class(node, scope)
        elif node_type == "decorated_definition":
            definition = node.child_by_field_name("definition")
            if definition is not None:
                self.walk_statement(definition, scope)
        elif node_type in CONTROL_BLOCKS:
            self._walk_control(node, scope)

    def _walk_import(self, node: Node, scope: Scope) -> None:
        for name_node in node.children_by_field_name("name"):
            if name_node.type == "aliased_import":
                dotted = safe_decode_text(name_node.child_by_field_name("name"))
                alias = safe_decode_text(name_node.child_by_field_name("alias"))
                if dotted and alias:
                    scope.imports[alias] = Static(dotted)
            else:
                dotted = safe_decode_text(name_node)
                if dotted:
                    first = dotted.split(".", 1)[0]
                    scope.imports[first] = Static(first)

    def _walk_import_from(self, node: Node, scope: Scope) -> None:
        module = safe_decode_text(node.child_by_field_name("module_name"))
        if module is None:
            return
        module = module.lstrip(".")

        if any(child.type == "wildcard_import" for child in node.children):
            members = scope.context.module_members(module)
            if members is None:
                logger.debug(f"Wildcard import from unknown module {module}")
            for member in members or []:
                scope.imports[member] = Static(f"{module}.{member}")
            return

        for name_node in node.children_by_field_name("name"):
            if name_node.type == "aliased_import":
                name = safe_decode_text(name_node.child_by_field_name("name"))
                key = safe_decode_text(name_node.child_by_field_name("alias"))
            else:
                name = key = safe_decode_text(name_node)
            if name and key:
                scope.imports[key] = Static(f"{module}.{name}" if module else name)

    def _walk_assignment(self, node: Node, scope: Scope) -> None:
        targets = [node.child_by_field_name("left")]
        value_node = node.child_by_field_name("right")

        # a = b = value nests assignments on the right.
        while value_node is not None and value_node.type == "assignment":
            targets.append(value_node.child_by_field_name("left"))
            value_node = value_node.child_by_field_name("right")
        if value_node is None:
            return

        value: TypeDescriptor | None = None
        for target in targets:
            if target is None:
                continue
            if target.type == "identifier":
                if value is None:
                    value = self.inferencer.infer_type(value_node, scope)
                scope.vars[safe_decode_text(target)] = value
            elif target.type in DESTRUCTURING_TARGETS:
                self._destructure(target, value_node, scope)
            elif target.type == "attribute":
                self._register_dotted_target(target, scope)

    def _destructure(self, target: Node, value_node: Node, scope: Scope) -> None:
        if value_node.type not in SEQUENCE_LITERALS:
            logger.debug("Skipping destructuring of a non-literal sequence")
            return

        elements = [c for c in target.named_children if c.type != "comment"]
        values = [c for c in value_node.named_children if c.type != "comment"]
        if len(elements) != len(values):
            return
        if any(n.type in SPLAT_NODES for n in elements + values):
            return

        # Right side is evaluated before any target is bound: a, b = b, a
        inferred = [
            self.inferencer.infer_type(v, scope) if e.type == "identifier" else None
            for e, v in zip(elements, values)
        ]
        for element, element_value, element_type in zip(elements, values, inferred):
            if element_type is not None:
                scope.vars[safe_decode_text(element)] = element_type
            elif element.type in DESTRUCTURING_TARGETS:
                self._destructure(element, element_value, scope)

    def _register_dotted_target(self, target: Node, scope: Scope) -> None:
        """Record ``a.b.c = ...`` as members on the classes along the chain."""
        chain: list[str] = []
        node = target
        while node is not None and node.type == "attribute":
            chain.append(safe_decode_text(node.child_by_field_name("attribute")))
            node = node.child_by_field_name("object")
        if node is None or node.type != "identifier":
            return
        chain.reverse()

        owner = scope.find(safe_decode_text(node))
        for attr in chain:
            if not isinstance(owner, ClassType) or not attr:
                return
            owner.put(attr)
            # Later links resolve only inside the owner's own class body.
            owner = owner.body_binding(attr)

    def _walk_function(self, node: Node, scope: Scope) -> None:
        name = safe_decode_text(node.child_by_field_name("name"))
        if not name:
            return

        fn_scope = Scope(scope)
        param_names = self._parameter_names(node.child_by_field_name("parameters"))
        for param in param_names:
            fn_scope.vars[param] = ClassType(PLACEHOLDER_CLASS, [], [], [], fn_scope)

        body = node.child_by_field_name("body")
        statements = statements_of(body) if body is not None else []
        self.walk(statements, fn_scope)

        scope.vars[name] = Function(
            name, self._return_type_name(statements, fn_scope), param_names, fn_scope
        )

    def _return_type_name(self, statements: list[Node], fn_scope: Scope) -> str | None:
        if not statements or statements[-1].type != "return_statement":
            return None
        expressions = statements[-1].named_children
        if not expressions:
            return None

        type_name = self.inferencer.infer_type(expressions[0], fn_scope).type_name
        if type_name == PLACEHOLDER_CLASS:
            return None
        return type_name

    def _parameter_names(self, params: Node | None) -> list[str]:
        if params is None:
            return []

        names = []
        for param in params.named_children:
            if param.type == "identifier":
                name_node = param
            elif param.type in ("default_parameter", "typed_default_parameter"):
                name_node = param.child_by_field_name("name")
            elif param.type in ("typed_parameter", "list_splat_pattern", "dictionary_splat_pattern"):
                name_node = param.named_children[0] if param.named_children else None
            else:
                continue

            if name_node is not None and name_node.type in SPLAT_NODES:
                name_node = name_node.named_children[0] if name_node.named_children else None
            if name_node is not None and name_node.type == "identifier":
                names.append(safe_decode_text(name_node))
        return names

    def _walk_class(self, node: Node, scope: Scope) -> None:
        name = safe_decode_text(node.child_by_field_name("name"))
        if not name:
            return

        class_scope = Scope(scope, class_name=name)
        body = node.child_by_field_name("body")
        self.walk(statements_of(body) if body is not None else [], class_scope)

        superclass_names = self._superclass_names(
            node.child_by_field_name("superclasses"), name, scope
        )
        member_names = [
            member
            for member, descriptor in class_scope.vars.items()
            if isinstance(descriptor, (Function, ClassType))
        ]
        init = class_scope.vars.get("__init__")
        constructor_params = init.param_names[1:] if isinstance(init, Function) else []

        cls = ClassType(name, superclass_names, constructor_params, member_names, class_scope)
        ClassUnifier(cls).unify()
        scope.vars[name] = cls

    def _superclass_names(
        self, superclasses: Node | None, class_name: str, scope: Scope
    ) -> list[str]:
        if superclasses is None:
            return []

        names = []
        for base in superclasses.named_children:
            if base.type in ("keyword_argument", "comment") or base.type in SPLAT_NODES:
                continue
            type_name = self.inferencer.infer_type(base, scope).type_name
            if type_name is None or type_name == PLACEHOLDER_CLASS:
                logger.debug(
                    f"Could not resolve superclass {safe_decode_text(base)} of {class_name}"
                )
                continue
            names.append(type_name)
        return names

    def _walk_control(self, node: Node, scope: Scope) -> None:
        if node.type == "for_statement":
            for name in target_names(node.child_by_field_name("left")):
                scope.vars[name] = UNKNOWN

        for child in node.named_children:
            if child.type == "block":
                self.walk(statements_of(child), scope)
            elif child.type in CONTROL_BLOCKS:
                self._walk_control(child, scope)


def target_names(node: Node | None) -> list[str]:
    if node is None:
        return []
    if node.type == "identifier":
        return [safe_decode_text(node)]
    if node.type in DESTRUCTURING_TARGETS or node.type in SPLAT_NODES:
        names = []
        for child in node.named_children:
            names.extend(target_names(child))
        return names
    return []
