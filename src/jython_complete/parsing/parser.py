from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tree_sitter_language_pack import get_parser

from jython_complete.core.errors import ParsingError

if TYPE_CHECKING:
    from tree_sitter import Node, Parser, Tree

logger = logging.getLogger(__name__)

NON_STATEMENT_NODES = frozenset({"comment"})


def safe_decode_text(node: Node | None) -> str | None:
    if node is not None and node.text:
        return node.text.decode("utf-8")
    return None


def statements_of(node: Node) -> list[Node]:
    """Named children of a module or block, without comments."""
    return [c for c in node.named_children if c.type not in NON_STATEMENT_NODES]


def _first_error_line(node: Node) -> int | None:
    if node.type == "ERROR" or node.is_missing:
        return node.start_point[0] + 1
    for child in node.children:
        if child.has_error or child.is_missing:
            line = _first_error_line(child)
            if line is not None:
                return line
    return None


class ScriptParser:
    """Parses Jython script text with the tree-sitter Python grammar."""

    LANGUAGE = "python"

    def __init__(self, tolerate_syntax_errors: bool = False) -> None:
        self.tolerate_syntax_errors = tolerate_syntax_errors
        self._parser: Parser | None = None

    def _get_parser(self) -> Parser:
        if self._parser is None:
            self._parser = get_parser(self.LANGUAGE)
        return self._parser

    def parse_tree(self, source: str) -> Tree:
        """Parse without checking for syntax errors."""
        try:
            return self._get_parser().parse(source.encode("utf-8"))
        except Exception as e:
            raise ParsingError("Failed to parse script", cause=e) from e

    def parse(self, source: str) -> list[Node]:
        """Parse ``source`` and return its top-level statements.

        Raises:
            ParsingError: If the text is malformed and syntax errors are not
                tolerated.
        """
        tree = self.parse_tree(source)
        root = tree.root_node
        if root.has_error and not self.tolerate_syntax_errors:
            line = _first_error_line(root)
            raise ParsingError(f"Syntax error near line {line}", line=line)
        return statements_of(root)
