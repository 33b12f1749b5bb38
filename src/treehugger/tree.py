"""Parse entry points: source text in, wrapped syntax tree out."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from treehugger.config import TreeHuggerConfig
from treehugger.exceptions import LanguageError, ParseError
from treehugger.languages import SUPPORTED_LANGUAGES, detect_language, get_parser
from treehugger.node import Node
from treehugger.transform import Transform

if TYPE_CHECKING:
    from tree_sitter import Node as TSNode
    from tree_sitter import Tree

    from treehugger.visitor import Visitor, VisitorFunction

logger = logging.getLogger("treehugger.tree")


def _first_error(node: TSNode) -> TSNode | None:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        if current.has_error:
            stack.extend(reversed(current.children))
    return None


class TreeHugger:
    """A parsed source file.

    Syntax errors do not raise: tree-sitter recovers and ``root.has_error``
    tells whether it had to.
    """

    def __init__(self, source: str, language: str | None = None, *, config: TreeHuggerConfig | None = None):
        self.config = config or TreeHuggerConfig()
        self.language = language or self.config.language
        if self.language not in SUPPORTED_LANGUAGES:
            raise LanguageError(f"Unknown language: {self.language}")
        self.source = source
        self._source_bytes = source.encode("utf-8")

        parser = get_parser(self.language)
        try:
            self.tree: Tree = parser.parse(self._source_bytes)
        except (ValueError, TypeError) as e:
            raise ParseError(f"Failed to parse: {e}") from e

        self.root = Node(self.tree.root_node, self._source_bytes, suggest=self.config.suggest_patterns)
        if self.root.has_error:
            error = _first_error(self.tree.root_node)
            if error is not None:
                row, column = error.start_point
                logger.debug(f"Recovered from a syntax error at {row + 1}:{column + 1}")

    def __repr__(self) -> str:
        return f"<TreeHugger {self.language} {len(self._source_bytes)} bytes>"

    @property
    def has_error(self) -> bool:
        return self.root.has_error

    def find(self, pattern: str) -> Node | None:
        return self.root.find(pattern)

    def find_all(self, pattern: str) -> list[Node]:
        return self.root.find_all(pattern)

    def functions(self) -> list[Node]:
        return self.root.functions()

    def classes(self) -> list[Node]:
        return self.root.classes()

    def imports(self) -> list[Node]:
        return self.root.imports()

    def variables(self) -> list[Node]:
        return self.root.variables()

    def comments(self) -> list[Node]:
        return self.root.comments()

    def exports(self) -> list[Node]:
        return self.root.exports()

    def jsx_components(self) -> list[Node]:
        return self.root.jsx_components()

    def jsx_props(self, component_name: str | None = None) -> list[Node]:
        return self.root.jsx_props(component_name)

    def hooks(self) -> list[Node]:
        return self.root.hooks()

    def visit(self, visitor: Visitor | VisitorFunction) -> None:
        self.root.visit(visitor)

    def node_at(self, line: int, column: int) -> Node | None:
        return self.root.node_at(line, column)

    def transform(self) -> Transform:
        return Transform(self.root, self._source_bytes, config=self.config)


def parse(source_or_path: str | Path, language: str | None = None, *, config: TreeHuggerConfig | None = None) -> TreeHugger:
    """Parse source text, or a file when given the path of an existing JS/TS file."""
    if isinstance(source_or_path, Path) or detect_language(str(source_or_path)):
        path = Path(source_or_path)
        try:
            is_file = path.is_file()
        except (OSError, ValueError):
            is_file = False
        if is_file:
            logger.debug(f"Reading {path}")
            return TreeHugger(
                path.read_text(encoding="utf-8"),
                language or detect_language(path.name),
                config=config,
            )
    return TreeHugger(str(source_or_path), language, config=config)


def transform(node: Node, source: str | bytes | None = None, *, config: TreeHuggerConfig | None = None) -> Transform:
    """Open an edit session over ``node`` (usually a root) and its source text."""
    return Transform(node, source, config=config)
