"""Read-only wrapper over tree-sitter nodes."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from treehugger import aliases
from treehugger.exceptions import ParseError
from treehugger.query import find_all, find_first, iter_preorder
from treehugger.selector import compile_pattern

if TYPE_CHECKING:
    from tree_sitter import Node as TSNode

    from treehugger.visitor import Visitor, VisitorFunction

FUNCTION_TYPES = frozenset({"function_declaration", "function_expression", "arrow_function", "method_definition"})
PARAMETER_TYPES = frozenset({"identifier", "rest_pattern", "assignment_pattern", "object_pattern", "array_pattern"})
# TypeScript wraps each parameter; the binding lives in the `pattern` field.
TS_PARAMETER_TYPES = frozenset({"required_parameter", "optional_parameter"})

_HOOK_NAME = re.compile(r"^use[A-Z]")


class Node:
    """One syntax tree element: type, byte range, positions and navigation.

    Wrappers are immutable. Children are created once per parent and cached, so
    the same underlying node always yields the same ``Node`` object when reached
    through ``children``/``field``.
    """

    __slots__ = ("_ts_node", "_children", "source", "parent", "suggest")

    def __init__(self, ts_node: TSNode, source: bytes, parent: Node | None = None, *, suggest: bool = True):
        # Some native bindings hand out null nodes under concurrent use; refuse them early.
        if ts_node is None:
            raise ParseError("Node wrapper received no syntax node (tree-sitter binding returned None)")
        if getattr(ts_node, "type", None) is None:
            raise ParseError("Node wrapper received an invalid syntax node without a type")
        self._ts_node = ts_node
        self._children: list[Node] | None = None
        self.source = source
        self.parent = parent
        self.suggest = suggest

    def __repr__(self) -> str:
        return f"<Node {self.type} {self.line}:{self.column}-{self.end_line}:{self.end_column}>"

    # -- raw properties ---------------------------------------------------

    @property
    def ts_node(self) -> TSNode:
        return self._ts_node

    @property
    def type(self) -> str:
        return self._ts_node.type

    @property
    def start_byte(self) -> int:
        return self._ts_node.start_byte

    @property
    def end_byte(self) -> int:
        return self._ts_node.end_byte

    @property
    def start_point(self) -> tuple[int, int]:
        row, column = self._ts_node.start_point
        return row, column

    @property
    def end_point(self) -> tuple[int, int]:
        row, column = self._ts_node.end_point
        return row, column

    @property
    def text(self) -> str:
        return self.source[self.start_byte : self.end_byte].decode("utf-8")

    @property
    def line(self) -> int:
        return self.start_point[0] + 1

    @property
    def column(self) -> int:
        return self.start_point[1] + 1

    @property
    def end_line(self) -> int:
        return self.end_point[0] + 1

    @property
    def end_column(self) -> int:
        return self.end_point[1] + 1

    @property
    def has_error(self) -> bool:
        return self._ts_node.has_error

    @property
    def is_named(self) -> bool:
        return self._ts_node.is_named

    @property
    def children(self) -> list[Node]:
        if self._children is None:
            self._children = [Node(c, self.source, self, suggest=self.suggest) for c in self._ts_node.children]
        return self._children

    @property
    def named_children(self) -> list[Node]:
        return [c for c in self.children if c.is_named]

    def field(self, name: str) -> Node | None:
        """Return the child stored under the tree-sitter field ``name``, or None."""
        ts_child = self._ts_node.child_by_field_name(name)
        if ts_child is None:
            return None
        for child in self.children:
            if child._ts_node == ts_child:
                return child
        return Node(ts_child, self.source, self, suggest=self.suggest)

    @property
    def name(self) -> str | None:
        name_node = self.field("name")
        return name_node.text if name_node is not None else None

    # -- queries ----------------------------------------------------------

    def find(self, pattern: str) -> Node | None:
        return find_first(self, compile_pattern(pattern, suggest=self.suggest))

    def find_all(self, pattern: str) -> list[Node]:
        return find_all(self, compile_pattern(pattern, suggest=self.suggest))

    def functions(self) -> list[Node]:
        return self.find_all("function")

    def classes(self) -> list[Node]:
        return self.find_all("class")

    def imports(self) -> list[Node]:
        return self.find_all("import_statement")

    def variables(self) -> list[Node]:
        return self.find_all("variable_declarator")

    def comments(self) -> list[Node]:
        return self.find_all("comment")

    def exports(self) -> list[Node]:
        return self.find_all("export_statement") + self.find_all("export_specifier")

    def jsx_components(self) -> list[Node]:
        return self.find_all("jsx-element")

    def jsx_props(self, component_name: str | None = None) -> list[Node]:
        """Attributes written on JSX tags, optionally only on tags named ``component_name``."""
        props = []
        for component in self.jsx_components():
            tag = _jsx_tag(component)
            if tag is None:
                continue
            if component_name is not None:
                tag_name = tag.field("name")
                if tag_name is None or tag_name.text != component_name:
                    continue
            props.extend(c for c in tag.children if c.type == "jsx_attribute")
        return props

    def hooks(self) -> list[Node]:
        """React hook calls: call expressions whose callee is named ``useXxx``."""
        hooks = []
        for call in self.find_all("call_expression"):
            callee = call.field("function")
            if callee is not None and _HOOK_NAME.match(callee.text):
                hooks.append(call)
        return hooks

    # -- function introspection ---------------------------------------------

    def parameters(self) -> list[str]:
        if self.type not in FUNCTION_TYPES:
            return []
        single = self.field("parameter")
        if single is not None:
            return [single.text]
        params = self.field("parameters")
        if params is None:
            return []
        result = []
        for child in params.children:
            if child.type in TS_PARAMETER_TYPES:
                pattern = child.field("pattern")
                result.append(pattern.text if pattern is not None else child.text)
            elif child.type in PARAMETER_TYPES:
                result.append(child.text)
        return result

    def is_async(self) -> bool:
        if self.type not in FUNCTION_TYPES:
            return False
        return any(child.type == "async" for child in self.children)

    def body_range(self) -> tuple[int, int] | None:
        body = self.field("body")
        if body is None:
            return None
        return body.line, body.end_line

    # -- navigation -------------------------------------------------------

    def get_parent(self, type: str | None = None) -> Node | None:
        """Nearest ancestor, or nearest ancestor whose type matches ``type`` (aliases allowed)."""
        types = aliases.resolve(type) if type else None
        current = self.parent
        while current is not None:
            if types is None or current.type in types:
                return current
            current = current.parent
        return None

    def ancestors(self) -> list[Node]:
        result = []
        current = self.parent
        while current is not None:
            result.append(current)
            current = current.parent
        return result

    def siblings(self) -> list[Node]:
        if self.parent is None:
            return []
        return [c for c in self.parent.children if c is not self]

    def descendants(self, pattern: str | None = None) -> list[Node]:
        """Strict descendants in pre-order, optionally filtered by ``pattern``."""
        nodes = iter_preorder(self)
        next(nodes)
        if pattern is None:
            return list(nodes)
        predicate = compile_pattern(pattern, suggest=self.suggest)
        return [n for n in nodes if predicate(n)]

    def path(self) -> list[Node]:
        """Nodes from the root down to (and including) this node."""
        return [*reversed(self.ancestors()), self]

    def node_at(self, line: int, column: int) -> Node | None:
        """Deepest node containing the 1-based ``line``/``column`` position."""
        position = (line - 1, column - 1)
        if not self.start_point <= position <= self.end_point:
            return None
        node = self
        while True:
            # End points are exclusive once inside the starting node.
            child = next((c for c in node.children if c.start_point <= position < c.end_point), None)
            if child is None:
                return node
            node = child

    def visit(self, visitor: Visitor | VisitorFunction) -> None:
        from treehugger.visitor import visit

        visit(self, visitor)


def _jsx_tag(component: Node) -> Node | None:
    if component.type == "jsx_self_closing_element":
        return component
    for child in component.children:
        if child.type == "jsx_opening_element":
            return child
    return None
