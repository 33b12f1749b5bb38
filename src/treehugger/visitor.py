"""Enter/exit tree visitors.

A visitor is either a plain callable (called on enter) or an object with
optional ``enter(node, parent)`` / ``exit(node, parent)`` methods. Returning
``False`` from either callback stops the whole traversal.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from treehugger.node import Node

VisitorFunction = Callable[["Node", "Node | None"], Any]


class Visitor(Protocol):
    def enter(self, node: Node, parent: Node | None) -> Any: ...

    def exit(self, node: Node, parent: Node | None) -> Any: ...


class _CallableVisitor:
    def __init__(self, enter: Callable[..., Any]):
        self._enter = enter

    def enter(self, node: Node, parent: Node | None) -> Any:
        return self._enter(node, parent)


def _visit_node(node: Node, visitor: Any, parent: Node | None) -> bool:
    enter = getattr(visitor, "enter", None)
    if enter is not None and enter(node, parent) is False:
        return False

    for child in node.children:
        if not _visit_node(child, visitor, node):
            return False

    exit_ = getattr(visitor, "exit", None)
    if exit_ is not None and exit_(node, parent) is False:
        return False
    return True


def visit(node: Node, visitor: Visitor | VisitorFunction) -> None:
    if callable(visitor) and not hasattr(visitor, "enter") and not hasattr(visitor, "exit"):
        visitor = _CallableVisitor(visitor)
    _visit_node(node, visitor, None)


def collect(node: Node, predicate: Callable[[Node], bool]) -> list[Node]:
    results: list[Node] = []

    def enter(n: Node, parent: Node | None) -> None:
        if predicate(n):
            results.append(n)

    visit(node, enter)
    return results


def find_first(node: Node, predicate: Callable[[Node], bool]) -> Node | None:
    found: list[Node] = []

    def enter(n: Node, parent: Node | None) -> bool:
        if predicate(n):
            found.append(n)
            return False
        return True

    visit(node, enter)
    return found[0] if found else None


def get_path(root: Node, target: Node) -> list[Node]:
    """Nodes from ``root`` down to ``target``; empty if ``target`` is not in ``root``'s subtree."""
    stack: list[Node] = []
    found = False

    class PathVisitor:
        def enter(self, node: Node, parent: Node | None) -> bool:
            nonlocal found
            stack.append(node)
            if node is target:
                found = True
                return False
            return True

        def exit(self, node: Node, parent: Node | None) -> None:
            stack.pop()

    visit(root, PathVisitor())
    return stack if found else []
