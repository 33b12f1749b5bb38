"""Depth-first pre-order search over wrapped nodes."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from treehugger.selector import Predicate, compile_pattern

if TYPE_CHECKING:
    from treehugger.node import Node


def iter_preorder(root: Node) -> Iterator[Node]:
    """Yield ``root`` and all its descendants, parents before children, children left to right."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def find_first(root: Node, predicate: Predicate) -> Node | None:
    for node in iter_preorder(root):
        if predicate(node):
            return node
    return None


def find_all(root: Node, predicate: Predicate) -> list[Node]:
    return [node for node in iter_preorder(root) if predicate(node)]


def select(root: Node, pattern: str, *, suggest: bool = True) -> list[Node]:
    """Compile ``pattern`` and return every match in ``root``'s subtree, ``root`` included."""
    return find_all(root, compile_pattern(pattern, suggest=suggest))


def select_one(root: Node, pattern: str, *, suggest: bool = True) -> Node | None:
    return find_first(root, compile_pattern(pattern, suggest=suggest))
