"""CSS-like selectors over syntax tree nodes.

A pattern is parsed into a small selector tree and compiled into a predicate:

    function_declaration[name="main"]
    class_declaration > class_body method_definition:not(:has(async))
    jsx_element:has(jsx_attribute[name="onClick"])

Supported syntax:

    type                 node type, or an alias from ``treehugger.aliases``
    [attr] [attr=v]      attribute presence / comparison; operators = ~= ^= $= *=
    :has(sel) :not(sel)  any strict descendant matches / negation
    a b                  b with some ancestor matching a
    a > b                b whose parent matches a

Attributes ``name``, ``text`` and ``async`` are derived from the node, any other
attribute name looks up the tree-sitter field of that name.

Patterns that fail to parse compile to a predicate that matches nothing, so a
typo never turns into an exception inside a traversal.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Union

from treehugger import aliases
from treehugger.exceptions import PatternError

if TYPE_CHECKING:
    from treehugger.node import Node

logger = logging.getLogger("treehugger.selector")

Predicate = Callable[["Node"], bool]

ATTRIBUTE_OPERATORS = ("~=", "^=", "$=", "*=", "=")
COMBINATOR_PSEUDOS = ("has", "not")


# ---------------
# Selector tree
# ---------------


@dataclass(frozen=True, slots=True)
class TypeSelector:
    name: str


@dataclass(frozen=True, slots=True)
class AttributeSelector:
    name: str
    operator: str = "="
    value: str | None = None


@dataclass(frozen=True, slots=True)
class PseudoSelector:
    name: str
    argument: str | None = None
    # Parsed form of ``argument`` for :has/:not.
    selector: Selector | None = None


@dataclass(frozen=True, slots=True)
class ChildSelector:
    left: Selector
    right: Selector


@dataclass(frozen=True, slots=True)
class DescendantSelector:
    left: Selector
    right: Selector


@dataclass(frozen=True, slots=True)
class CombinationSelector:
    selectors: tuple[Selector, ...]


Selector = Union[
    TypeSelector, AttributeSelector, PseudoSelector, ChildSelector, DescendantSelector, CombinationSelector
]


# ---------------
# Parser
# ---------------


def _is_identifier_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def _is_identifier_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_-"


class SelectorParser:
    """Recursive-descent parser over the raw pattern string with an explicit cursor."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        self.input = pattern.strip()
        self.pos = 0

    def parse(self) -> Selector:
        if not self.input:
            raise self._error("Empty pattern")
        selector = self._parse_sequence()
        if self.pos < len(self.input):
            raise self._error(f"Unexpected {self._peek()!r}")
        return selector

    # -- grammar ----------------------------------------------------------

    def _parse_sequence(self) -> Selector:
        left = self._parse_compound()
        while True:
            had_space = self._skip_whitespace()
            if self.pos >= len(self.input):
                return left
            ch = self._peek()
            if ch == ">":
                self.pos += 1
                self._skip_whitespace()
                left = ChildSelector(left, self._parse_compound())
            elif had_space:
                left = DescendantSelector(left, self._parse_compound())
            else:
                raise self._error(f"Unexpected {ch!r}")

    def _parse_compound(self) -> Selector:
        parts: list[Selector] = []
        if self.pos < len(self.input) and _is_identifier_start(self._peek()):
            parts.append(TypeSelector(self._parse_identifier()))

        while self.pos < len(self.input):
            ch = self._peek()
            if ch == "[":
                parts.append(self._parse_attribute())
            elif ch == ":":
                parts.append(self._parse_pseudo())
            else:
                break

        if not parts:
            found = repr(self._peek()) if self.pos < len(self.input) else "end of pattern"
            raise self._error(f"Expected selector but got {found}")
        if len(parts) == 1:
            return parts[0]
        return CombinationSelector(tuple(parts))

    def _parse_attribute(self) -> AttributeSelector:
        self._expect("[")
        self._skip_whitespace()
        name = self._parse_identifier()
        if not name:
            raise self._error("Expected attribute name")
        self._skip_whitespace()

        operator = "="
        value = None
        for op in ATTRIBUTE_OPERATORS:
            if self.input.startswith(op, self.pos):
                operator = op
                self.pos += len(op)
                value = self._parse_attribute_value()
                break

        self._skip_whitespace()
        self._expect("]")
        return AttributeSelector(name, operator, value)

    def _parse_attribute_value(self) -> str:
        self._skip_whitespace()
        quote = self._peek()
        if quote in ('"', "'"):
            self.pos += 1
            value = self._parse_quoted(quote)
            self._expect(quote)
            return value
        value = self._parse_identifier()
        if not value:
            raise self._error("Expected attribute value")
        return value

    def _parse_pseudo(self) -> PseudoSelector:
        self._expect(":")
        name = self._parse_identifier()
        if not name:
            raise self._error("Expected pseudo-selector name")

        if self._peek() != "(":
            return PseudoSelector(name)

        self.pos += 1
        argument = self._parse_balanced()
        self._expect(")")
        if name not in COMBINATOR_PSEUDOS:
            # Unknown pseudo-selectors compile to "match nothing"; their argument is not parsed.
            return PseudoSelector(name, argument)
        if not argument.strip():
            raise self._error(f"Empty argument to :{name}()")
        return PseudoSelector(name, argument, parse_selector(argument))

    # -- lexing helpers ---------------------------------------------------

    def _peek(self) -> str:
        return self.input[self.pos] if self.pos < len(self.input) else ""

    def _skip_whitespace(self) -> bool:
        start = self.pos
        while self.pos < len(self.input) and self.input[self.pos].isspace():
            self.pos += 1
        return self.pos > start

    def _expect(self, ch: str) -> None:
        if self._peek() != ch:
            found = repr(self._peek()) if self.pos < len(self.input) else "end of pattern"
            raise self._error(f"Expected {ch!r} but got {found}")
        self.pos += 1

    def _parse_identifier(self) -> str:
        start = self.pos
        while self.pos < len(self.input) and _is_identifier_char(self.input[self.pos]):
            self.pos += 1
        return self.input[start : self.pos]

    def _parse_quoted(self, quote: str) -> str:
        out = []
        while self.pos < len(self.input) and self.input[self.pos] != quote:
            ch = self.input[self.pos]
            if ch == "\\" and self.pos + 1 < len(self.input):
                self.pos += 1
                escaped = self.input[self.pos]
                # Escaped quotes lose their backslash, anything else keeps it.
                out.append(escaped if escaped == quote else "\\" + escaped)
            else:
                out.append(ch)
            self.pos += 1
        return "".join(out)

    def _parse_balanced(self) -> str:
        start = self.pos
        depth = 0
        quote = ""
        while self.pos < len(self.input):
            ch = self.input[self.pos]
            if quote:
                if ch == "\\":
                    self.pos += 1
                elif ch == quote:
                    quote = ""
            elif ch in ('"', "'"):
                quote = ch
            elif ch == "(":
                depth += 1
            elif ch == ")":
                if depth == 0:
                    break
                depth -= 1
            self.pos += 1
        return self.input[start : self.pos]

    def _error(self, message: str) -> PatternError:
        return PatternError(f"{message} at position {self.pos} in pattern {self.pattern!r}", self.pattern, self.pos)


def parse_selector(pattern: str) -> Selector:
    """Parse ``pattern`` into a selector tree. Raises ``PatternError`` on malformed input."""
    return SelectorParser(pattern).parse()


# ---------------
# Compiler
# ---------------


def _never(node: Node) -> bool:
    return False


def _match_value(actual: str | None, operator: str, expected: str | None) -> bool:
    if expected is None:
        return bool(actual)
    if actual is None:
        return False
    if operator == "=":
        return actual == expected
    if operator == "~=":
        return expected in actual.split()
    if operator == "^=":
        return actual.startswith(expected)
    if operator == "$=":
        return actual.endswith(expected)
    if operator == "*=":
        return expected in actual
    return False


def _derived_name(node: Node) -> str | None:
    name = node.name
    if name is None and node.type == "jsx_attribute":
        # jsx_attribute exposes no `name` field: the name is its leading property_identifier.
        children = node.children
        if children and children[0].type == "property_identifier":
            return children[0].text
    return name


def _derived_async(node: Node) -> str | None:
    if any(child.type == "async" for child in node.children):
        return "async"
    return None


def _attribute_getter(name: str) -> Callable[[Node], str | None]:
    if name == "name":
        return _derived_name
    if name == "text":
        return lambda node: node.text
    if name == "async":
        return _derived_async

    def field_text(node: Node) -> str | None:
        field = node.field(name)
        return field.text if field is not None else None

    return field_text


def _compile_attribute(selector: AttributeSelector) -> Predicate:
    getter = _attribute_getter(selector.name)
    operator, value = selector.operator, selector.value

    def predicate(node: Node) -> bool:
        return _match_value(getter(node), operator, value)

    return predicate


def _compile_pseudo(selector: PseudoSelector) -> Predicate:
    if selector.selector is None or selector.name not in COMBINATOR_PSEUDOS:
        logger.debug(f"Unknown pseudo-selector :{selector.name} matches nothing")
        return _never

    inner = compile_selector(selector.selector)
    if selector.name == "not":
        return lambda node: not inner(node)

    def has(node: Node) -> bool:
        stack = list(reversed(node.children))
        while stack:
            current = stack.pop()
            if inner(current):
                return True
            stack.extend(reversed(current.children))
        return False

    return has


def compile_selector(selector: Selector) -> Predicate:
    """Compile a selector tree into a total ``Node -> bool`` predicate."""
    if isinstance(selector, TypeSelector):
        types = aliases.resolve(selector.name)
        return lambda node: node.type in types

    if isinstance(selector, AttributeSelector):
        return _compile_attribute(selector)

    if isinstance(selector, PseudoSelector):
        return _compile_pseudo(selector)

    if isinstance(selector, ChildSelector):
        left, right = compile_selector(selector.left), compile_selector(selector.right)

        def child(node: Node) -> bool:
            if not right(node):
                return False
            parent = node.parent
            return parent is not None and left(parent)

        return child

    if isinstance(selector, DescendantSelector):
        left, right = compile_selector(selector.left), compile_selector(selector.right)

        def descendant(node: Node) -> bool:
            if not right(node):
                return False
            ancestor = node.parent
            while ancestor is not None:
                if left(ancestor):
                    return True
                ancestor = ancestor.parent
            return False

        return descendant

    if isinstance(selector, CombinationSelector):
        predicates = tuple(compile_selector(s) for s in selector.selectors)
        return lambda node: all(p(node) for p in predicates)

    return _never


@lru_cache(maxsize=256)
def _compile_cached(pattern: str, suggest: bool) -> Predicate:
    try:
        selector = parse_selector(pattern)
    except PatternError as e:
        if suggest:
            suggestions = aliases.suggest(pattern)
            if suggestions:
                logger.warning(f"Unknown pattern {pattern!r}. Did you mean: {', '.join(suggestions)}?")
        logger.debug(f"Pattern {pattern!r} matches nothing: {e}")
        return _never
    return compile_selector(selector)


def compile_pattern(pattern: str, *, suggest: bool = True) -> Predicate:
    """Compile a textual pattern. Malformed or empty patterns match nothing instead of raising."""
    if not pattern or not pattern.strip():
        return _never
    return _compile_cached(pattern, suggest)
