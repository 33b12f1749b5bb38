"""Text rewriting driven by selected nodes.

A :class:`Transform` is bound to one source text and its syntax tree. Each
operation only *queues* edits against the original source; nothing is
rewritten until :meth:`Transform.render`, which validates the whole edit set
and applies it in a single pass:

    new_source = (
        tree.transform()
        .rename("getData", "fetchData")
        .remove("console.log", whole_statement=True)
        .remove_unused_imports()
        .render()
    )

All offsets are UTF-8 byte offsets into the original source, the same unit
tree-sitter reports.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING, Union

from treehugger.config import TreeHuggerConfig
from treehugger.exceptions import EditBoundsError, EditOverlapError
from treehugger.node import Node
from treehugger.query import iter_preorder

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("treehugger.transform")

Target = Union[str, Node, Iterable[Node]]

# Removal expands to whole lines and insertion is line-formatted for these.
STATEMENT_TYPES = frozenset(
    {
        "expression_statement",
        "variable_declaration",
        "lexical_declaration",
        "import_statement",
        "export_statement",
        "return_statement",
        "if_statement",
        "for_statement",
        "while_statement",
        "function_declaration",
        "class_declaration",
    }
)
DECLARATION_TYPES = frozenset({"function_declaration", "method_definition", "class_declaration"})
KEYWORD_TYPES = frozenset({"const", "let", "var", "return", "if", "for", "while"})
BODY_BLOCK_TYPES = frozenset({"class_body", "statement_block"})
DECLARATOR_PARENT_TYPES = frozenset({"lexical_declaration", "variable_declaration"})

IDENTIFIER_TYPES = frozenset({"identifier", "type_identifier"})
# Identifiers below one of these are part of textual content, not code.
TEXTUAL_TYPES = frozenset({"string", "comment", "string_fragment", "regex"})
MEMBER_NAME_TYPES = frozenset({"property_identifier", "shorthand_property_identifier_pattern"})
# Node types whose text counts as a use of an imported binding.
USAGE_TYPES = IDENTIFIER_TYPES | {"shorthand_property_identifier"}


@dataclass(frozen=True, slots=True)
class Edit:
    """Replace ``source[start:end]`` (byte offsets into the original source) with ``text``."""

    start: int
    end: int
    text: str

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_insertion(self) -> bool:
        return self.start == self.end

    def __str__(self) -> str:
        return f"[{self.start}-{self.end}] -> {self.text!r}"


def coerce_removal_pattern(pattern: str) -> str:
    """Turn call-like shorthands into selectors.

    ``console.log`` -> ``call_expression[text*="console.log"]``
    ``debug()``     -> ``call_expression[text*="debug("]``

    Anything else is returned unchanged.
    """
    if "." in pattern and "[" not in pattern and not any(ch.isspace() for ch in pattern):
        return f'call_expression[text*="{_escape(pattern)}"]'
    if pattern.endswith("()"):
        return f'call_expression[text*="{_escape(pattern[:-2])}("]'
    return pattern


def _escape(value: str) -> str:
    return value.replace('"', '\\"')


def _indent_tail(text: str, indent: str) -> str:
    """Prefix every non-blank line but the first with ``indent``."""
    lines = text.split("\n")
    return "\n".join([lines[0], *(indent + line if line.strip() else line for line in lines[1:])])


class Transform:
    """An append-only set of edits over one source text, rendered in a single pass."""

    def __init__(self, root: Node, source: str | bytes | None = None, *, config: TreeHuggerConfig | None = None):
        self.root = root
        if source is None:
            source = root.source
        self._source = source.encode("utf-8") if isinstance(source, str) else bytes(source)
        self._edits: list[Edit] = []
        self.config = config or TreeHuggerConfig()

    # -- bookkeeping ------------------------------------------------------

    @property
    def source(self) -> str:
        return self._source.decode("utf-8")

    @property
    def edits(self) -> list[Edit]:
        return list(self._edits)

    def peek_edits(self) -> list[Edit]:
        """The queued edits, in the order they were added. Does not validate."""
        return list(self._edits)

    def add_edit(self, start: int, end: int, text: str) -> Transform:
        """Queue a raw edit. Bounds and overlaps are checked at render time."""
        self._edits.append(Edit(start, end, text))
        return self

    def _resolve(self, target: Target) -> list[Node]:
        if isinstance(target, str):
            return self.root.find_all(target)
        if isinstance(target, Node):
            return [target]
        return list(target)

    def _replace_node(self, node: Node, text: str) -> None:
        self._edits.append(Edit(node.start_byte, node.end_byte, text))

    # -- rename -------------------------------------------------------------

    def rename(self, old_name: str, new_name: str) -> Transform:
        """Rename identifiers in code, leaving strings, comments and regexes alone.

        Property names (``obj.old``, ``{ old: 1 }``, JSX attribute names) and
        shorthand destructuring bindings are renamed as well.
        """
        count = 0
        for node in iter_preorder(self.root):
            if node.type in IDENTIFIER_TYPES:
                if node.text != old_name or self._inside_text(node):
                    continue
            elif node.type not in MEMBER_NAME_TYPES or node.text != old_name:
                continue
            self._replace_node(node, new_name)
            count += 1
        logger.debug(f"rename {old_name!r} -> {new_name!r}: {count} edit(s)")
        return self

    def rename_identifier(self, old_name: str, new_name: str) -> Transform:
        """Rename every bare identifier with the given text, without looking at context."""
        count = 0
        for node in iter_preorder(self.root):
            if node.type in IDENTIFIER_TYPES and node.text == old_name:
                self._replace_node(node, new_name)
                count += 1
        logger.debug(f"rename_identifier {old_name!r} -> {new_name!r}: {count} edit(s)")
        return self

    @staticmethod
    def _inside_text(node: Node) -> bool:
        ancestor = node.parent
        while ancestor is not None:
            if ancestor.type in TEXTUAL_TYPES:
                return True
            ancestor = ancestor.parent
        return False

    # -- replace --------------------------------------------------------------

    def replace_in(
        self,
        node_type: str,
        pattern: str | re.Pattern[str],
        replacement: str | Callable[[re.Match[str]], str],
    ) -> Transform:
        """Find/replace inside the text of every ``node_type`` node.

        ``pattern`` is a literal string or a compiled regular expression; every
        occurrence is replaced. ``replacement`` may be a function of the match,
        for literal patterns too. Nodes whose text does not change get no edit.
        """
        if isinstance(pattern, str) and callable(replacement):
            pattern = re.compile(re.escape(pattern))
        count = 0
        for node in self.root.find_all(node_type):
            text = node.text
            if isinstance(pattern, re.Pattern):
                new_text = pattern.sub(replacement, text)
            else:
                new_text = text.replace(pattern, replacement)
            if new_text != text:
                self._replace_node(node, new_text)
                count += 1
        logger.debug(f"replace_in {node_type!r}: {count} edit(s)")
        return self

    def replace(self, target: Target, text: str) -> Transform:
        """Replace each matched node's full text with ``text``."""
        for node in self._resolve(target):
            self._replace_node(node, text)
        return self

    # -- remove ---------------------------------------------------------------

    def remove(self, target: Target, *, whole_statement: bool = False) -> Transform:
        """Delete matched nodes.

        A lone declarator takes its declaration with it, and statements are
        removed together with their source line so no blank line is left.
        Other matches lose only their own range. With ``whole_statement=True``
        an expression that makes up a whole statement (``console.log(x);``)
        takes the statement and its line with it.

        Every match queues its own edit: nested matches overlap and make
        :meth:`render` fail.
        """
        if isinstance(target, str):
            target = coerce_removal_pattern(target)
        count = 0
        for node in self._resolve(target):
            node = self._removal_target(node, whole_statement)
            start, end = node.start_byte, node.end_byte
            if node.type in STATEMENT_TYPES:
                start, end = self._line_span(start, end)
            self._edits.append(Edit(start, end, ""))
            count += 1
        logger.debug(f"remove {target!r}: {count} match(es)")
        return self

    @staticmethod
    def _removal_target(node: Node, whole_statement: bool = False) -> Node:
        parent = node.parent
        if node.type == "variable_declarator" and parent is not None and parent.type in DECLARATOR_PARENT_TYPES:
            declarators = [c for c in parent.children if c.type == "variable_declarator"]
            if len(declarators) == 1:
                return parent
        if (
            whole_statement
            and parent is not None
            and parent.type == "expression_statement"
            and parent.named_children == [node]
        ):
            return parent
        return node

    def _line_span(self, start: int, end: int) -> tuple[int, int]:
        line_start = self._source.rfind(b"\n", 0, start) + 1
        line_end = self._source.find(b"\n", end)
        line_end = len(self._source) if line_end < 0 else line_end + 1
        return line_start, line_end

    # -- imports ------------------------------------------------------------

    def remove_unused_imports(self) -> Transform:
        """Drop import bindings that are never referenced outside import statements.

        Unused specifiers are pruned from partially used imports; an import with
        no used binding is removed together with its trailing newline. Imports
        without bindings (``import "./polyfill";``) are kept.
        """
        used = self._used_names()
        for statement in self.root.find_all("import_statement"):
            clause = next((c for c in statement.children if c.type == "import_clause"), None)
            if clause is None:
                continue

            parts: list[str] = []
            bindings = 0
            for child in clause.children:
                if child.type == "identifier":
                    bindings += 1
                    if child.text in used:
                        parts.append(child.text)
                elif child.type == "namespace_import":
                    bindings += 1
                    local = next((c for c in child.children if c.type == "identifier"), None)
                    if local is not None and local.text in used:
                        parts.append(child.text)
                elif child.type == "named_imports":
                    specifiers = [c for c in child.children if c.type == "import_specifier"]
                    kept = [s for s in specifiers if self._specifier_used(s, used)]
                    bindings += len(specifiers)
                    if kept:
                        parts.append(self._rebuild_named_imports(child, specifiers, kept))

            if bindings == 0:
                continue
            if not parts:
                end = statement.end_byte
                if self._source[end : end + 2] == b"\r\n":
                    end += 2
                elif self._source[end : end + 1] == b"\n":
                    end += 1
                self._edits.append(Edit(statement.start_byte, end, ""))
                logger.debug(f"Removing unused import at line {statement.line}")
                continue

            new_clause = ", ".join(parts)
            if new_clause != clause.text:
                self._replace_node(clause, new_clause)
                logger.debug(f"Pruning unused bindings from import at line {statement.line}")
        return self

    def _used_names(self) -> set[str]:
        used = set()
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.type == "import_statement":
                continue
            if node.type in USAGE_TYPES:
                used.add(node.text)
            stack.extend(node.children)
        return used

    @staticmethod
    def _specifier_used(specifier: Node, used: set[str]) -> bool:
        for field_name in ("name", "alias"):
            field = specifier.field(field_name)
            if field is not None and field.text in used:
                return True
        return False

    def _rebuild_named_imports(self, block: Node, specifiers: list[Node], kept: list[Node]) -> str:
        """Rebuild ``{ a, b }`` with only ``kept``, reusing the original spacing and separators."""
        if len(kept) == len(specifiers):
            return block.text
        src = self._source
        opening, closing = block.children[0], block.children[-1]
        prefix = src[opening.end_byte : specifiers[0].start_byte].decode("utf-8")
        suffix = src[specifiers[-1].end_byte : closing.start_byte].decode("utf-8")
        if len(specifiers) > 1:
            separator = src[specifiers[0].end_byte : specifiers[1].start_byte].decode("utf-8")
        else:
            separator = ", "
        return "{" + prefix + separator.join(s.text for s in kept) + suffix + "}"

    # -- insert ---------------------------------------------------------------

    def insert_before(self, target: Target, text: str) -> Transform:
        """Insert ``text`` before each matched node.

        Statements and declarations get the text on its own line, indented like
        the target; other nodes get ``text`` verbatim.
        """
        for node in self._resolve(target):
            node = self._insertion_target(node)
            self._edits.append(Edit(node.start_byte, node.start_byte, self._format_before(node, text)))
        return self

    def insert_after(self, target: Target, text: str) -> Transform:
        """Insert ``text`` after each matched node, formatted like :meth:`insert_before`."""
        for node in self._resolve(target):
            node = self._insertion_target(node)
            self._edits.append(Edit(node.end_byte, node.end_byte, self._format_after(node, text)))
        return self

    @staticmethod
    def _insertion_target(node: Node) -> Node:
        # "Before the `const` keyword" means before the whole declaration.
        if node.type in KEYWORD_TYPES:
            parent = node.parent
            while parent is not None and parent.type not in STATEMENT_TYPES:
                parent = parent.parent
            if parent is not None:
                return parent
        return node

    @staticmethod
    def _is_block_level(node: Node) -> bool:
        return node.type in STATEMENT_TYPES or node.type in DECLARATION_TYPES

    def _format_before(self, node: Node, text: str) -> str:
        if not self._is_block_level(node):
            return text
        body = text.strip()
        indent = self._contextual_indent(node)
        if indent is None:
            return body + " "
        if self._starts_line(node):
            return _indent_tail(body, indent) + "\n" + indent
        return "\n" + indent + _indent_tail(body, indent) + "\n" + indent

    def _format_after(self, node: Node, text: str) -> str:
        if not self._is_block_level(node):
            return text
        body = text.strip()
        indent = self._contextual_indent(node)
        if indent is None:
            return " " + body
        spacing = ""
        if node.type == "method_definition" and node.parent is not None and node.parent.type == "class_body":
            spacing = "\n" * self.config.method_spacing
        return "\n" + spacing + indent + _indent_tail(body, indent)

    def _contextual_indent(self, node: Node) -> str | None:
        """Indentation for a line inserted next to ``node``, or None to stay on the same line.

        A node that starts its own line lends its indentation. Otherwise, inside
        a multi-line class or function body, inserted lines line up one indent
        unit deeper than the line that opens the body.
        """
        if self._starts_line(node):
            return self._line_indent(node.start_byte)
        parent = node.parent
        if parent is not None and parent.type in BODY_BLOCK_TYPES and parent.line != parent.end_line:
            return self._line_indent(parent.start_byte) + self.indent_unit
        return None

    def _starts_line(self, node: Node) -> bool:
        line_start = self._source.rfind(b"\n", 0, node.start_byte) + 1
        return not self._source[line_start : node.start_byte].strip(b" \t")

    def _line_indent(self, offset: int) -> str:
        line_start = self._source.rfind(b"\n", 0, offset) + 1
        end = line_start
        while end < len(self._source) and self._source[end] in b" \t":
            end += 1
        return self._source[line_start:end].decode("utf-8")

    @cached_property
    def indent_unit(self) -> str:
        """The file's indentation step: a tab, or the smallest space indent (2 by default)."""
        tabs = 0
        space_widths = []
        for line in self._source.split(b"\n"):
            if line.startswith(b"\t"):
                tabs += 1
            elif line.startswith(b" ") and line.strip():
                space_widths.append(len(line) - len(line.lstrip(b" ")))
        if tabs > len(space_widths):
            return "\t"
        return " " * (min(space_widths) if space_widths else 2)

    # -- render ---------------------------------------------------------------

    def _validate(self) -> None:
        size = len(self._source)
        for edit in self._edits:
            if edit.start < 0 or edit.end > size or edit.start > edit.end:
                raise EditBoundsError(f"Edit out of bounds: {edit} in source of length {size}", edit)
            for offset in (edit.start, edit.end):
                # UTF-8 continuation bytes look like 0b10xxxxxx.
                if offset < size and self._source[offset] & 0xC0 == 0x80:
                    raise EditBoundsError(f"Edit {edit} splits a UTF-8 character at byte {offset}", edit)

        ordered = sorted(self._edits, key=lambda e: (e.start, e.end))
        for current, following in zip(ordered, ordered[1:]):
            if current.end > following.start:
                raise EditOverlapError(
                    f"Overlapping edits detected: [{current.start}-{current.end}] "
                    f"overlaps with [{following.start}-{following.end}]",
                    current,
                    following,
                )

    def render(self) -> str:
        """Validate every queued edit and return the rewritten source.

        Edits are applied from the end of the source backwards so earlier
        offsets stay valid. Insertions sharing an offset keep the order in which
        they were queued. Rendering never clears the queue.
        """
        self._validate()
        order = sorted(
            range(len(self._edits)),
            key=lambda i: (self._edits[i].start, self._edits[i].end, i),
            reverse=True,
        )
        result = self._source
        for i in order:
            edit = self._edits[i]
            result = result[: edit.start] + edit.text.encode("utf-8") + result[edit.end :]
        logger.debug(f"Applied {len(self._edits)} edit(s)")
        return result.decode("utf-8")

    def __str__(self) -> str:
        return self.render()
