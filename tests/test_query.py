"""Tests for pattern queries over parsed trees."""

import pytest

pytest.importorskip("tree_sitter_language_pack")

from treehugger import aliases  # noqa: E402
from treehugger.query import iter_preorder, select, select_one  # noqa: E402

CORPUS = """\
import React from "react";
import { helper } from "./helper";
function declared() {}
const expr = function () {};
const arrow = () => 1;
class Widget {
  method() {}
}
const Other = class {};
for (let i = 0; i < 1; i++) {}
while (false) {}
do {} while (false);
for (const k in {}) {}
if (arrow()) { helper(); } else if (expr) {}
switch (declared()) { case 1: break; }
const label = arrow ? "yes" : `no ${arrow}`;
const tree = <div id="root"><Widget /></div>;
const fragment = <><span /></>;
export const value = 1;
export default Widget;
"""

ALIASES = ["function", "class", "loop", "string", "condition", "import", "export", "jsx", "call"]


# --- Traversal order ---


def test_preorder_parents_before_children(js):
    """Test pre-order visits every parent before its children."""
    tree = js("a(b(c));")
    nodes = list(iter_preorder(tree.root))
    assert nodes[0] is tree.root
    positions = {id(n): i for i, n in enumerate(nodes)}
    for node in nodes[1:]:
        assert positions[id(node.parent)] < positions[id(node)]


def test_find_all_returns_preorder_and_includes_self(js):
    """Test find_all returns matches in pre-order, starting node included."""
    tree = js("a(b(c));")
    calls = tree.find_all("call_expression")
    assert [c.text for c in calls] == ["a(b(c))", "b(c)"]
    assert calls[0].find_all("call_expression")[0] is calls[0]


def test_find_returns_first_in_preorder(js):
    """Test find returns the outermost first match."""
    tree = js("outer(inner());")
    assert tree.find("call").text == "outer(inner())"


def test_select_helpers(js):
    """Test select and select_one."""
    tree = js("let a = 1; let b = 2;")
    assert [n.name for n in select(tree.root, "variable")] == ["a", "b"]
    assert select_one(tree.root, "variable").name == "a"
    assert select_one(tree.root, "class") is None


# --- Aliases ---


@pytest.mark.parametrize("alias", ALIASES)
def test_alias_matches_union_of_concrete_types(tsx, alias):
    """Test an alias matches exactly the nodes of its concrete types, in pre-order."""
    tree = tsx(CORPUS)
    via_alias = tree.find_all(alias)
    concrete = aliases.resolve(alias)
    expected = [n for n in iter_preorder(tree.root) if n.type in concrete]
    assert via_alias == expected
    assert via_alias


# --- Combinators ---


def test_child_vs_descendant(js):
    """Test ``>`` matches direct children and a space matches any descendant."""
    tree = js("function foo() { if (true) { const x = 1; } }")
    assert tree.find_all("function_declaration > const") == []
    assert len(tree.find_all("function_declaration const")) == 1


def test_child_selector_matches_direct_children(js):
    """Test a child selector through a class body."""
    tree = js("class A { m() {} }")
    assert [n.type for n in tree.find_all("class_body > method")] == ["method_definition"]


def test_combination_is_conjunction(js):
    """Test a type with an attribute must satisfy both."""
    tree = js("async function a() {}\nfunction b() {}\nconst c = async () => {};")
    assert [n.name for n in tree.find_all("function_declaration[async]")] == ["a"]
    assert [n.type for n in tree.find_all("function[async]")] == ["function_declaration", "arrow_function"]


# --- Attributes ---


def test_attribute_text_operators(js):
    """Test the text attribute with =, ^=, $= and *=."""
    tree = js('greet("world"); greet("world!");')
    assert len(tree.find_all('string[text*="world"]')) == 2
    exact = tree.find_all('string[text="\\"world\\""]')
    assert [n.text for n in exact] == ['"world"']
    assert len(tree.find_all('string[text^="\\"wor"]')) == 2
    assert [n.text for n in tree.find_all('string[text$="!\\""]')] == ['"world!"']


def test_attribute_word_operator(js):
    """Test ~= matches whole words only."""
    tree = js("// alpha beta\n// alphabet\n")
    assert [n.text for n in tree.find_all("comment[text~=beta]")] == ["// alpha beta"]


def test_attribute_name_and_field(js):
    """Test name and field attributes."""
    tree = js("function getData() {}\nfunction other() {}\nconst v = getData();")
    assert tree.find("function[name='getData']").line == 1
    assert [n.text for n in tree.find_all("call_expression[function=getData]")] == ["getData()"]


def test_attribute_presence_uses_truthiness(js):
    """Test an attribute without operator needs a non-empty value."""
    tree = js("const f = function () {};\nfunction named() {}")
    assert [n.type for n in tree.find_all("function[name]")] == ["function_declaration"]


def test_async_attribute_is_structural(js):
    """Test [async] ignores the word async inside strings."""
    tree = js('function plain() { return "async"; }')
    assert tree.find_all("function[async]") == []


# --- Pseudo-selectors ---


def test_has_and_not_are_complementary(js):
    """Test :has and :not(:has) split the matches in two."""
    tree = js(
        "function a() { return 1; }\n"
        "function b() { x(); }\n"
        "function c() { if (y) { return 2; } }\n"
    )
    every = tree.find_all("function")
    has = tree.find_all("function:has(return)")
    has_not = tree.find_all("function:not(:has(return))")
    assert [n.name for n in has] == ["a", "c"]
    assert [n.name for n in has_not] == ["b"]
    assert not set(map(id, has)) & set(map(id, has_not))
    assert sorted(map(id, has + has_not)) == sorted(map(id, every))


def test_has_only_looks_at_strict_descendants(js):
    """Test :has does not match the node itself."""
    tree = js("foo();")
    assert tree.find_all("call_expression:has(call_expression)") == []


def test_not_with_attribute(js):
    """Test :not with an attribute selector."""
    tree = js("function keep() {}\nfunction drop() {}")
    assert [n.name for n in tree.find_all("function:not([name=drop])")] == ["keep"]
