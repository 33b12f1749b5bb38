"""Tests for selector parsing and compilation."""

import logging

import pytest

pytest.importorskip("tree_sitter_language_pack")

from treehugger.exceptions import PatternError  # noqa: E402
from treehugger.selector import (  # noqa: E402
    AttributeSelector,
    ChildSelector,
    CombinationSelector,
    DescendantSelector,
    PseudoSelector,
    TypeSelector,
    compile_pattern,
    parse_selector,
)

# --- Parsing ---


def test_parse_type():
    """Test a bare type parses to a TypeSelector."""
    assert parse_selector("function_declaration") == TypeSelector("function_declaration")


def test_parse_hyphenated_alias():
    """Test hyphenated aliases parse as one type."""
    assert parse_selector("jsx-element") == TypeSelector("jsx-element")


def test_parse_attribute_presence():
    """Test an attribute without operator."""
    assert parse_selector("[async]") == AttributeSelector("async")


def test_parse_attribute_operators():
    """Test every attribute operator parses."""
    for op in ("=", "~=", "^=", "$=", "*="):
        selector = parse_selector(f'string[text{op}"x"]')
        assert selector == CombinationSelector((TypeSelector("string"), AttributeSelector("text", op, "x")))


def test_parse_unquoted_and_single_quoted_values():
    """Test unquoted and single-quoted attribute values."""
    assert parse_selector("[name=main]") == AttributeSelector("name", "=", "main")
    assert parse_selector("[name='main']") == AttributeSelector("name", "=", "main")


def test_parse_escaped_quote():
    """Test escaped quotes inside a quoted value."""
    assert parse_selector('[text="\\"world\\""]') == AttributeSelector("text", "=", '"world"')


def test_parse_child_and_descendant():
    """Test child and descendant combinators."""
    assert parse_selector("a > b") == ChildSelector(TypeSelector("a"), TypeSelector("b"))
    assert parse_selector("a>b") == ChildSelector(TypeSelector("a"), TypeSelector("b"))
    assert parse_selector("a b") == DescendantSelector(TypeSelector("a"), TypeSelector("b"))


def test_combinators_are_left_associative():
    """Test chains of combinators group to the left."""
    selector = parse_selector("a b > c")
    assert selector == ChildSelector(DescendantSelector(TypeSelector("a"), TypeSelector("b")), TypeSelector("c"))


def test_parse_has_nests_full_grammar():
    """Test :has accepts a full nested selector."""
    selector = parse_selector("class:has(method[name='render'] > statement_block)")
    assert isinstance(selector, CombinationSelector)
    pseudo = selector.selectors[1]
    assert isinstance(pseudo, PseudoSelector)
    assert pseudo.name == "has"
    assert isinstance(pseudo.selector, ChildSelector)


def test_parse_unknown_pseudo_keeps_argument():
    """Test unknown pseudo-selectors keep their raw argument."""
    selector = parse_selector("function:first(x y)")
    assert selector.selectors[1] == PseudoSelector("first", "x y")


@pytest.mark.parametrize("pattern", ["[", ">", "::invalid", "", "a >", "[name=", "a:has()", "a:not(b", "a,b"])
def test_malformed_patterns_raise(pattern):
    """Test malformed patterns raise PatternError."""
    with pytest.raises(PatternError) as exc_info:
        parse_selector(pattern)
    assert exc_info.value.pattern == pattern
    assert exc_info.value.code == "PATTERN_ERROR"


def test_pattern_error_carries_position():
    """Test PatternError reports where parsing failed."""
    with pytest.raises(PatternError) as exc_info:
        parse_selector("abc]")
    assert exc_info.value.position == 3


# --- Compilation ---


@pytest.mark.parametrize("pattern", ["[", ">", "::invalid", "", "   "])
def test_malformed_patterns_compile_to_match_nothing(js, pattern):
    """Test compiled malformed patterns match nothing."""
    tree = js("function a() {}")
    predicate = compile_pattern(pattern)
    assert not any(predicate(node) for node in tree.root.descendants())
    assert tree.find_all(pattern) == []
    assert tree.find(pattern) is None


def test_unknown_pattern_logs_suggestion(js, caplog):
    """Test a malformed pattern logs a warning with suggestions."""
    tree = js("function a() {}")
    with caplog.at_level(logging.WARNING, logger="treehugger"):
        assert tree.find_all("function[[") == []
    assert "Did you mean" in caplog.text


def test_suggestions_can_be_disabled(caplog):
    """Test suggest_patterns=False silences the warning."""
    from treehugger import TreeHugger, TreeHuggerConfig

    tree = TreeHugger("let x;", config=TreeHuggerConfig(suggest_patterns=False))
    with caplog.at_level(logging.WARNING, logger="treehugger"):
        assert tree.find_all("class[[") == []
    assert "Did you mean" not in caplog.text


def test_unknown_pseudo_matches_nothing(js):
    """Test an unknown pseudo-selector matches nothing."""
    assert js("function a() {}").find_all("function:first-child") == []
