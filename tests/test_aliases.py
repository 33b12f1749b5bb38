"""Tests for the alias table."""

import pytest

pytest.importorskip("tree_sitter_language_pack")

from treehugger import aliases  # noqa: E402

# --- resolve ---


def test_resolve_function_alias():
    """Test the function alias covers every function-like node type."""
    assert aliases.resolve("function") == {
        "function_declaration",
        "function_expression",
        "arrow_function",
        "method_definition",
    }


def test_resolve_loop_alias():
    """Test the loop alias covers every loop statement type."""
    assert aliases.resolve("loop") == {
        "for_statement",
        "while_statement",
        "do_statement",
        "for_in_statement",
        "for_of_statement",
    }


@pytest.mark.parametrize(
    ("alias", "expected"),
    [
        ("class", {"class_declaration", "class_expression"}),
        ("string", {"string", "template_string"}),
        ("jsx", {"jsx_element", "jsx_self_closing_element", "jsx_fragment"}),
        ("import", {"import_statement"}),
        ("call", {"call_expression"}),
    ],
)
def test_resolve_groups(alias, expected):
    """Test the grouped aliases resolve to their concrete node types."""
    assert aliases.resolve(alias) == expected


def test_resolve_unknown_name_is_literal_type():
    """Names without an alias entry stand for themselves."""
    assert aliases.resolve("lexical_declaration") == {"lexical_declaration"}
    assert aliases.resolve("no_such_type") == {"no_such_type"}


def test_alias_table_is_read_only():
    """Test the alias table cannot be modified."""
    with pytest.raises(TypeError):
        aliases.NODE_TYPE_ALIASES["function"] = frozenset()  # type: ignore[index]


def test_is_alias():
    """Test is_alias tells aliases from literal node types."""
    assert aliases.is_alias("arrow")
    assert not aliases.is_alias("arrow_function")


# --- suggest ---


def test_suggest_common_mistake():
    """Test a known misspelling suggests the intended pattern."""
    assert "function[async]" in aliases.suggest("async-function")


def test_suggest_substring():
    """Test aliases containing the typed name are suggested."""
    assert "function" in aliases.suggest("func")


def test_suggest_respects_limit():
    """Test suggest returns at most ``limit`` entries."""
    assert len(aliases.suggest("j", limit=2)) <= 2


def test_suggest_empty():
    """Test a blank name gets no suggestions."""
    assert aliases.suggest("   ") == []
