"""Human-friendly node kinds mapped onto concrete tree-sitter node types.

The table covers the javascript, typescript and tsx grammars, which share
their node type names.
"""

from types import MappingProxyType

NODE_TYPE_ALIASES = MappingProxyType(
    {
        # Functions
        "function": frozenset({"function_declaration", "function_expression", "arrow_function", "method_definition"}),
        "arrow": frozenset({"arrow_function"}),
        "method": frozenset({"method_definition"}),
        # Classes and interfaces
        "class": frozenset({"class_declaration", "class_expression"}),
        "interface": frozenset({"interface_declaration"}),
        # Variables
        "variable": frozenset({"variable_declarator"}),
        "const": frozenset({"lexical_declaration"}),
        "let": frozenset({"lexical_declaration"}),
        "var": frozenset({"variable_declaration"}),
        # Strings
        "string": frozenset({"string", "template_string"}),
        "template": frozenset({"template_string"}),
        # Loops
        "loop": frozenset(
            {"for_statement", "while_statement", "do_statement", "for_in_statement", "for_of_statement"}
        ),
        "for": frozenset({"for_statement", "for_in_statement", "for_of_statement"}),
        "while": frozenset({"while_statement", "do_statement"}),
        # Conditionals
        "condition": frozenset({"if_statement", "switch_statement", "ternary_expression"}),
        "if": frozenset({"if_statement"}),
        "switch": frozenset({"switch_statement"}),
        "ternary": frozenset({"ternary_expression"}),
        # Imports / exports
        "import": frozenset({"import_statement"}),
        "export": frozenset({"export_statement"}),
        # JSX
        "jsx": frozenset({"jsx_element", "jsx_self_closing_element", "jsx_fragment"}),
        "jsx-element": frozenset({"jsx_element", "jsx_self_closing_element"}),
        "jsx-attribute": frozenset({"jsx_attribute"}),
        "comment": frozenset({"comment"}),
        # Calls
        "call": frozenset({"call_expression"}),
        "new": frozenset({"new_expression"}),
        "return": frozenset({"return_statement"}),
        "throw": frozenset({"throw_statement"}),
        "statement": frozenset({"expression_statement", "block_statement", "empty_statement"}),
        "block": frozenset({"block_statement", "statement_block"}),
    }
)

# Frequent misspellings, used only to build "did you mean" hints.
COMMON_MISTAKES = MappingProxyType(
    {
        "async-function": ("function[async]", "arrow[async]"),
        "async_function": ("function[async]", "arrow[async]"),
        "func": ("function",),
        "fn": ("function",),
        "str": ("string",),
        "tpl": ("template",),
        "cls": ("class",),
    }
)


def resolve(name: str) -> frozenset[str]:
    """Get the concrete node types for an alias, or ``{name}`` for a literal node type."""
    types = NODE_TYPE_ALIASES.get(name)
    if types is None:
        return frozenset({name})
    return types


def is_alias(name: str) -> bool:
    return name in NODE_TYPE_ALIASES


def suggest(pattern: str, limit: int = 3) -> list[str]:
    """Return up to ``limit`` alias names resembling ``pattern``."""
    lowered = pattern.strip().lower()
    if not lowered:
        return []
    suggestions = [alias for alias in NODE_TYPE_ALIASES if alias in lowered or lowered in alias]
    for hint in COMMON_MISTAKES.get(lowered, ()):
        if hint not in suggestions:
            suggestions.append(hint)
    return suggestions[:limit]
