"""treehugger: CSS-like queries and source rewriting over tree-sitter syntax trees.

    from treehugger import parse

    tree = parse("function getData() {}\nconst r = getData();")
    tree.find_all("function[name='getData']")
    tree.transform().rename("getData", "fetchData").render()
"""

__version__ = "0.3.0"

from treehugger.config import TreeHuggerConfig, load_config
from treehugger.exceptions import (
    EditBoundsError,
    EditOverlapError,
    LanguageError,
    ParseError,
    PatternError,
    TransformError,
    TreeHuggerError,
)
from treehugger.node import Node
from treehugger.selector import compile_pattern, parse_selector
from treehugger.transform import Edit, Transform
from treehugger.tree import TreeHugger, parse, transform

__all__ = [
    "Edit",
    "EditBoundsError",
    "EditOverlapError",
    "LanguageError",
    "Node",
    "ParseError",
    "PatternError",
    "Transform",
    "TransformError",
    "TreeHugger",
    "TreeHuggerConfig",
    "TreeHuggerError",
    "compile_pattern",
    "load_config",
    "parse",
    "parse_selector",
    "transform",
]
