"""Grammar selection for the external tree-sitter parser."""

import logging
import os

from tree_sitter import Parser
from tree_sitter_language_pack import get_parser as _get_pack_parser

from treehugger.exceptions import LanguageError

logger = logging.getLogger("treehugger.languages")

LANG_MAP = {
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".jsx": "tsx",
    ".tsx": "tsx",
}

SUPPORTED_LANGUAGES = ("javascript", "typescript", "tsx")


def detect_language(filepath):
    """Return language string from file extension, or None if unsupported."""
    _, ext = os.path.splitext(filepath)
    return LANG_MAP.get(ext.lower())


def get_parser(language: str) -> Parser:
    """Return a fresh tree-sitter parser for one of ``SUPPORTED_LANGUAGES``.

    Parsers are not shared: a parser instance must not be used from two threads at once.
    """
    if language not in SUPPORTED_LANGUAGES:
        raise LanguageError(f"Unknown language: {language}. Supported: {', '.join(SUPPORTED_LANGUAGES)}")
    logger.debug(f"Loading tree-sitter grammar for {language}")
    return _get_pack_parser(language)
