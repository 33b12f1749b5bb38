from typing import Any


class TreeHuggerError(Exception):
    """Base class for all errors raised by treehugger."""

    code = "TREEHUGGER_ERROR"

    def __init__(self, message: str, *, context: Any = None):
        super().__init__(message)
        self.message = message
        self.context = context


class ParseError(TreeHuggerError):
    """The source could not be parsed, or a node wrapper was built from an invalid node."""

    code = "PARSE_ERROR"

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        super().__init__(message, context={"line": line, "column": column})
        self.line = line
        self.column = column


class PatternError(TreeHuggerError):
    """Raised inside the selector parser. Never escapes ``find``/``find_all``."""

    code = "PATTERN_ERROR"

    def __init__(self, message: str, pattern: str, position: int | None = None):
        super().__init__(message, context={"pattern": pattern, "position": position})
        self.pattern = pattern
        self.position = position


class TransformError(TreeHuggerError):
    """The accumulated edits of a transform session cannot be applied."""

    code = "TRANSFORM_ERROR"

    def __init__(self, message: str, *edits: Any):
        super().__init__(message, context=edits)
        self.edits = edits


class EditBoundsError(TransformError):
    """An edit range falls outside ``[0, len(source)]`` or is inverted."""

    @property
    def edit(self):
        return self.edits[0]


class EditOverlapError(TransformError):
    """Two queued edits cover intersecting byte ranges."""


class LanguageError(TreeHuggerError):
    """Unknown or unsupported grammar."""

    code = "LANGUAGE_ERROR"

    def __init__(self, message: str, filename: str | None = None):
        super().__init__(message, context={"filename": filename})
        self.filename = filename
