"""Exception hierarchy for parsing and translation failures."""

from __future__ import annotations

from .syntax import NO_SOURCE_LOCATION, SourceLocation


class Miac2cError(Exception):
    """Base class for every error raised by the translator."""


class MiacSyntaxError(Miac2cError):
    """Syntax error with location info (1-based line, 0-based column)."""

    def __init__(self, msg: str, line: int, col: int):
        self.msg: str = msg
        self.line: int = line
        self.col: int = col
        super().__init__(f"{msg} at line {line} col {col}")


class TranslationError(Miac2cError):
    """A node could not be translated."""

    def __init__(
        self,
        msg: str,
        node_kind: str,
        location: SourceLocation = NO_SOURCE_LOCATION,
    ):
        self.msg = msg
        self.node_kind = node_kind
        self.location = location
        super().__init__(f"{node_kind} at {location}: {msg}")


class MissingFieldError(TranslationError):
    """A node lacks a field its translation rule requires."""

    def __init__(
        self,
        node_kind: str,
        field: str,
        location: SourceLocation = NO_SOURCE_LOCATION,
    ):
        self.field = field
        super().__init__(f"missing required field '{field}'", node_kind, location)


class UnsupportedTypeError(TranslationError):
    """A type name has no C spelling (strict mode)."""

    def __init__(
        self,
        type_name: str,
        node_kind: str,
        location: SourceLocation = NO_SOURCE_LOCATION,
    ):
        self.type_name = type_name
        super().__init__(f"unsupported type '{type_name}'", node_kind, location)


class UnsupportedNodeError(TranslationError):
    """A node kind has no translation rule in its position (strict mode)."""

    def __init__(self, node_kind: str, location: SourceLocation = NO_SOURCE_LOCATION):
        super().__init__("no translation rule for this node kind", node_kind, location)


class NestingTooDeepError(TranslationError):
    """Input nests deeper than the translator can follow."""

    def __init__(self, node_kind: str, location: SourceLocation = NO_SOURCE_LOCATION):
        super().__init__("nesting too deep to translate", node_kind, location)


class SourceFileError(Miac2cError):
    """The input file could not be read as UTF-8 text."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot read {path}: {reason}")


class GrammarNotFoundError(Miac2cError):
    """No tree-sitter grammar could be loaded for a language name."""

    def __init__(self, language: str, reason: str):
        self.language = language
        self.reason = reason
        super().__init__(f"no tree-sitter grammar for '{language}': {reason}")
