"""Translation configuration (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GeneratorConfig:
    """Groups code generator configuration.

    ``strict`` turns the two silent degradations (unknown type names and
    unknown statement kinds) into typed errors.  ``grammar`` names a compiled
    tree-sitter grammar to parse with; empty selects the built-in reader.
    """

    strict: bool = False
    grammar: str = ""
