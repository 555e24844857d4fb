"""CCodeGenerator — Miac syntax tree -> C source text.

A single depth-first walk over the tree appends text to one output buffer.
Expressions are never re-parsed: conditions, initializers, return values and
whole assignment statements are copied verbatim from the source, on the
assumption that Miac and C spell these identically.  Programs relying on
operators or literals that differ between the two will translate into C that
does not mean the same thing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from .config import GeneratorConfig
from .errors import MissingFieldError, UnsupportedNodeError, UnsupportedTypeError
from .syntax import SourceLocation, source_location
from . import constants

logger = logging.getLogger(__name__)


def lower_type(name: str) -> str:
    """Return the C spelling of a Miac type name, or ``""`` if it has none."""
    return constants.C_TYPE_NAMES.get(name, "")


@dataclass(frozen=True)
class Body:
    """A node whose translation is still pending in the block work list.

    ``as_block`` nodes may hold a sequence of statements; other nodes must
    themselves be statements.
    """

    node: object
    as_block: bool = False


class CCodeGenerator:
    """Emits C source for a Miac program.

    Accepts any tree whose nodes provide the tree-sitter ``Node`` surface.
    Field names are class constants so a grammar spelling them differently
    only needs a subclass.
    """

    # ── overridable constants ────────────────────────────────────

    FUNC_NAME_FIELD: str = "name"
    FUNC_PARAMS_FIELD: str = "parameters"
    FUNC_RETURN_TYPE_FIELD: str = "return_type"
    FUNC_BODY_FIELD: str = "body"

    PARAM_NAME_FIELD: str = "name"
    PARAM_TYPE_FIELD: str = "type"

    DECL_NAME_FIELD: str = "name"
    DECL_TYPE_FIELD: str = "type"
    DECL_MUTABILITY_FIELD: str = "mutability_specifier"
    DECL_VALUE_FIELD: str = "value"

    WHILE_CONDITION_FIELD: str = "condition"
    WHILE_BODY_FIELD: str = "body"

    IF_CONDITION_FIELD: str = "condition"
    IF_BODY_FIELD: str = "body"

    # return keyword is child 0
    RETURN_VALUE_INDEX: int = 1

    COMMENT_TYPES: frozenset[str] = frozenset({constants.COMMENT})

    # ── init ─────────────────────────────────────────────────────

    def __init__(self, config: GeneratorConfig = GeneratorConfig()):
        self._config = config
        self._source: bytes = b""
        self._output: list[str] = []
        self._TOP_LEVEL_DISPATCH: dict[str, Callable] = {
            constants.FUNCTION_DEFINITION: self._translate_function,
            constants.VARIABLE_DECLARATION: self._translate_variable_declaration,
        }
        self._STMT_DISPATCH: dict[str, Callable] = {
            constants.RETURN_STATEMENT: self._translate_return,
            constants.VARIABLE_DECLARATION: self._translate_local_declaration,
            constants.ASSIGNMENT_STATEMENT: self._translate_assignment,
            constants.WHILE_STATEMENT: self._translate_while,
            constants.IF_STATEMENT: self._translate_if,
        }

    # ── helpers ──────────────────────────────────────────────────

    def _emit(self, text: str) -> None:
        self._output.append(text)

    def _node_text(self, node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8")

    def _source_loc(self, node) -> SourceLocation:
        return source_location(node)

    def _field(self, node, name: str):
        child = node.child_by_field_name(name)
        if child is None:
            raise MissingFieldError(node.type, name, self._source_loc(node))
        return child

    def _field_text(self, node, name: str) -> str:
        return self._node_text(self._field(node, name))

    def _is_trivia(self, node) -> bool:
        return not node.is_named or node.type in self.COMMENT_TYPES

    def _lower_type(self, node, field_name: str) -> str:
        type_node = self._field(node, field_name)
        name = self._node_text(type_node)
        spelling = lower_type(name)
        if not spelling:
            if self._config.strict:
                raise UnsupportedTypeError(name, node.type, self._source_loc(type_node))
            logger.warning(
                "Unsupported type '%s' in %s at %s; emitting empty type",
                name,
                node.type,
                self._source_loc(type_node),
            )
        return spelling

    def _unsupported(self, node, position: str) -> None:
        if self._config.strict:
            raise UnsupportedNodeError(node.type, self._source_loc(node))
        logger.warning(
            "Dropping unsupported %s '%s' at %s",
            position,
            node.type,
            self._source_loc(node),
        )

    # ── entry point ──────────────────────────────────────────────

    def generate(self, tree, source: bytes) -> str:
        """Translate *tree*, parsed from *source*, into C source text."""
        self._source = source
        self._output = []
        self._translate_program(tree.root_node)
        return "".join(self._output)

    # ── dispatchers ──────────────────────────────────────────────

    def _translate_program(self, root):
        for child in root.children:
            if self._is_trivia(child):
                continue
            handler = self._TOP_LEVEL_DISPATCH.get(child.type)
            if handler:
                handler(child)
                continue
            if self._config.strict:
                raise UnsupportedNodeError(child.type, self._source_loc(child))
            logger.debug(
                "Ignoring top-level %s at %s", child.type, self._source_loc(child)
            )

    def _translate_block(self, node):
        """Translate a block of statements.

        A body that is itself a statement (rather than a block wrapping
        statements) is translated as that single statement.

        Statement handlers return the parts of their translation: text, or a
        ``Body`` still to be expanded.  Parts go through an explicit work
        list, so nesting depth is not limited by the Python stack.
        """
        work: list[str | Body] = [Body(node, as_block=True)]
        while work:
            part = work.pop()
            if isinstance(part, str):
                self._emit(part)
                continue
            current = part.node
            handler = self._STMT_DISPATCH.get(current.type)
            if handler is not None:
                work.extend(reversed(handler(current)))
            elif part.as_block:
                work.extend(
                    Body(child)
                    for child in reversed(current.children)
                    if not self._is_trivia(child)
                )
            else:
                self._unsupported(current, "statement")

    # ── declarations and functions ───────────────────────────────

    def _variable_declaration_text(self, node) -> str:
        c_type = self._lower_type(node, self.DECL_TYPE_FIELD)
        name = self._field_text(node, self.DECL_NAME_FIELD)
        mutability = self._field_text(node, self.DECL_MUTABILITY_FIELD)
        qualifier = "const " if mutability == constants.CONST_QUALIFIER else ""
        value = self._field_text(node, self.DECL_VALUE_FIELD)
        return f"{qualifier}{c_type} {name} = {value};\n"

    def _translate_variable_declaration(self, node):
        self._emit(self._variable_declaration_text(node))

    def _translate_local_declaration(self, node) -> list[str | Body]:
        return [self._variable_declaration_text(node)]

    def _translate_parameters(self, params_node) -> str:
        params = [
            f"{self._lower_type(child, self.PARAM_TYPE_FIELD)} "
            f"{self._field_text(child, self.PARAM_NAME_FIELD)}"
            for child in params_node.children
            if child.type == constants.PARAMETER
        ]
        return ", ".join(params)

    def _translate_function(self, node):
        name = self._field_text(node, self.FUNC_NAME_FIELD)
        return_type = self._lower_type(node, self.FUNC_RETURN_TYPE_FIELD)
        params_node = self._field(node, self.FUNC_PARAMS_FIELD)
        body = self._field(node, self.FUNC_BODY_FIELD)
        logger.debug("Translating function %s at %s", name, self._source_loc(node))

        self._emit(f"{return_type} {name}({self._translate_parameters(params_node)}) {{\n")
        self._translate_block(body)
        self._emit("}\n")

    # ── statements ───────────────────────────────────────────────

    def _translate_return(self, node) -> list[str | Body]:
        value = node.child(self.RETURN_VALUE_INDEX)
        if value is None:
            raise MissingFieldError(
                node.type, f"child[{self.RETURN_VALUE_INDEX}]", self._source_loc(node)
            )
        return [f"return {self._node_text(value)};\n"]

    def _translate_assignment(self, node) -> list[str | Body]:
        return [f"{self._node_text(node)}\n"]

    def _translate_conditional_block(
        self, node, keyword: str, cond_field: str, body_field: str
    ) -> list[str | Body]:
        condition = self._field_text(node, cond_field)
        body = self._field(node, body_field)
        return [f"{keyword} ({condition}) {{\n", Body(body, as_block=True), "}\n"]

    def _translate_while(self, node) -> list[str | Body]:
        return self._translate_conditional_block(
            node, "while", self.WHILE_CONDITION_FIELD, self.WHILE_BODY_FIELD
        )

    def _translate_if(self, node) -> list[str | Body]:
        return self._translate_conditional_block(
            node, "if", self.IF_CONDITION_FIELD, self.IF_BODY_FIELD
        )
