"""Miac reader — recursive descent, one method per grammar production.

Produces ``SyntaxTree``s shaped like the tree-sitter grammar for Miac: the
same node kinds and field names, anonymous nodes for punctuation and
keywords, ``comment`` nodes between statements, and byte/point spans into the
UTF-8 source.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .errors import MiacSyntaxError, NestingTooDeepError
from .syntax import SourceLocation, SyntaxNode, SyntaxTree
from . import constants

logger = logging.getLogger(__name__)

TK_IDENT = "identifier"
TK_INT = "integer"
TK_FLOAT = "float"
TK_STRING = "string"
TK_OP = "op"
TK_COMMENT = "comment"
TK_EOF = "eof"

_TOKEN_RE = re.compile(
    rb"""
    (?P<ws>[ \t\r]+)
  | (?P<newline>\n)
  | (?P<comment>//[^\n]*)
  | (?P<float>\d+\.\d+)
  | (?P<integer>\d+)
  | (?P<string>"(?:[^"\\\n]|\\.)*")
  | (?P<identifier>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<op>->|==|!=|<=|>=|&&|\|\||[-+*/%<>=!(){},;:])
    """,
    re.VERBOSE,
)

KEYWORDS: frozenset[str] = frozenset(
    {"fn", "return", "while", "if", "const", "let", "true", "false"}
)
MUTABILITY_KEYWORDS: frozenset[str] = frozenset({"const", "let"})
CONDITIONAL_KEYWORDS: dict[str, str] = {
    "while": constants.WHILE_STATEMENT,
    "if": constants.IF_STATEMENT,
}

# Binary operator precedence, higher binds tighter.
BINARY_PRECEDENCE: dict[str, int] = {
    "||": 0,
    "&&": 1,
    "==": 2,
    "!=": 2,
    "<": 3,
    "<=": 3,
    ">": 3,
    ">=": 3,
    "+": 4,
    "-": 4,
    "*": 5,
    "/": 5,
    "%": 5,
}
UNARY_OPS: frozenset[str] = frozenset({"-", "!"})


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    start_byte: int
    end_byte: int
    row: int
    col: int

    @property
    def start_point(self) -> tuple[int, int]:
        return (self.row, self.col)

    @property
    def end_point(self) -> tuple[int, int]:
        return (self.row, self.col + self.end_byte - self.start_byte)


def tokenize(source: bytes) -> list[Token]:
    """Split *source* into tokens, comments included, ending with an EOF token."""
    tokens: list[Token] = []
    pos = 0
    row = 0
    line_start = 0
    while pos < len(source):
        m = _TOKEN_RE.match(source, pos)
        if m is None:
            char = source[pos : pos + 1].decode("utf-8", errors="replace")
            raise MiacSyntaxError(f"unexpected character {char!r}", row + 1, pos - line_start)
        kind = m.lastgroup
        if kind == "newline":
            row += 1
            line_start = m.end()
        elif kind != "ws":
            tokens.append(
                Token(
                    kind=kind,
                    text=m.group().decode("utf-8"),
                    start_byte=m.start(),
                    end_byte=m.end(),
                    row=row,
                    col=m.start() - line_start,
                )
            )
        pos = m.end()
    tokens.append(Token(TK_EOF, "", pos, pos, row, pos - line_start))
    return tokens


def _leaf(tok: Token, kind: str, named: bool = True) -> SyntaxNode:
    return SyntaxNode(
        type=kind,
        start_byte=tok.start_byte,
        end_byte=tok.end_byte,
        start_point=tok.start_point,
        end_point=tok.end_point,
        is_named=named,
    )


def _anon(tok: Token) -> SyntaxNode:
    return _leaf(tok, tok.text, named=False)


def _node(kind: str, parts: list[tuple[Optional[str], SyntaxNode]]) -> SyntaxNode:
    """Build an inner node from ``(field_name, child)`` pairs."""
    children = tuple(child for _, child in parts)
    fields = {name: i for i, (name, _) in enumerate(parts) if name is not None}
    first, last = children[0], children[-1]
    return SyntaxNode(
        type=kind,
        start_byte=first.start_byte,
        end_byte=last.end_byte,
        start_point=first.start_point,
        end_point=last.end_point,
        children=children,
        field_indices=fields,
    )


class MiacReader:
    """Recursive descent reader for Miac.

    Exposes ``parse(source: bytes)`` like a tree-sitter ``Parser``.
    """

    def __init__(self):
        self._tokens: list[Token] = []
        self._comments: list[Token] = []
        self._pos = 0

    def parse(self, source: bytes) -> SyntaxTree:
        all_tokens = tokenize(source)
        self._tokens = [t for t in all_tokens if t.kind != TK_COMMENT]
        self._comments = [t for t in all_tokens if t.kind == TK_COMMENT]
        self._pos = 0
        try:
            root = self._parse_program(len(source))
        except RecursionError:
            tok = self._peek()
            raise NestingTooDeepError(
                constants.PROGRAM,
                SourceLocation(
                    start_line=tok.row + 1,
                    start_col=tok.col,
                    end_line=tok.end_point[0] + 1,
                    end_col=tok.end_point[1],
                ),
            ) from None
        logger.debug("Read %d top-level nodes", root.child_count)
        return SyntaxTree(root_node=root)

    # ── token stream ─────────────────────────────────────────────

    def _peek(self, offset: int = 0) -> Token:
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index]

    def _advance(self) -> Token:
        tok = self._peek()
        if tok.kind != TK_EOF:
            self._pos += 1
        return tok

    def _at(self, text: str) -> bool:
        tok = self._peek()
        return tok.kind in (TK_OP, TK_IDENT) and tok.text == text

    def _error(self, msg: str, tok: Token) -> MiacSyntaxError:
        found = tok.text or "end of input"
        return MiacSyntaxError(f"{msg}, found {found!r}", tok.row + 1, tok.col)

    def _expect(self, text: str) -> Token:
        if not self._at(text):
            raise self._error(f"expected {text!r}", self._peek())
        return self._advance()

    def _expect_name(self) -> SyntaxNode:
        tok = self._peek()
        if tok.kind != TK_IDENT or tok.text in KEYWORDS:
            raise self._error("expected identifier", tok)
        return _leaf(self._advance(), "identifier")

    def _take_comments(self) -> list[SyntaxNode]:
        """Pop comment nodes that precede the next token."""
        limit = self._peek().start_byte
        taken = [c for c in self._comments if c.start_byte < limit]
        self._comments = [c for c in self._comments if c.start_byte >= limit]
        return [_leaf(c, constants.COMMENT) for c in taken]

    # ── top level ────────────────────────────────────────────────

    def _parse_program(self, source_len: int) -> SyntaxNode:
        children: list[SyntaxNode] = []
        while True:
            children.extend(self._take_comments())
            tok = self._peek()
            if tok.kind == TK_EOF:
                break
            if self._at("fn"):
                children.append(self._parse_function())
            elif tok.text in MUTABILITY_KEYWORDS:
                children.append(self._parse_variable_declaration())
            else:
                raise self._error("expected function or declaration", tok)
        end = self._peek()
        return SyntaxNode(
            type=constants.PROGRAM,
            start_byte=0,
            end_byte=source_len,
            start_point=(0, 0),
            end_point=end.end_point,
            children=tuple(children),
        )

    def _parse_function(self) -> SyntaxNode:
        parts: list[tuple[Optional[str], SyntaxNode]] = [(None, _anon(self._expect("fn")))]
        parts.append(("name", self._expect_name()))
        parts.append(("parameters", self._parse_parameter_list()))
        parts.append((None, _anon(self._expect("->"))))
        parts.append(("return_type", self._parse_type()))
        parts.append(("body", self._parse_block()))
        return _node(constants.FUNCTION_DEFINITION, parts)

    def _parse_parameter_list(self) -> SyntaxNode:
        parts: list[tuple[Optional[str], SyntaxNode]] = [(None, _anon(self._expect("(")))]
        if not self._at(")"):
            parts.append((None, self._parse_parameter()))
            while self._at(","):
                parts.append((None, _anon(self._advance())))
                parts.append((None, self._parse_parameter()))
        parts.append((None, _anon(self._expect(")"))))
        return _node(constants.PARAMETER_LIST, parts)

    def _parse_parameter(self) -> SyntaxNode:
        name = self._expect_name()
        colon = _anon(self._expect(":"))
        return _node(
            constants.PARAMETER,
            [("name", name), (None, colon), ("type", self._parse_type())],
        )

    def _parse_type(self) -> SyntaxNode:
        tok = self._peek()
        if tok.kind != TK_IDENT or tok.text in KEYWORDS:
            raise self._error("expected type name", tok)
        return _leaf(self._advance(), "primitive_type")

    def _parse_variable_declaration(self) -> SyntaxNode:
        tok = self._peek()
        if tok.text not in MUTABILITY_KEYWORDS:
            raise self._error("expected 'const' or 'let'", tok)
        parts: list[tuple[Optional[str], SyntaxNode]] = [
            ("mutability_specifier", _leaf(self._advance(), "mutability_specifier"))
        ]
        parts.append(("name", self._expect_name()))
        parts.append((None, _anon(self._expect(":"))))
        parts.append(("type", self._parse_type()))
        parts.append((None, _anon(self._expect("="))))
        parts.append(("value", self._parse_expression()))
        parts.append((None, _anon(self._expect(";"))))
        return _node(constants.VARIABLE_DECLARATION, parts)

    # ── statements ───────────────────────────────────────────────


    def _parse_block(self) -> SyntaxNode:
        """Parse a block.

        Nested ``while``/``if`` bodies are tracked on an explicit stack of
        enclosing statements, so block nesting depth is not limited by the
        Python stack.
        """
        enclosing: list[tuple[str, list[tuple[Optional[str], SyntaxNode]], list]] = []
        parts: list[tuple[Optional[str], SyntaxNode]] = [(None, _anon(self._expect("{")))]
        while True:
            parts.extend((None, c) for c in self._take_comments())
            tok = self._peek()
            if self._at("}"):
                parts.append((None, _anon(self._advance())))
                block = _node(constants.BLOCK, parts)
                if not enclosing:
                    return block
                kind, stmt_parts, parts = enclosing.pop()
                stmt_parts.append(("body", block))
                parts.append((None, _node(kind, stmt_parts)))
                continue
            if tok.kind == TK_EOF:
                raise self._error("expected '}'", tok)
            if tok.kind == TK_IDENT and tok.text in CONDITIONAL_KEYWORDS:
                keyword = _anon(self._advance())
                condition = self._parse_expression()
                stmt_parts = [(None, keyword), ("condition", condition)]
                enclosing.append((CONDITIONAL_KEYWORDS[tok.text], stmt_parts, parts))
                parts = [(None, _anon(self._expect("{")))]
                continue
            parts.append((None, self._parse_statement()))

    def _parse_statement(self) -> SyntaxNode:
        tok = self._peek()
        if self._at("return"):
            return self._parse_return()
        if tok.kind == TK_IDENT and tok.text in MUTABILITY_KEYWORDS:
            return self._parse_variable_declaration()
        nxt = self._peek(1)
        if tok.kind == TK_IDENT and nxt.kind == TK_OP and nxt.text == "=":
            return self._parse_assignment()
        expr = self._parse_expression()
        semi = _anon(self._expect(";"))
        return _node(constants.EXPRESSION_STATEMENT, [(None, expr), (None, semi)])

    def _parse_return(self) -> SyntaxNode:
        keyword = _anon(self._advance())
        value = self._parse_expression()
        semi = _anon(self._expect(";"))
        return _node(
            constants.RETURN_STATEMENT, [(None, keyword), (None, value), (None, semi)]
        )

    def _parse_assignment(self) -> SyntaxNode:
        left = self._expect_name()
        eq = _anon(self._expect("="))
        right = self._parse_expression()
        semi = _anon(self._expect(";"))
        return _node(
            constants.ASSIGNMENT_STATEMENT,
            [("left", left), (None, eq), ("right", right), (None, semi)],
        )

    # ── expressions ──────────────────────────────────────────────

    def _binary_precedence(self) -> int:
        tok = self._peek()
        if tok.kind != TK_OP:
            return -1
        return BINARY_PRECEDENCE.get(tok.text, -1)

    def _parse_expression(self, min_prec: int = 0) -> SyntaxNode:
        """Precedence climbing over left-associative binary operators."""
        left = self._parse_unary()
        while True:
            prec = self._binary_precedence()
            if prec < min_prec:
                return left
            op = _anon(self._advance())
            right = self._parse_expression(prec + 1)
            left = _node(
                "binary_expression",
                [("left", left), ("operator", op), ("right", right)],
            )

    def _parse_unary(self) -> SyntaxNode:
        operators: list[SyntaxNode] = []
        while self._peek().kind == TK_OP and self._peek().text in UNARY_OPS:
            operators.append(_anon(self._advance()))
        expr = self._parse_primary()
        while self._at("("):
            parts: list[tuple[Optional[str], SyntaxNode]] = [(None, _anon(self._advance()))]
            if not self._at(")"):
                parts.append((None, self._parse_expression()))
                while self._at(","):
                    parts.append((None, _anon(self._advance())))
                    parts.append((None, self._parse_expression()))
            parts.append((None, _anon(self._expect(")"))))
            args = _node("argument_list", parts)
            expr = _node("call_expression", [("function", expr), ("arguments", args)])
        for op in reversed(operators):
            expr = _node("unary_expression", [("operator", op), ("operand", expr)])
        return expr

    def _parse_primary(self) -> SyntaxNode:
        tok = self._peek()
        if tok.kind == TK_INT:
            return _leaf(self._advance(), "integer_literal")
        if tok.kind == TK_FLOAT:
            return _leaf(self._advance(), "float_literal")
        if tok.kind == TK_STRING:
            return _leaf(self._advance(), "string_literal")
        if tok.kind == TK_IDENT and tok.text in ("true", "false"):
            return _leaf(self._advance(), "boolean_literal")
        if tok.kind == TK_IDENT and tok.text not in KEYWORDS:
            return _leaf(self._advance(), "identifier")
        if self._at("("):
            lparen = _anon(self._advance())
            inner = self._parse_expression()
            rparen = _anon(self._expect(")"))
            return _node(
                "parenthesized_expression",
                [(None, lparen), (None, inner), (None, rparen)],
            )
        raise self._error("expected expression", tok)
