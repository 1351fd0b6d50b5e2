"""Syntax trees built from lexer tokens."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field

from romarin.transpiler.token import TokenKind
from romarin.transpiler.tokenizer import EndOfInput, Lexer

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


class AstNodeKind(enum.Enum):
    """The kinds of syntax-tree node."""

    ID = "ID"
    INT = "INT"
    FLOAT = "FLOAT"


@dataclass(frozen=True)
class AstNode:
    """A node kind and its value: a name, an integer or a number."""

    kind: AstNodeKind
    value: str | int | float


@dataclass
class Ast:
    """A tree with a root node and any number of subtrees."""

    root: AstNode
    children: list[Ast] = field(default_factory=list)

    def add_child(self, child: Ast) -> None:
        """Append a subtree."""
        self.children.append(child)


def _parse_int(text: str) -> int:
    value = int(text)
    if not _I32_MIN <= value <= _I32_MAX:
        raise ValueError(f"integer literal {text!r} is out of range")
    return value


def _parse_float(text: str) -> float:
    value = float(text)
    return struct.unpack("f", struct.pack("f", value))[0]


def literal(lexer: Lexer) -> Ast | None:
    """Read one literal, or return None at the end of the input.

    Raises UnmatchedInput on unreadable input and ValueError on a literal
    that does not parse as a number.
    """
    try:
        token = lexer.next_token()
    except EndOfInput:
        return None
    if token.kind is TokenKind.ID:
        return Ast(AstNode(AstNodeKind.ID, token.text))
    if token.kind is TokenKind.INT:
        return Ast(AstNode(AstNodeKind.INT, _parse_int(token.text)))
    return Ast(AstNode(AstNodeKind.FLOAT, _parse_float(token.text)))


def program(lexer: Lexer) -> list[Ast]:
    """Read literals until the input is exhausted."""
    statements: list[Ast] = []
    while (statement := literal(lexer)) is not None:
        statements.append(statement)
    return statements