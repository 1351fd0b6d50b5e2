"""Tokens produced by the lexer."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class TokenKind(enum.Enum):
    """The kinds of token the lexer recognises."""

    ID = "ID"
    INT = "INT"
    FLOAT = "FLOAT"


@dataclass(frozen=True)
class Token:
    """A token kind together with the text it was read from."""

    kind: TokenKind
    text: str