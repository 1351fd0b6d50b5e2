"""A table-driven lexer for identifiers, integers and decimal numbers."""

from __future__ import annotations

from collections.abc import Iterator

from romarin.transpiler.token import Token, TokenKind

_OTHER, _SPACE, _LETTER, _ZERO, _DIGIT = range(5)
_SPACES = frozenset("\t\n\x0b\x0c\r \x85\u2028\u2029")

# State 1 is whitespace, 2 an identifier, 3 an integer, 4 a decimal number.
_TRANSITIONS: dict[int, dict[int, int]] = {
    0: {_SPACE: 1, _LETTER: 2, _DIGIT: 3},
    1: {},
    2: {_LETTER: 2, _ZERO: 2, _DIGIT: 2},
    3: {_OTHER: 4, _ZERO: 3, _DIGIT: 3},
    4: {_ZERO: 4, _DIGIT: 4},
}
_ACCEPTING: dict[int, TokenKind | None] = {
    1: None,
    2: TokenKind.ID,
    3: TokenKind.INT,
    4: TokenKind.FLOAT,
}
_STOP_AFTER = frozenset({1})


def _char_class(ch: str) -> int:
    if ch in _SPACES:
        return _SPACE
    if ch == "0":
        return _ZERO
    if "1" <= ch <= "9":
        return _DIGIT
    if ch.isascii() and ch.isalpha():
        return _LETTER
    return _OTHER


class LexError(Exception):
    """Base class for lexer errors."""


class EndOfInput(LexError):
    """Raised when no input is left to read."""


class UnmatchedInput(LexError):
    """Raised when no token starts at the current position."""

    def __init__(self, position: int, char: str) -> None:
        super().__init__(f"unexpected character {char!r} at position {position}")
        self.position = position
        self.char = char


class Lexer:
    """Reads tokens from a string, skipping whitespace, by longest match."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._start = 0
        self._pos = 0

    def next_token(self) -> Token:
        """Return the next token.

        Raises EndOfInput when the input is exhausted and UnmatchedInput when
        no token starts at the current position.
        """
        source = self._source
        while True:
            start = self._pos
            self._start = start
            if start >= len(source):
                raise EndOfInput("end of input")

            state = 0
            accepted: int | None = None
            end = start
            for offset, ch in enumerate(source[start:], start + 1):
                following = _TRANSITIONS[state].get(_char_class(ch))
                if following is None:
                    break
                state = following
                if state in _ACCEPTING:
                    accepted = state
                    end = offset
                if state in _STOP_AFTER:
                    break

            if accepted is None:
                raise UnmatchedInput(start, source[start])

            self._pos = end
            kind = _ACCEPTING[accepted]
            if kind is not None:
                return Token(kind, source[start:end])

    def text(self) -> str:
        """The text of the most recent match."""
        return self._source[self._start : self._pos]

    def __iter__(self) -> Iterator[Token]:
        while True:
            try:
                yield self.next_token()
            except EndOfInput:
                return