import pytest

from romarin.transpiler.token import Token, TokenKind
from romarin.transpiler.tokenizer import EndOfInput, LexError, Lexer, UnmatchedInput


def test_integer():
    lex = Lexer("5")
    assert lex.next_token() == Token(TokenKind.INT, "5")
    with pytest.raises(LexError):
        lex.next_token()


def test_float():
    lex = Lexer("5.1")
    assert lex.next_token() == Token(TokenKind.FLOAT, "5.1")
    with pytest.raises(LexError):
        lex.next_token()


def test_id():
    lex = Lexer("x")
    assert lex.next_token() == Token(TokenKind.ID, "x")
    with pytest.raises(LexError):
        lex.next_token()


def test_whitespace():
    lex = Lexer(" 5 ")
    assert lex.next_token() == Token(TokenKind.INT, "5")
    with pytest.raises(LexError):
        lex.next_token()


def test_end_of_input_repeats():
    lex = Lexer("")
    with pytest.raises(EndOfInput):
        lex.next_token()
    with pytest.raises(EndOfInput):
        lex.next_token()


def test_identifier_with_digits():
    assert Lexer("abc120").next_token() == Token(TokenKind.ID, "abc120")


def test_iteration_yields_all_tokens():
    tokens = list(Lexer("x 12\t3.25\n y0"))
    assert tokens == [
        Token(TokenKind.ID, "x"),
        Token(TokenKind.INT, "12"),
        Token(TokenKind.FLOAT, "3.25"),
        Token(TokenKind.ID, "y0"),
    ]


def test_leading_zero_is_unmatched():
    lex = Lexer("0")
    with pytest.raises(UnmatchedInput) as info:
        lex.next_token()
    assert info.value.position == 0
    assert info.value.char == "0"


def test_unmatched_does_not_advance():
    lex = Lexer("x $")
    assert lex.next_token() == Token(TokenKind.ID, "x")
    with pytest.raises(UnmatchedInput):
        lex.next_token()
    with pytest.raises(UnmatchedInput):
        lex.next_token()


def test_text_reports_last_match():
    lex = Lexer("  abc 7")
    lex.next_token()
    assert lex.text() == "abc"
    lex.next_token()
    assert lex.text() == "7"


def test_unicode_line_separator_is_whitespace():
    assert list(Lexer("a\u2028b")) == [Token(TokenKind.ID, "a"), Token(TokenKind.ID, "b")]


def test_iteration_propagates_unmatched():
    with pytest.raises(UnmatchedInput):
        list(Lexer("a #"))