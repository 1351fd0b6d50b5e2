import dataclasses

import pytest

from romarin.transpiler.token import Token, TokenKind


def test_token_holds_kind_and_text():
    token = Token(TokenKind.INT, "5")
    assert dataclasses.astuple(token) == (TokenKind.INT, "5")
    assert token == Token(TokenKind.INT, "5")


def test_kind_distinguishes_tokens():
    assert Token(TokenKind.INT, "5") != Token(TokenKind.FLOAT, "5")
    assert Token(TokenKind.ID, "x") != Token(TokenKind.ID, "y")


def test_tokens_are_hashable_and_deduplicate():
    tokens = {Token(TokenKind.ID, "x"), Token(TokenKind.ID, "x"), Token(TokenKind.INT, "1")}
    assert len(tokens) == 2


def test_tokens_are_immutable():
    token = Token(TokenKind.FLOAT, "5.1")
    with pytest.raises(dataclasses.FrozenInstanceError):
        token.text = "6"  # type: ignore[misc]
    assert token.text == "5.1"


def test_kind_lookup_by_value():
    assert TokenKind("FLOAT") is TokenKind.FLOAT
    with pytest.raises(ValueError):
        TokenKind("STRING")