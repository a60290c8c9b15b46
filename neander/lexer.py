"""Tokenizer for the small assignment language compiled to Neander assembly."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class TokenType(str, Enum):
    """Kinds of source-language tokens."""

    PROGRAMA = "PROGRAMA"
    LABEL = "LABEL"
    INICIO = "INICIO"
    FIM = "FIM"
    VAR = "VAR"
    NUM = "NUM"
    OP = "OP"
    ATRIB = "="
    ABREPAR = "("
    FECHAPAR = ")"
    NEWLINE = "\n"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexed token."""

    kind: TokenType
    value: str


class LexError(Exception):
    """Raised when the source text cannot be tokenized."""


OPERATORS = "+-*/"

_SINGLE_CHAR = {
    "=": TokenType.ATRIB,
    "(": TokenType.ABREPAR,
    ")": TokenType.FECHAPAR,
    **{op: TokenType.OP for op in OPERATORS},
}

_KEYWORDS = {
    "PROGRAMA": TokenType.PROGRAMA,
    "INICIO": TokenType.INICIO,
    "FIM": TokenType.FIM,
}

_HEX_LETTERS = frozenset("abcdefABCDEF")


def _is_hex_digit(char: str) -> bool:
    return char.isdecimal() or char in _HEX_LETTERS


def _is_var_char(char: str) -> bool:
    return char.isalpha() or char.isdecimal()


def _scan(code: str, start: int, accept: Callable[[str], bool]) -> int:
    """Return the index just past the run of accepted characters at ``start``."""
    return next(
        (index for index in range(start, len(code)) if not accept(code[index])),
        len(code),
    )


def lex(code: str) -> list[Token]:
    """Tokenize source text; the result always ends with an EOF token."""
    tokens: list[Token] = []
    pos = 0
    while pos < len(code):
        char = code[pos]
        if char == "\n":
            tokens.append(Token(TokenType.NEWLINE, "\\n"))
            pos += 1
        elif char.isspace():
            pos += 1
        elif char in _SINGLE_CHAR:
            tokens.append(Token(_SINGLE_CHAR[char], char))
            pos += 1
        elif char == '"':
            close = code.find('"', pos + 1)
            if close < 0:
                raise LexError("unterminated string")
            tokens.append(Token(TokenType.LABEL, code[pos + 1 : close]))
            pos = close + 1
        elif char.isalpha():
            stop = _scan(code, pos, _is_var_char)
            word = code[pos:stop]
            tokens.append(Token(_KEYWORDS.get(word, TokenType.VAR), word))
            pos = stop
        elif _is_hex_digit(char):
            stop = _scan(code, pos, _is_hex_digit)
            tokens.append(Token(TokenType.NUM, code[pos:stop]))
            pos = stop
        else:
            raise LexError(f"unexpected character: {char}")
    tokens.append(Token(TokenType.EOF, ""))
    return tokens