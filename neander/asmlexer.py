"""Tokenizer for Neander assembly source."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

log = logging.getLogger(__name__)


class TokenKind(str, Enum):
    """Kinds of assembly tokens."""

    SECTION = "SECTION"
    EOF = "EOF"
    INSTRUCTION = "INSTRUCTION"
    NUMBER = "NUMBER"
    VARIABLE = "VARIABLE"
    DEFINE = "DEFINE"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class Token:
    """A classified lexeme."""

    kind: TokenKind
    value: str


INSTRUCTIONS: dict[str, int] = {
    "NOP": 0x00,
    "STA": 0x10,
    "LDA": 0x20,
    "ADD": 0x30,
    "OR": 0x40,
    "AND": 0x50,
    "NOT": 0x60,
    "JMP": 0x80,
    "JN": 0x90,
    "JZ": 0xA0,
    "HLT": 0xF0,
}

DEFINES = frozenset({"DB", "DS", "ORG"})

_VARIABLE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_SIGNED_HEX = re.compile(r"[+-]?[0-9A-Fa-f]+")
_SEPARATOR = re.compile(r"[\t\n\f\r ]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


def _is_number(lexeme: str) -> bool:
    if not _SIGNED_HEX.fullmatch(lexeme):
        return False
    return _INT64_MIN <= int(lexeme, 16) <= _INT64_MAX


def classify(lexeme: str) -> Token:
    """Classify a single lexeme into a token."""
    if lexeme.startswith("."):
        return Token(TokenKind.SECTION, lexeme[1:])
    if lexeme in INSTRUCTIONS:
        return Token(TokenKind.INSTRUCTION, lexeme)
    if lexeme in DEFINES:
        return Token(TokenKind.DEFINE, lexeme)
    if _is_number(lexeme):
        return Token(TokenKind.NUMBER, lexeme)
    if _VARIABLE.fullmatch(lexeme):
        return Token(TokenKind.VARIABLE, lexeme)
    log.warning("unknown token: %s", lexeme)
    return Token(TokenKind.UNKNOWN, lexeme)


def tokenize(text: str) -> list[Token]:
    """Split assembly text into tokens, dropping comments, ending with EOF."""
    tokens = [
        classify(lexeme)
        for line in text.split("\n")
        for lexeme in _SEPARATOR.split(line.split(";", 1)[0].strip())
        if lexeme
    ]
    tokens.append(Token(TokenKind.EOF, ""))
    return tokens


def read_tokens(path: str | Path) -> list[Token]:
    """Read an assembly file and tokenize it."""
    return tokenize(Path(path).read_text(encoding="utf-8"))