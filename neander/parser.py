"""Parser turning tokens into assignments with postfix expressions."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from neander.lexer import Token, TokenType


class ParseError(Exception):
    """Raised when the token stream does not form a valid program."""


@dataclass
class Instruction:
    """An assignment: ``var`` receives the value of ``expr`` (postfix order)."""

    var: str
    expr: list[Token] = field(default_factory=list)


PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2}

_OPERANDS = (TokenType.NUM, TokenType.VAR)


class Parser:
    """Recursive parser for PROGRAMA ... INICIO ... FIM programs."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self.tokens = list(tokens)
        self.pos = 0

    def _current(self) -> Token:
        if self.pos >= len(self.tokens):
            return Token(TokenType.EOF, "")
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        token = self._current()
        self.pos += 1
        return token

    def _match(self, kind: TokenType) -> bool:
        if self._current().kind == kind:
            self._advance()
            return True
        return False

    def parse_program(self) -> list[Instruction]:
        """Parse a whole program and return its assignments in order."""
        if not self._match(TokenType.PROGRAMA):
            raise ParseError("expected 'PROGRAMA'")
        if not self._match(TokenType.LABEL):
            raise ParseError("expected program name")
        if not self._match(TokenType.NEWLINE):
            raise ParseError("expected line break after label")
        if not (self._match(TokenType.INICIO) and self._match(TokenType.NEWLINE)):
            raise ParseError("expected 'INICIO' on the next line")

        instructions: list[Instruction] = []
        while self._current().kind not in (TokenType.FIM, TokenType.EOF):
            instructions.append(self._parse_instruction())

        if not self._match(TokenType.FIM):
            raise ParseError("expected 'FIM'")
        return instructions

    def _parse_instruction(self) -> Instruction:
        if self._current().kind != TokenType.VAR:
            raise ParseError("expected variable name")
        name = self._advance().value
        if not self._match(TokenType.ATRIB):
            raise ParseError("expected '=' after variable")
        expr = self._parse_expression()
        if not self._match(TokenType.NEWLINE):
            raise ParseError("expected line break after expression")
        return Instruction(name, expr)

    def _parse_expression(self) -> list[Token]:
        """Shunting-yard conversion of an infix expression to postfix."""
        output: list[Token] = []
        stack: list[Token] = []
        while True:
            token = self._current()
            if token.kind in _OPERANDS:
                output.append(token)
            elif token.kind == TokenType.OP:
                precedence = PRECEDENCE.get(token.value, 0)
                while (
                    stack
                    and stack[-1].kind == TokenType.OP
                    and PRECEDENCE.get(stack[-1].value, 0) >= precedence
                ):
                    output.append(stack.pop())
                stack.append(token)
            elif token.kind == TokenType.ABREPAR:
                stack.append(token)
            elif token.kind == TokenType.FECHAPAR:
                while stack and stack[-1].kind != TokenType.ABREPAR:
                    output.append(stack.pop())
                if not stack:
                    raise ParseError("unbalanced parenthesis")
                stack.pop()
            else:
                break
            self._advance()

        while stack:
            top = stack.pop()
            if top.kind == TokenType.ABREPAR:
                raise ParseError("unclosed parenthesis")
            output.append(top)
        return output