"""Code generator emitting Neander assembly from parsed assignments."""

from __future__ import annotations

import itertools
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from neander.lexer import TokenType
from neander.parser import Instruction

_HEX = re.compile(r"[0-9A-Fa-f]+")
_CONST_PREFIX = "CONST_"


class GeneratorError(Exception):
    """Raised when an expression cannot be turned into code."""


@dataclass
class AsmProgram:
    """Assembly code and data sections as lists of lines."""

    code: list[str] = field(default_factory=lambda: [".CODE", "ORG 00"])
    data: list[str] = field(default_factory=lambda: [".DATA", "ORG 20"])

    def render(self) -> str:
        """Return the assembly source text, code section first."""
        return "\n".join(self.code + self.data)


def _multiplier(operand: str) -> int:
    """Return the constant value of a CONST_ label, or 0 if it has none."""
    if len(operand) <= len(_CONST_PREFIX) or not operand.startswith(_CONST_PREFIX):
        return 0
    digits = operand[len(_CONST_PREFIX) :]
    if not _HEX.fullmatch(digits):
        return 0
    value = int(digits, 16)
    return value if value <= 0xFF else 0


def generate_asm(instructions: Iterable[Instruction]) -> AsmProgram:
    """Generate an assembly program for the given assignments."""
    instructions = list(instructions)
    program = AsmProgram()
    constants: set[str] = set()
    used_vars: dict[str, None] = {}
    counter = itertools.count()

    def new_tmp() -> str:
        label = f"TMP{next(counter)}"
        program.data.append(f"{label} DB 00")
        return label

    def declare_constant(label: str, value: str) -> None:
        if label not in constants:
            program.data.append(f"{label} DB {value}")
            constants.add(label)

    def emit_operation(op: str, left: str, right: str) -> None:
        code = program.code
        if op == "*":
            code.append(f"LDA {left}")
            code.extend(f"ADD {left}" for _ in range(1, _multiplier(right)))
        elif op == "+":
            code.extend([f"LDA {left}", f"ADD {right}"])
        elif op == "-":
            negated = new_tmp()
            code.extend(
                [
                    f"LDA {right}",
                    "NOT",
                    "ADD CONST_01",
                    f"STA {negated}",
                    f"LDA {left}",
                    f"ADD {negated}",
                ]
            )
            declare_constant("CONST_01", "01")
        elif op == "/":
            code.append("; DIV not supported")

    for instruction in instructions:
        stack: list[str] = []
        for token in instruction.expr:
            if token.kind == TokenType.NUM:
                label = _CONST_PREFIX + token.value
                declare_constant(label, token.value)
                stack.append(label)
            elif token.kind == TokenType.VAR:
                used_vars[token.value] = None
                stack.append(token.value)
            elif token.kind == TokenType.OP:
                if len(stack) < 2:
                    raise GeneratorError("malformed expression")
                right = stack.pop()
                left = stack.pop()
                tmp = new_tmp()
                emit_operation(token.value, left, right)
                program.code.append(f"STA {tmp}")
                stack.append(tmp)
        if len(stack) != 1:
            raise GeneratorError("expression did not reduce to a single value")
        program.code.extend([f"LDA {stack[0]}", f"STA {instruction.var}"])

    program.data.extend(f"{name} DB 00" for name in used_vars)
    for instruction in instructions:
        if instruction.var not in used_vars:
            program.data.append(f"{instruction.var} DB 00")
            used_vars[instruction.var] = None

    program.code.append("HLT")
    return program