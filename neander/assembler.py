"""Two-pass assembler producing Neander memory images."""

from __future__ import annotations

import re
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path

from neander.asmlexer import INSTRUCTIONS, Token, TokenKind, read_tokens, tokenize

HEADER = bytes([0x03, 0x4E, 0x44, 0x52])
MEMORY_SIZE = 512
IMAGE_SIZE = 516
OUTPUT_PATH = "io/build/output.mem"
USAGE = "usage: neander-asm <file.asm> (example: io/asm/output.asm)"

_HEX = re.compile(r"[0-9A-Fa-f]+")


class AssemblerError(Exception):
    """Raised when the assembly source cannot be assembled."""


def _parse_byte(text: str) -> int:
    if not _HEX.fullmatch(text):
        raise ValueError(text)
    value = int(text, 16)
    if value > 0xFF:
        raise ValueError(text)
    return value


def _operand(stream: Iterator[Token], directive: str) -> int:
    token = next(stream, None)
    if token is None:
        raise AssemblerError(f"expected a number after {directive}")
    try:
        return _parse_byte(token.value)
    except ValueError:
        raise AssemblerError(
            f"invalid number after {directive}: {token.value}"
        ) from None


def _store(memory: bytearray, address: int, value: int) -> None:
    real = (address * 2) & 0xFF
    memory[real] = value
    memory[real + 1] = 0x00


class Assembler:
    """Assembles a token stream into a 512-byte memory buffer."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self.tokens = list(tokens)
        self.pc = 0
        self.output = b""
        self.labels: dict[str, int] = {}
        self.start_pc = 0

    def first_pass(self) -> None:
        """Collect data labels and the code start address."""
        section = "CODE"
        stream = iter(self.tokens)
        for token in stream:
            if token.kind == TokenKind.SECTION:
                section = token.value.upper()
                continue
            is_define = token.kind == TokenKind.DEFINE
            if section == "CODE":
                if token.kind in (
                    TokenKind.INSTRUCTION,
                    TokenKind.NUMBER,
                    TokenKind.VARIABLE,
                ):
                    self.pc = (self.pc + 2) & 0xFF
                elif is_define and token.value == "ORG":
                    self.pc = self.start_pc = _operand(stream, "ORG")
            elif section == "DATA":
                if is_define and token.value == "ORG":
                    self.pc = _operand(stream, "ORG")
                elif token.kind == TokenKind.VARIABLE:
                    self.labels[token.value] = self.pc
                elif is_define and token.value == "DB":
                    if next(stream, None) is None:
                        raise AssemblerError("expected a number after DB")
                    self.pc = (self.pc + 2) & 0xFF

    def second_pass(self) -> None:
        """Generate the memory buffer, resolving labels."""
        memory = bytearray(MEMORY_SIZE)
        pc = self.start_pc
        section = "CODE"
        current_var = ""
        stream = iter(self.tokens)
        for token in stream:
            if token.kind == TokenKind.SECTION:
                section = token.value.upper()
                continue
            if section == "CODE":
                if token.kind == TokenKind.INSTRUCTION:
                    try:
                        opcode = INSTRUCTIONS[token.value]
                    except KeyError:
                        raise AssemblerError(
                            f"unknown instruction: {token.value}"
                        ) from None
                    _store(memory, pc, opcode)
                    pc = (pc + 1) & 0xFF
                elif token.kind == TokenKind.NUMBER:
                    try:
                        value = _parse_byte(token.value)
                    except ValueError:
                        raise AssemblerError(
                            f"invalid number: {token.value}"
                        ) from None
                    _store(memory, pc, value)
                    pc = (pc + 1) & 0xFF
                elif token.kind == TokenKind.VARIABLE:
                    if token.value not in self.labels:
                        raise AssemblerError(f"undefined label: {token.value}")
                    _store(memory, pc, self.labels[token.value])
                    pc = (pc + 1) & 0xFF
                elif token.kind == TokenKind.DEFINE and token.value == "ORG":
                    pc = _operand(stream, "ORG")
            elif section == "DATA":
                if token.kind == TokenKind.VARIABLE:
                    current_var = token.value
                elif token.kind == TokenKind.DEFINE:
                    if token.value == "DB":
                        value = _operand(stream, "DB")
                        if current_var not in self.labels:
                            raise AssemblerError(
                                f"undefined label for variable: {current_var}"
                            )
                        _store(memory, self.labels[current_var], value)
                    elif token.value == "ORG":
                        _operand(stream, "ORG")
        self.output = bytes(memory)

    def mem_image(self) -> bytes:
        """Return the .mem file contents: header plus memory, padded."""
        return (HEADER + self.output).ljust(IMAGE_SIZE, b"\x00")

    def write_mem(self, path: str | Path) -> None:
        """Write the .mem file to ``path``."""
        Path(path).write_bytes(self.mem_image())


def assemble(text: str) -> bytes:
    """Assemble source text into a .mem image."""
    assembler = Assembler(tokenize(text))
    assembler.first_pass()
    assembler.second_pass()
    return assembler.mem_image()


def main(argv: list[str] | None = None) -> int:
    """Assemble a file into io/build/output.mem."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print(USAGE, file=sys.stderr)
        return 1
    try:
        tokens = read_tokens(args[0])
    except OSError as exc:
        print(f"cannot read file: {exc}", file=sys.stderr)
        return 1
    assembler = Assembler(tokens)
    try:
        assembler.first_pass()
    except AssemblerError as exc:
        print(f"first pass error: {exc}", file=sys.stderr)
        return 1
    try:
        assembler.second_pass()
    except AssemblerError as exc:
        print(f"second pass error: {exc}", file=sys.stderr)
        return 1
    try:
        assembler.write_mem(OUTPUT_PATH)
    except OSError as exc:
        print(f"error writing .mem file: {exc}", file=sys.stderr)
        return 1
    print(f".mem file written to {OUTPUT_PATH}")
    return 0


if __name__ == "__main__":
    sys.exit(main())