"""Simulator for Neander memory images."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import TextIO

TOTAL_SIZE = 516
PROGRAM_START = 0x04
DUMP_HEADER = "========== Retorno de Memória ==========="
USAGE = "usage: neander-run <file.mem> (example: io/build/output.mem)"


class Opcode(IntEnum):
    """Neander instruction opcodes."""

    NOP = 0x00
    STA = 0x10
    LDA = 0x20
    ADD = 0x30
    OR = 0x40
    AND = 0x50
    NOT = 0x60
    JMP = 0x80
    JN = 0x90
    JZ = 0xA0
    HLT = 0xF0


class SimulatorError(Exception):
    """Raised when execution touches memory outside the image."""


@dataclass(frozen=True)
class Step:
    """Machine state just before an instruction executes."""

    ac: int
    pc: int
    zero: bool
    negative: bool
    instruction: int
    content: int


_ALU = {
    Opcode.LDA: lambda ac, value: value,
    Opcode.ADD: lambda ac, value: ac + value,
    Opcode.OR: lambda ac, value: ac | value,
    Opcode.AND: lambda ac, value: ac & value,
}


def _read(memory, index: int) -> int:
    if not 0 <= index < len(memory):
        raise SimulatorError(f"address {index:#x} is outside memory")
    return memory[index]


def _address(memory, pc: int) -> int:
    return _read(memory, pc) * 2 + PROGRAM_START


def run(memory: bytearray) -> Iterator[Step]:
    """Execute the image, yielding a Step before each instruction.

    ``memory`` is modified in place by STA instructions.
    """
    ac = 0
    pc = PROGRAM_START
    while True:
        opcode = _read(memory, pc)
        if opcode == Opcode.HLT or pc > 0xFF:
            return
        yield Step(
            ac=ac,
            pc=pc,
            zero=ac == 0,
            negative=(ac & 0x80) != 0,
            instruction=opcode,
            content=_read(memory, pc + 2),
        )
        if opcode == Opcode.STA:
            pc += 2
            target = _address(memory, pc)
            _read(memory, target)
            memory[target] = ac & 0xFF
            pc += 2
        elif opcode in _ALU:
            pc += 2
            ac = _ALU[opcode](ac, _read(memory, _address(memory, pc)))
            pc += 2
        elif opcode == Opcode.NOT:
            ac = ~ac
            pc += 2
        elif opcode == Opcode.JMP:
            pc = _address(memory, pc + 2)
        elif opcode in (Opcode.JN, Opcode.JZ):
            pc += 2
            taken = (ac & 0x80) != 0 if opcode == Opcode.JN else ac == 0
            pc = _address(memory, pc) if taken else pc + 2
        else:
            pc += 2


def format_step(step: Step) -> str:
    """Render a trace line for one step."""
    zero = str(step.zero).lower()
    negative = str(step.negative).lower()
    return (
        f"AC: {step.ac & 0xFF:2x} PC: {step.pc:2x} FZ: {zero:>5} FN: {negative:>5} "
        f"INSTRUCAO: {step.instruction:2x} CONTEUDO: {step.content:2x}"
    )


def format_dump(memory) -> str:
    """Render the memory dump, sixteen cells per line."""
    if len(memory) < TOTAL_SIZE:
        raise SimulatorError(
            f"memory image has {len(memory)} bytes, expected {TOTAL_SIZE}"
        )
    body = "".join(
        f"{index:3x}:{value:3x} " + ("\n" if index % 16 == 15 else "")
        for index, value in enumerate(memory[:TOTAL_SIZE])
    )
    return f"{DUMP_HEADER}\n{body}"


def run_binary(path: str | Path, out: TextIO | None = None) -> bytearray:
    """Run a .mem file, writing the trace and memory dump to ``out``."""
    stream = sys.stdout if out is None else out
    memory = bytearray(Path(path).read_bytes())
    for step in run(memory):
        stream.write(format_step(step) + "\n")
    stream.write(format_dump(memory))
    return memory


def main(argv: list[str] | None = None) -> int:
    """Run a .mem file and print its trace."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print(USAGE, file=sys.stderr)
        return 1
    try:
        run_binary(args[0])
    except OSError:
        print("could not read the file", file=sys.stderr)
        return 1
    except SimulatorError as exc:
        print(f"execution error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())