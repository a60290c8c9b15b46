"""Command that compiles a source program into Neander assembly."""

from __future__ import annotations

import sys
from pathlib import Path

from neander.generator import GeneratorError, generate_asm
from neander.lexer import LexError, lex
from neander.parser import ParseError, Parser

OUTPUT_PATH = "io/asm/output.asm"
USAGE = "usage: neander-cc <file.ldh> (example: io/linguagemCriada/program.ldh)"


def compile_source(code: str) -> str:
    """Compile program text to assembly source text."""
    instructions = Parser(lex(code)).parse_program()
    return generate_asm(instructions).render()


def main(argv: list[str] | None = None) -> int:
    """Compile a file into io/asm/output.asm."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print(USAGE, file=sys.stderr)
        return 1
    try:
        code = Path(args[0]).read_text(encoding="utf-8")
    except OSError as exc:
        print(f"error reading file: {exc}", file=sys.stderr)
        return 1
    try:
        output = compile_source(code)
    except LexError as exc:
        print(f"lexical error: {exc}", file=sys.stderr)
        return 1
    except ParseError as exc:
        print(f"parse error: {exc}", file=sys.stderr)
        return 1
    except GeneratorError as exc:
        print(f"code generation error: {exc}", file=sys.stderr)
        return 1
    try:
        Path(OUTPUT_PATH).write_text(output, encoding="utf-8")
    except OSError as exc:
        print(f"error saving .asm file: {exc}", file=sys.stderr)
        return 1
    print(f"output.asm written to {OUTPUT_PATH}")
    return 0


if __name__ == "__main__":
    sys.exit(main())