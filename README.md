# neander

A small toolchain for the Neander teaching computer, an 8-bit machine with a
single accumulator and eleven instructions (`NOP`, `STA`, `LDA`, `ADD`, `OR`,
`AND`, `NOT`, `JMP`, `JN`, `JZ`, `HLT`). It has three parts:

1. a compiler from a tiny assignment language to Neander assembly,
2. a two-pass assembler that turns the assembly into a `.mem` memory image,
3. a simulator that runs a `.mem` image, printing a trace line before each
   instruction and a memory dump when the machine stops.

## Installation

```
pip install .
```

Python 3.10 or later is required; there are no runtime dependencies.

## The source language

A program names itself, opens with `INICIO`, holds one assignment per line
and closes with `FIM`:

```
PROGRAMA "soma"
INICIO
x = 0A + 05
y = (x - 03) * 02
FIM
```

Numbers are hexadecimal and must begin with a decimal digit (`0A`, not `A`);
a word that begins with a letter is a variable name. Expressions use `+`,
`-`, `*`, `/` and parentheses, with `*` and `/` binding tighter than `+` and
`-`. Subtraction is done by adding the two's complement of the right operand.
Multiplication is expanded into repeated additions and only does so when its
right operand is a constant; with any other right operand it just loads the
left one. Division emits only a `; DIV not supported` comment, so its result
is not computed.

In the generated assembly, constants become `CONST_<digits>` labels,
intermediate results become `TMP<n>` labels, and every variable gets a byte
in the data section.

## Commands

Compile a program to assembly (written to `io/asm/output.asm`):

```
neander-cc program.ldh
```

Assemble it into a memory image (written to `io/build/output.mem`):

```
neander-asm io/asm/output.asm
```

Run the image in the simulator:

```
neander-run io/build/output.mem
```

The output paths are relative to the current working directory and their
directories must already exist. Each command prints an error to standard
error and exits with status 1 when it fails.

## Assembly format

Code and data live in `.CODE` and `.DATA` sections. `ORG` sets the address
that follows, `DB` defines a byte under a label, and `;` starts a comment.
All numbers are hexadecimal bytes:

```
.CODE
ORG 00
LDA X
ADD Y
STA Z
HLT
.DATA
ORG 20
X DB 0A
Y DB 05
Z DB 00
```

A word that reads as a hexadecimal number is always taken as a number, so
labels such as `A`, `B` or `BEEF` cannot be used; pick names like `X` or
`TOTAL` instead.

The memory image is a 4-byte header (`03 4E 44 52`) followed by 512 bytes,
each Neander byte stored in the low half of a 16-bit word.

## Simulator output

Before each instruction the simulator prints the accumulator, program
counter, zero and negative flags, the instruction byte and the operand byte.
It stops at `HLT` or when the program counter passes `0xFF`, then prints the
516 bytes of the image, sixteen per line. Reading or writing outside the
image raises `neander.simulator.SimulatorError`.

## Using it as a library

```python
from neander.compiler import compile_source
from neander.assembler import assemble
from neander.simulator import run, format_step, format_dump

with open("program.ldh", encoding="utf-8") as source:
    asm = compile_source(source.read())

memory = bytearray(assemble(asm))   # run() writes into the image in place
for step in run(memory):
    print(format_step(step))
print(format_dump(memory))
```

The lower-level pieces are available too: `neander.lexer.lex`,
`neander.parser.Parser`, `neander.generator.generate_asm` (returning an
`AsmProgram` whose `render()` gives the assembly text),
`neander.asmlexer.tokenize` and `neander.asmlexer.read_tokens`,
`neander.assembler.Assembler` (with `first_pass`, `second_pass`, `mem_image`
and `write_mem`), and `neander.simulator.run_binary` to run a `.mem` file and
write its trace to any text stream. Errors are reported as `LexError`,
`ParseError`, `GeneratorError`, `AssemblerError` and `SimulatorError`.