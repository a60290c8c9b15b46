import io

import pytest

from neander.simulator import (
    DUMP_HEADER,
    PROGRAM_START,
    TOTAL_SIZE,
    Opcode,
    SimulatorError,
    Step,
    format_dump,
    format_step,
    main,
    run,
    run_binary,
)


def _image(words, data=None):
    memory = bytearray(TOTAL_SIZE)
    for k, word in enumerate(words):
        memory[PROGRAM_START + 2 * k] = word
    for address, value in (data or {}).items():
        memory[PROGRAM_START + 2 * address] = value
    return memory


def _cell(address):
    return PROGRAM_START + 2 * address


def test_halt_immediately():
    memory = _image([Opcode.HLT])
    before = bytes(memory)
    assert list(run(memory)) == []
    assert bytes(memory) == before


def test_load_add_store():
    memory = _image(
        [Opcode.LDA, 0x20, Opcode.ADD, 0x21, Opcode.STA, 0x22, Opcode.HLT],
        {0x20: 5, 0x21: 3},
    )
    steps = list(run(memory))
    assert [s.instruction for s in steps] == [Opcode.LDA, Opcode.ADD, Opcode.STA]
    assert steps[0].pc == 4
    assert steps[0].ac == 0 and steps[0].zero
    assert steps[1].ac == 5
    assert memory[_cell(0x22)] == 5 + 3


def test_not_then_store_sets_negative():
    memory = _image([Opcode.NOT, Opcode.STA, 0x20, Opcode.HLT])
    steps = list(run(memory))
    assert steps[1].negative is True
    assert steps[1].zero is False
    assert memory[_cell(0x20)] == 0xFF


def test_jz_taken_when_zero():
    memory = _image([Opcode.JZ, 4, Opcode.NOT, Opcode.NOP, Opcode.HLT])
    steps = list(run(memory))
    assert [s.instruction for s in steps] == [Opcode.JZ]


def test_jn_not_taken_when_positive():
    memory = _image([Opcode.JN, 5, Opcode.NOT, Opcode.STA, 0x20, Opcode.HLT])
    steps = list(run(memory))
    assert [s.instruction for s in steps] == [Opcode.JN, Opcode.NOT, Opcode.STA]
    assert memory[_cell(0x20)] == 0xFF


def test_jmp():
    memory = _image([Opcode.JMP, 3, Opcode.NOT, Opcode.HLT])
    steps = list(run(memory))
    assert [s.instruction for s in steps] == [Opcode.JMP]


def test_and_or():
    memory = _image(
        [Opcode.LDA, 0x20, Opcode.OR, 0x21, Opcode.STA, 0x22,
         Opcode.AND, 0x20, Opcode.STA, 0x23, Opcode.HLT],
        {0x20: 0x0C, 0x21: 0x03},
    )
    list(run(memory))
    assert memory[_cell(0x22)] == 0x0C | 0x03
    assert memory[_cell(0x23)] == (0x0C | 0x03) & 0x0C


def test_step_content_is_operand():
    memory = _image([Opcode.LDA, 0x20, Opcode.HLT])
    (step,) = list(run(memory))
    assert step.content == 0x20


def test_short_memory_raises():
    with pytest.raises(SimulatorError):
        list(run(bytearray(3)))


def test_format_step():
    step = Step(ac=0, pc=4, zero=True, negative=False,
                instruction=0x20, content=0x20)
    assert format_step(step) == (
        "AC:  0 PC:  4 FZ:  true FN: false INSTRUCAO: 20 CONTEUDO: 20"
    )


def test_format_step_masks_accumulator():
    low = Step(ac=0x05, pc=4, zero=False, negative=False, instruction=0, content=0)
    high = Step(ac=0x105, pc=4, zero=False, negative=False, instruction=0, content=0)
    assert format_step(low) == format_step(high)


def test_format_dump_layout():
    memory = bytearray(TOTAL_SIZE)
    memory[0] = 3
    lines = format_dump(memory).splitlines()
    assert lines[0] == DUMP_HEADER
    assert lines[1].startswith("  0:  3 ")
    assert sum(line.count(":") for line in lines[1:]) == TOTAL_SIZE
    assert all(line.count(":") == 16 for line in lines[1:-1])


def test_format_dump_short_memory():
    with pytest.raises(SimulatorError):
        format_dump(bytearray(10))


def test_run_binary(tmp_path):
    memory = _image(
        [Opcode.LDA, 0x20, Opcode.ADD, 0x21, Opcode.STA, 0x22, Opcode.HLT],
        {0x20: 5, 0x21: 3},
    )
    path = tmp_path / "prog.mem"
    path.write_bytes(bytes(memory))
    out = io.StringIO()
    final = run_binary(path, out)
    lines = out.getvalue().splitlines()
    assert lines[3] == DUMP_HEADER
    assert all(line.startswith("AC:") for line in lines[:3])
    assert final[_cell(0x22)] == 5 + 3


def test_main_without_arguments():
    assert main([]) == 1


def test_main_missing_file(tmp_path):
    assert main([str(tmp_path / "absent.mem")]) == 1


def test_main_runs_file(tmp_path, capsys):
    path = tmp_path / "prog.mem"
    path.write_bytes(bytes(_image([Opcode.HLT])))
    assert main([str(path)]) == 0
    assert DUMP_HEADER in capsys.readouterr().out