from romarin.transpiler.ast import program
from romarin.transpiler.gen_verilog import to_verilog
from romarin.transpiler.tokenizer import Lexer


def test_function_header_and_footer():
    lines = to_verilog(None).splitlines()
    assert lines[0] == "function real MLDeviceBehavior;"
    assert lines[-1] == "endfunction"


def test_output_ends_with_newline():
    assert to_verilog(None).endswith("endfunction\n")


def test_assigns_result_from_drain_current():
    text = to_verilog(None)
    assert "      MLDeviceBehavior = Id;\n" in text
    assert text.index("Vgs = V(g, s);") < text.index("MLDeviceBehavior = Id;")


def test_begin_and_end_balance():
    lines = [line.strip() for line in to_verilog(None).splitlines()]
    assert lines.count("begin") == lines.count("end") == 1


def test_program_does_not_change_skeleton():
    assert to_verilog(program(Lexer("x 5 5.1"))) == to_verilog(None)