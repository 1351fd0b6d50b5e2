"""Lexer, literal parser and Verilog-A function skeleton."""