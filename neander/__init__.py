"""Compiler, assembler and simulator for the Neander teaching computer."""

__version__ = "0.1.0"