"""
Hardware Layer

Low-level output devices only:

- terminal protocol (ITerminal)
- ANSI terminal on stdout
- in-memory virtual terminal

"""
from .terminal.terminal_interface import ITerminal
from .terminal.ansi_terminal import AnsiTerminal
from .terminal.virtual_terminal import VirtualTerminal

__all__ = [
    "ITerminal",
    "AnsiTerminal",
    "VirtualTerminal",
]
