from .terminal_interface import ITerminal
from .ansi_terminal import AnsiTerminal
from .virtual_terminal import VirtualTerminal
from .terminal_factory import create_terminal

__all__ = [
    "ITerminal",
    "AnsiTerminal",
    "VirtualTerminal",
    "create_terminal",
]
