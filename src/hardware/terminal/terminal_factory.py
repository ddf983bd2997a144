# factory.py

from typing import Optional
from models.enums import TerminalKind
from runtime.runtime_info import RuntimeInfo
from hardware.terminal.terminal_interface import ITerminal
from hardware.terminal.virtual_terminal import VirtualTerminal
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TERMINAL)


def create_terminal(
    *,
    kind: Optional[TerminalKind] = None,
    columns: int = 80,
    rows: int = 24,
) -> ITerminal:
    """
    Pick a terminal implementation.

    Without an explicit kind the ANSI terminal is used, also when stdout is
    a pipe or file (the escape stream is written there as-is). VIRTUAL is a
    dry run: nothing is written, only the last few frames are kept.
    """

    if kind is None:
        kind = TerminalKind.ANSI
        if not RuntimeInfo.stdout_is_tty():
            log.info("stdout is not a terminal, writing the escape stream to it anyway")

    if kind is TerminalKind.ANSI:
        from hardware.terminal.ansi_terminal import AnsiTerminal
        return AnsiTerminal()

    log.info("Dry run on a virtual terminal", columns=columns, rows=rows)
    return VirtualTerminal(columns=columns, rows=rows)
