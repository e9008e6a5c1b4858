"""
Console command relay.

The game server reads console commands from a named pipe, one per line.
"""

import logging
import os
import stat
from pathlib import Path

logger = logging.getLogger(__name__)


def normalize_command(command: str) -> str:
    """
    Validate a console command.

    Raises:
        ValueError: If the command is empty or spans several lines
    """
    command = command.strip()
    if not command:
        raise ValueError("Empty command")
    if "\n" in command or "\r" in command:
        raise ValueError("Command must be a single line")
    return command


def send_command(fifo_path: Path, command: str) -> str:
    """
    Write one command line to the server's command pipe.

    A pipe with no reader fails immediately instead of blocking.

    Args:
        fifo_path: Named pipe (or plain file) the server reads commands from
        command: Console command

    Returns:
        The command as written (without the trailing newline)

    Raises:
        ValueError: If the command is empty or multi-line
        OSError: If the pipe cannot be opened or written
    """
    command = normalize_command(command)

    flags = os.O_WRONLY | os.O_APPEND
    if fifo_path.exists() and stat.S_ISFIFO(fifo_path.stat().st_mode):
        flags |= os.O_NONBLOCK

    fd = os.open(fifo_path, flags)
    with os.fdopen(fd, "wb") as fifo:
        fifo.write(f"{command}\n".encode())

    logger.info(f"Command sent: {command}")
    return command
