"""Business logic services."""

from .command_relay import normalize_command, send_command
from .command_store import CommandNotFoundError, CommandStore, StoredCommand
from .pack_service import get_command_store, get_pack_manager

__all__ = [
    "CommandStore",
    "CommandNotFoundError",
    "StoredCommand",
    "normalize_command",
    "send_command",
    "get_command_store",
    "get_pack_manager",
]
