"""
FastAPI dependencies for the pack engine and the saved command store.
"""

import logging

from backend.config import settings
from backend.services.command_store import CommandStore
from packvault.manager import PackManager

logger = logging.getLogger(__name__)

# Global command store (process lifetime)
_command_store = CommandStore()


def get_pack_manager() -> PackManager:
    """
    FastAPI dependency for pack operations.

    The manager is rebuilt per request from the current settings; it holds no
    state beyond the layout, every operation rescans the filesystem.
    """
    return PackManager(settings.layout())


def get_command_store() -> CommandStore:
    """FastAPI dependency for the saved command store."""
    return _command_store
