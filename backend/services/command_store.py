"""
Saved ad hoc console commands.

Commands are addressed by generated identifiers rather than list positions,
so concurrent removals never shift another client's target.
"""

import logging
import threading
import uuid
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class CommandNotFoundError(KeyError):
    """No saved command has the requested identifier."""


@dataclass(frozen=True)
class StoredCommand:
    """A saved command."""

    id: str
    command: str
    label: str | None = None


class CommandStore:
    """Thread-safe, insertion-ordered collection of saved commands."""

    def __init__(self):
        self._commands: list[StoredCommand] = []
        self._lock = threading.Lock()

    def _index_of(self, command_id: str) -> int:
        for i, stored in enumerate(self._commands):
            if stored.id == command_id:
                return i
        raise CommandNotFoundError(command_id)

    def add(self, command: str, label: str | None = None) -> StoredCommand:
        stored = StoredCommand(id=uuid.uuid4().hex, command=command, label=label)
        with self._lock:
            self._commands.append(stored)
        logger.info(f"Saved command {stored.id}: {command}")
        return stored

    def list(self) -> list[StoredCommand]:
        with self._lock:
            return list(self._commands)

    def get(self, command_id: str) -> StoredCommand:
        with self._lock:
            return self._commands[self._index_of(command_id)]

    def update(self, command_id: str, command: str, label: str | None = None) -> StoredCommand:
        with self._lock:
            index = self._index_of(command_id)
            stored = StoredCommand(id=command_id, command=command, label=label)
            self._commands[index] = stored
        return stored

    def remove(self, command_id: str) -> StoredCommand:
        with self._lock:
            return self._commands.pop(self._index_of(command_id))

    def clear(self) -> None:
        with self._lock:
            self._commands.clear()
