"""Pydantic models for API requests and responses."""

from .addons import (
    ActiveAddon,
    ActiveAddonsResponse,
    InstalledAddonsResponse,
    PackResult,
    UploadResponse,
)
from .commands import (
    CommandRequest,
    CommandSentResponse,
    SavedCommand,
    SavedCommandList,
    SavedCommandRequest,
)
from .common import ErrorResponse, HealthResponse

__all__ = [
    "ActiveAddon",
    "ActiveAddonsResponse",
    "InstalledAddonsResponse",
    "PackResult",
    "UploadResponse",
    "CommandRequest",
    "CommandSentResponse",
    "SavedCommand",
    "SavedCommandList",
    "SavedCommandRequest",
    "ErrorResponse",
    "HealthResponse",
]
