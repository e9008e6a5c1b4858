"""Shared data models for pack archive, install and restore operations.

This module provides the pack kind enumeration and the per-pack outcome types
returned by the batch operations (ingestion and restoration).
"""

import json
import zipfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from packvault.errors import (
    InvalidArchiveError,
    ManifestNotFoundError,
    ManifestParseError,
    UnsafeArchiveEntryError,
)


class PackKind(str, Enum):
    """Kind of pack; decides installation and archive roots."""

    BEHAVIOR = "behavior"
    RESOURCE = "resource"


class FailureKind(str, Enum):
    """Why a single pack in a batch failed."""

    NOT_FOUND = "not_found"
    PARSE_ERROR = "parse_error"
    IO_FAILURE = "io_failure"
    SECURITY_VIOLATION = "security_violation"


class OutcomeStatus(str, Enum):
    """Terminal state of a single pack in a batch."""

    INSTALLED = "installed"
    RESTORED = "restored"
    ALREADY_PRESENT = "already_present"
    FAILED = "failed"


def classify_failure(exc: BaseException) -> FailureKind:
    """Map an exception raised while processing a pack to a FailureKind."""
    if isinstance(exc, UnsafeArchiveEntryError):
        return FailureKind.SECURITY_VIOLATION
    if isinstance(exc, (ManifestNotFoundError, FileNotFoundError)):
        return FailureKind.NOT_FOUND
    if isinstance(
        exc,
        (ManifestParseError, InvalidArchiveError, zipfile.BadZipFile, json.JSONDecodeError, ValueError),
    ):
        return FailureKind.PARSE_ERROR
    return FailureKind.IO_FAILURE


@dataclass
class PackOutcome:
    """Result of processing one pack.

    Attributes:
        name: File name of the pack archive that was processed
        kind: Behavior or resource
        status: Terminal state for this pack
        uuid: Pack UUID, when the descriptor could be read
        installed_path: Installation directory holding the pack (on success)
        archive_path: Stored archive file (ingestion only)
        classified_by: "manifest" or "path" (ingestion only)
        failure: Failure category when status is FAILED
        error: Human-readable failure message when status is FAILED
    """

    name: str
    kind: PackKind
    status: OutcomeStatus
    uuid: str | None = None
    installed_path: Path | None = None
    archive_path: Path | None = None
    classified_by: str | None = None
    failure: FailureKind | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is not OutcomeStatus.FAILED

    @classmethod
    def failed(cls, name: str, kind: PackKind, exc: BaseException, **kwargs) -> "PackOutcome":
        """Build a FAILED outcome from the exception that stopped this pack."""
        return cls(
            name=name,
            kind=kind,
            status=OutcomeStatus.FAILED,
            failure=classify_failure(exc),
            error=str(exc),
            **kwargs,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert outcome to a JSON-serializable dictionary."""
        result: dict[str, Any] = {
            "name": self.name,
            "kind": self.kind.value,
            "status": self.status.value,
            "uuid": self.uuid,
        }
        if self.installed_path is not None:
            result["installed_path"] = str(self.installed_path)
        if self.archive_path is not None:
            result["archive_path"] = str(self.archive_path)
        if self.classified_by is not None:
            result["classified_by"] = self.classified_by
        if self.failure is not None:
            result["failure"] = self.failure.value
            result["error"] = self.error
        return result


@dataclass
class BatchResult:
    """Per-pack outcomes of a best-effort batch operation."""

    outcomes: list[PackOutcome] = field(default_factory=list)

    def add(self, outcome: PackOutcome) -> PackOutcome:
        self.outcomes.append(outcome)
        return outcome

    @property
    def succeeded(self) -> list[PackOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[PackOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def complete(self) -> bool:
        """True when every pack in the batch succeeded (vacuously for empty batches)."""
        return not self.failed

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": len(self.outcomes),
            "succeeded": len(self.succeeded),
            "failed": len(self.failed),
            "packs": [o.to_dict() for o in self.outcomes],
        }


@dataclass
class IngestResult(BatchResult):
    """Outcome of ingesting one composite upload.

    The upload as a whole succeeded once the composite was extracted; the
    per-pack outcomes say how many of the packs inside made it.
    """

    upload_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["upload"] = self.upload_name
        return result
