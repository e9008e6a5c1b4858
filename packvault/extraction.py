"""Zip extraction for pack archives.

Extraction is best-effort per entry: an entry that would escape the target
directory, or that fails to write, is logged and skipped, and the remaining
entries are still extracted. The returned ExtractionReport says what happened.
"""

import logging
import os
import shutil
import zipfile
from dataclasses import dataclass, field
from pathlib import Path

from packvault.errors import InvalidArchiveError, UnsafeArchiveEntryError
from packvault.models import FailureKind

logger = logging.getLogger(__name__)


@dataclass
class SkippedEntry:
    """An archive entry that was not extracted."""

    name: str
    failure: FailureKind
    reason: str


@dataclass
class ExtractionReport:
    """Result of extracting one archive.

    Attributes:
        archive_path: Archive that was extracted
        target_dir: Directory entries were extracted into
        extracted: Names of file entries written
        skipped: Entries rejected or failed
    """

    archive_path: Path
    target_dir: Path
    extracted: list[str] = field(default_factory=list)
    skipped: list[SkippedEntry] = field(default_factory=list)

    @property
    def has_files(self) -> bool:
        return bool(self.extracted)

    @property
    def security_violations(self) -> list[SkippedEntry]:
        return [s for s in self.skipped if s.failure is FailureKind.SECURITY_VIOLATION]


def resolve_entry_path(target_dir: Path, entry_name: str) -> Path:
    """Canonicalize the destination of an archive entry.

    Args:
        target_dir: Extraction root (must already be resolved)
        entry_name: Name of the entry inside the archive

    Returns:
        Absolute destination path inside target_dir

    Raises:
        UnsafeArchiveEntryError: If the entry resolves outside target_dir
    """
    normalized = entry_name.replace("\\", "/")
    destination = (target_dir / normalized).resolve()
    if destination != target_dir and target_dir not in destination.parents:
        raise UnsafeArchiveEntryError(entry_name, target_dir)
    return destination


def _entry_mode(info: zipfile.ZipInfo) -> int:
    """Permission bits stored in the entry's external attributes (0 if none)."""
    return (info.external_attr >> 16) & 0o777


def extract_archive(archive_path: Path, target_dir: Path) -> ExtractionReport:
    """Extract a zip archive into target_dir, preserving structure and file modes.

    Args:
        archive_path: Zip-formatted archive (.zip, .mcpack, .mcaddon)
        target_dir: Destination directory (created if needed)

    Returns:
        ExtractionReport listing extracted and skipped entries

    Raises:
        FileNotFoundError: If archive_path doesn't exist
        InvalidArchiveError: If archive_path is not a zip archive
    """
    if not archive_path.exists():
        raise FileNotFoundError(f"Archive not found: {archive_path}")

    target_dir.mkdir(parents=True, exist_ok=True)
    root = target_dir.resolve()
    report = ExtractionReport(archive_path=archive_path, target_dir=target_dir)

    try:
        archive = zipfile.ZipFile(archive_path)
    except zipfile.BadZipFile as e:
        raise InvalidArchiveError(f"Not a zip archive: {archive_path.name}") from e

    with archive:
        for info in archive.infolist():
            try:
                destination = resolve_entry_path(root, info.filename)
            except UnsafeArchiveEntryError as e:
                logger.warning(f"Skipping entry in {archive_path.name}: {e}")
                report.skipped.append(
                    SkippedEntry(info.filename, FailureKind.SECURITY_VIOLATION, str(e))
                )
                continue

            if info.is_dir():
                try:
                    destination.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    logger.warning(f"Could not create directory {destination}: {e}")
                    report.skipped.append(SkippedEntry(info.filename, FailureKind.IO_FAILURE, str(e)))
                continue

            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                with archive.open(info) as src, open(destination, "wb") as dst:
                    shutil.copyfileobj(src, dst)
                mode = _entry_mode(info)
                if mode:
                    os.chmod(destination, mode)
            except (OSError, zipfile.BadZipFile) as e:
                logger.warning(f"Failed to extract {info.filename} from {archive_path.name}: {e}")
                report.skipped.append(SkippedEntry(info.filename, FailureKind.IO_FAILURE, str(e)))
                continue

            report.extracted.append(info.filename)

    logger.debug(
        f"Extracted {len(report.extracted)} entries from {archive_path.name} "
        f"({len(report.skipped)} skipped)"
    )
    return report
