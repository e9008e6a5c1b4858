"""Durable side-store of uploaded pack archives.

Every uploaded pack file is copied byte-for-byte into its own directory
under the kind's archive root, named from the pack UUID:

    <archive_root>/behavior_packs/<uuid>/<original file name>
    <archive_root>/resource_packs/<uuid>/<original file name>

The installation directories can be wiped at any time; this store is what the
restoration pass replays to bring them back.
"""

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

from packvault.errors import InvalidArchiveError, ManifestNotFoundError, ManifestParseError, PackWriteError
from packvault.fsops import is_pack_archive, sanitize_name
from packvault.manifest import read_pack_uuid
from packvault.models import PackKind

logger = logging.getLogger(__name__)

ARCHIVE_SUBDIRS = {
    PackKind.BEHAVIOR: "behavior_packs",
    PackKind.RESOURCE: "resource_packs",
}


@dataclass
class ArchivedPack:
    """A pack stored in the archive.

    Attributes:
        kind: Behavior or resource
        key: Directory name under the kind root (sanitized UUID or file stem)
        directory: The pack's archive directory
        archive_path: The stored pack file
        uuid: UUID read from the descriptor at save time (None on enumerate)
    """

    kind: PackKind
    key: str
    directory: Path
    archive_path: Path
    uuid: str | None = None


class PackArchiveStore:
    """Archive of uploaded packs keyed by UUID.

    Attributes:
        archive_root: Base directory; each pack kind gets its own subdirectory
    """

    def __init__(self, archive_root: Path):
        self.archive_root = archive_root

    def root_for(self, kind: PackKind) -> Path:
        return self.archive_root / ARCHIVE_SUBDIRS[kind]

    def ensure_roots(self) -> None:
        """Create the per-kind archive roots.

        Raises:
            PackWriteError: If a root directory cannot be created
        """
        for kind in PackKind:
            root = self.root_for(kind)
            try:
                root.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise PackWriteError(f"Cannot create archive root {root}: {e}") from e

    def key_for(self, pack_file: Path) -> tuple[str, str | None]:
        """Return (directory key, uuid) for a pack file.

        Falls back to the file's base name when the descriptor cannot be read
        or declares an empty UUID.
        """
        try:
            uuid = read_pack_uuid(pack_file)
        except (ManifestNotFoundError, ManifestParseError, InvalidArchiveError) as e:
            logger.warning(f"Could not read UUID from {pack_file.name}, keying by file name: {e}")
            return sanitize_name(pack_file.stem), None

        if not uuid:
            logger.warning(f"{pack_file.name} declares no UUID, keying by file name")
            return sanitize_name(pack_file.stem), None
        return sanitize_name(uuid), uuid

    def save(self, pack_file: Path, kind: PackKind) -> ArchivedPack:
        """Store a copy of an incoming pack file.

        Re-saving a pack with the same UUID replaces the previously stored
        file; the pack's directory is left holding only the newest upload.
        A stale file that cannot be removed is logged, the save still succeeds.

        Args:
            pack_file: Uploaded pack archive
            kind: Behavior or resource

        Returns:
            ArchivedPack describing the stored copy

        Raises:
            FileNotFoundError: If pack_file doesn't exist
            PackWriteError: If the directory or file cannot be written
        """
        if not pack_file.is_file():
            raise FileNotFoundError(f"Pack file not found: {pack_file}")

        key, uuid = self.key_for(pack_file)
        pack_dir = self.root_for(kind) / key
        try:
            pack_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PackWriteError(f"Cannot create archive directory {pack_dir}: {e}") from e

        stored = pack_dir / pack_file.name
        fd, tmp_name = tempfile.mkstemp(dir=pack_dir, prefix=".incoming-")
        os.close(fd)
        tmp_path = Path(tmp_name)
        try:
            shutil.copyfile(pack_file, tmp_path)
            os.replace(tmp_path, stored)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise PackWriteError(f"Failed to archive {pack_file.name}: {e}") from e

        for other in pack_dir.iterdir():
            if other != stored and other.is_file() and is_pack_archive(other):
                logger.info(f"Replacing previously archived {other.name} for {key}")
                try:
                    other.unlink()
                except OSError as e:
                    logger.warning(f"Could not remove stale archive {other}: {e}")

        logger.info(f"Archived {kind.value} pack {pack_file.name} as {key}")
        return ArchivedPack(kind=kind, key=key, directory=pack_dir, archive_path=stored, uuid=uuid)

    def enumerate(self, kind: PackKind) -> list[ArchivedPack]:
        """List archived packs of one kind.

        Each pack directory contributes its first pack archive file (by
        name); directories without one are skipped.
        """
        root = self.root_for(kind)
        if not root.is_dir():
            return []

        packs = []
        for pack_dir in sorted(root.iterdir()):
            if not pack_dir.is_dir():
                continue
            archive_files = sorted(
                f for f in pack_dir.iterdir() if f.is_file() and is_pack_archive(f)
            )
            if not archive_files:
                logger.debug(f"No pack file in archive directory {pack_dir}, skipping")
                continue
            packs.append(
                ArchivedPack(kind=kind, key=pack_dir.name, directory=pack_dir, archive_path=archive_files[0])
            )
        return packs
