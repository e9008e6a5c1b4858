"""Pack installer: projects a pack archive into an installation directory.

This module provides the PackInstaller class used by both upload ingestion and
startup restoration.
"""

import logging
from pathlib import Path

from packvault.errors import (
    ManifestNotFoundError,
    ManifestParseError,
    PackInstallError,
    UnsafeArchiveEntryError,
)
from packvault.extraction import extract_archive
from packvault.fsops import merge_tree, sanitize_name, scratch_dir
from packvault.index import scan_installed
from packvault.layout import PackLayout
from packvault.manifest import MANIFEST_NAME, load_manifest
from packvault.models import PackKind

logger = logging.getLogger(__name__)


def find_pack_root(extracted: Path) -> Path | None:
    """Return the shallowest directory of an extracted archive holding manifest.json."""
    if (extracted / MANIFEST_NAME).is_file():
        return extracted
    candidates = sorted(
        (p.parent for p in extracted.rglob(MANIFEST_NAME) if p.is_file()),
        key=lambda d: (len(d.relative_to(extracted).parts), d.as_posix()),
    )
    return candidates[0] if candidates else None


def _claimed_by_other(directory: Path, uuid: str) -> bool:
    """Check whether an existing directory holds a pack with a different UUID."""
    if not directory.exists():
        return False
    if not directory.is_dir():
        return True
    try:
        return load_manifest(directory).uuid != uuid
    except ManifestNotFoundError:
        return False
    except (ManifestParseError, OSError):
        return True


class PackInstaller:
    """Installer for pack archives.

    Each install extracts the archive into a private scratch directory,
    merges the pack into its own folder under the kind's installation root,
    and removes the scratch directory whatever happens.

    Attributes:
        layout: Filesystem layout holding the installation roots
    """

    def __init__(self, layout: PackLayout):
        self.layout = layout

    def destination_for(self, install_dir: Path, preferred: str, uuid: str) -> Path:
        """Pick the folder a pack is installed into.

        A pack whose UUID is already installed is updated in place. Otherwise
        the preferred name is used unless another pack owns it, in which case
        the UUID is appended.

        Raises:
            PackInstallError: If every candidate folder belongs to another pack
        """
        if uuid:
            existing = scan_installed(install_dir).get(uuid)
            if existing is not None:
                return existing

        name = sanitize_name(preferred)
        candidates = [name]
        if uuid:
            candidates.append(f"{name}_{sanitize_name(uuid)}")

        for candidate in candidates:
            destination = install_dir / candidate
            if not _claimed_by_other(destination, uuid):
                return destination
            logger.warning(f"{destination} already holds a different pack, not merging {uuid or name} into it")

        raise PackInstallError(f"No free install folder for pack {uuid or name} in {install_dir}")

    def install_from_file(
        self, archive_path: Path, kind: PackKind, expected_uuid: str | None = None
    ) -> Path:
        """Install a pack archive.

        The pack (the shallowest folder holding manifest.json) is installed
        into a folder named after its wrapping folder, or after the archive
        when manifest.json sits at the archive root. A folder owned by a
        different UUID is never merged into.

        Args:
            archive_path: Pack archive (.mcpack / .zip)
            kind: Behavior or resource
            expected_uuid: UUID the pack must declare and that must be
                discoverable after installing

        Returns:
            Path to the installed pack directory

        Raises:
            FileNotFoundError: If archive doesn't exist
            InvalidArchiveError: If archive is not a zip file
            ManifestNotFoundError: If the archive holds no manifest.json
            ManifestParseError: If the manifest cannot be decoded
            UnsafeArchiveEntryError: If every entry was rejected as unsafe
            PackInstallError: If nothing was extracted, copying failed, the
                pack declares another UUID than expected, or it is not
                installed afterwards
        """
        install_dir = self.layout.install_dir(kind)

        with scratch_dir(prefix="pack-extract-") as tmp:
            report = extract_archive(archive_path, tmp)
            if not report.has_files:
                if report.security_violations:
                    first = report.security_violations[0]
                    raise UnsafeArchiveEntryError(first.name, tmp)
                raise PackInstallError(f"No files extracted from {archive_path.name}")

            pack_root = find_pack_root(tmp)
            if pack_root is None:
                raise ManifestNotFoundError(f"{MANIFEST_NAME} not found in {archive_path.name}")

            uuid = load_manifest(pack_root).uuid
            if expected_uuid is not None and uuid != expected_uuid:
                raise PackInstallError(
                    f"{archive_path.name} declares UUID {uuid!r}, expected {expected_uuid!r}"
                )

            preferred = archive_path.stem if pack_root == tmp else pack_root.name
            destination = self.destination_for(install_dir, preferred, uuid)
            merge_tree(pack_root, destination)

        logger.info(f"Installed {kind.value} pack {archive_path.name} into {destination}")

        if expected_uuid is None:
            return destination

        installed = scan_installed(install_dir)
        if installed.get(expected_uuid) != destination:
            raise PackInstallError(
                f"Pack {expected_uuid} from {archive_path.name} not found in {install_dir} after install"
            )
        return destination
