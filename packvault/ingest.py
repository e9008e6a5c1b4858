"""Upload ingestion: split a composite upload into packs, archive and install them.

A composite upload (.mcaddon / .zip) may carry nested pack archives anywhere in
its tree, loose pack folders, or be a single pack itself. Each pack found is
classified as behavior or resource, saved to the archive store, and installed.
One bad pack never stops its siblings.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from packvault.archive_store import PackArchiveStore
from packvault.errors import PackVaultError
from packvault.extraction import extract_archive
from packvault.fsops import is_pack_archive, package_dir, sanitize_name, scratch_dir
from packvault.installer import PackInstaller
from packvault.manifest import MANIFEST_NAME, read_manifest_from_zip
from packvault.models import IngestResult, OutcomeStatus, PackKind, PackOutcome

logger = logging.getLogger(__name__)


@dataclass
class DiscoveredPack:
    """A pack archive found inside a composite upload.

    Attributes:
        archive_path: Pack archive on disk (inside scratch space)
        rel_path: Location of the pack within the upload, used for naming and
            for path-based classification
    """

    archive_path: Path
    rel_path: str


def classify_pack(archive_path: Path, rel_path: str) -> tuple[PackKind, str]:
    """Decide whether a pack is behavior or resource content.

    The manifest's module types decide when present. Otherwise the pack's
    path within the upload is checked for "resource".

    Returns:
        Tuple of (kind, "manifest" | "path")
    """
    try:
        kind = read_manifest_from_zip(archive_path).pack_kind
    except PackVaultError as e:
        logger.debug(f"No usable manifest in {rel_path}: {e}")
        kind = None

    if kind is not None:
        return kind, "manifest"

    kind = PackKind.RESOURCE if "resource" in rel_path.lower() else PackKind.BEHAVIOR
    logger.warning(
        f"{rel_path} declares no recognizable module type, classified as {kind.value} by path"
    )
    return kind, "path"


def _find_loose_packs(root: Path) -> list[Path]:
    """Topmost directories below root that directly contain manifest.json."""
    found = []
    pending = [root]
    while pending:
        current = pending.pop()
        for child in sorted(current.iterdir()):
            if not child.is_dir():
                continue
            if (child / MANIFEST_NAME).is_file():
                found.append(child)
            else:
                pending.append(child)
    return sorted(found)


def discover_packs(extracted: Path, staging: Path, upload_path: Path, upload_name: str) -> list[DiscoveredPack]:
    """Find the packs carried by an extracted composite upload.

    Args:
        extracted: Directory the upload was extracted into
        staging: Scratch directory for archives created here
        upload_path: The uploaded file itself
        upload_name: Original file name of the upload

    Returns:
        Discovered packs in a stable order
    """
    if (extracted / MANIFEST_NAME).is_file():
        # The upload is a single pack.
        single = staging / f"{sanitize_name(Path(upload_name).stem)}.mcpack"
        shutil.copyfile(upload_path, single)
        return [DiscoveredPack(archive_path=single, rel_path=upload_name)]

    packs = [
        DiscoveredPack(archive_path=path, rel_path=path.relative_to(extracted).as_posix())
        for path in sorted(extracted.rglob("*"))
        if path.is_file() and is_pack_archive(path)
    ]

    used_names = {p.archive_path.name for p in packs}
    for folder in _find_loose_packs(extracted):
        name = f"{sanitize_name(folder.name)}.mcpack"
        counter = 1
        while name in used_names:
            counter += 1
            name = f"{sanitize_name(folder.name)}_{counter}.mcpack"
        used_names.add(name)
        archive_path = package_dir(folder, staging / name)
        packs.append(
            DiscoveredPack(archive_path=archive_path, rel_path=folder.relative_to(extracted).as_posix())
        )

    return packs


def _ingest_one(pack: DiscoveredPack, store: PackArchiveStore, installer: PackInstaller) -> PackOutcome:
    kind, classified_by = classify_pack(pack.archive_path, pack.rel_path)
    name = pack.archive_path.name
    uuid = None
    archive_path = None
    try:
        archived = store.save(pack.archive_path, kind)
        uuid = archived.uuid
        archive_path = archived.archive_path
        installed_path = installer.install_from_file(pack.archive_path, kind, expected_uuid=uuid)
    except Exception as e:
        logger.warning(f"Failed to ingest {kind.value} pack {pack.rel_path}: {e}")
        return PackOutcome.failed(
            name, kind, e, uuid=uuid, archive_path=archive_path, classified_by=classified_by
        )

    return PackOutcome(
        name=name,
        kind=kind,
        status=OutcomeStatus.INSTALLED,
        uuid=uuid,
        installed_path=installed_path,
        archive_path=archive_path,
        classified_by=classified_by,
    )


def ingest_upload(
    upload_path: Path,
    store: PackArchiveStore,
    installer: PackInstaller,
    upload_name: str | None = None,
) -> IngestResult:
    """Archive and install every pack carried by a composite upload.

    Args:
        upload_path: Uploaded file on disk
        store: Archive store receiving durable copies
        installer: Installer targeting the live installation roots
        upload_name: Original file name (defaults to upload_path's name)

    Returns:
        IngestResult with one outcome per discovered pack

    Raises:
        FileNotFoundError: If upload_path doesn't exist
        InvalidArchiveError: If the upload is not a zip archive
    """
    upload_name = upload_name or upload_path.name
    result = IngestResult(upload_name=upload_name)

    with scratch_dir(prefix="upload-extract-") as extracted, scratch_dir(prefix="upload-packs-") as staging:
        extract_archive(upload_path, extracted)
        packs = discover_packs(extracted, staging, upload_path, upload_name)
        if not packs:
            logger.warning(f"No packs found in upload {upload_name}")

        for pack in packs:
            result.add(_ingest_one(pack, store, installer))

    logger.info(
        f"Ingested {upload_name}: {len(result.succeeded)} of {len(result.outcomes)} pack(s) installed"
    )
    return result
