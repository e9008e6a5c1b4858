"""Startup reconciliation of archived packs against installed packs.

For every archived pack, the UUID is re-read from the stored file and looked
up in the live installation directory; missing packs are reinstalled from the
archive. The pass is idempotent and best-effort: a pack that fails to restore
is logged and reported, and the next startup retries it.
"""

import logging
from pathlib import Path

from packvault.archive_store import ArchivedPack, PackArchiveStore
from packvault.errors import PackInstallError
from packvault.fsops import sanitize_name
from packvault.index import scan_installed
from packvault.installer import PackInstaller
from packvault.manifest import read_pack_uuid
from packvault.models import BatchResult, OutcomeStatus, PackKind, PackOutcome

logger = logging.getLogger(__name__)


def _restore_one(
    pack: ArchivedPack, installer: PackInstaller, installed: dict[str, Path]
) -> PackOutcome:
    name = pack.archive_path.name
    uuid = read_pack_uuid(pack.archive_path)
    if not uuid:
        raise PackInstallError(f"Archived pack {name} declares no UUID, cannot verify install")

    if sanitize_name(uuid) != pack.key:
        logger.warning(f"Archived pack {pack.key}/{name} declares UUID {uuid}; using the declared UUID")

    if uuid in installed:
        logger.info(f"{pack.kind.value} pack {uuid} already installed at {installed[uuid]}")
        return PackOutcome(
            name=name,
            kind=pack.kind,
            status=OutcomeStatus.ALREADY_PRESENT,
            uuid=uuid,
            installed_path=installed[uuid],
        )

    logger.info(f"{pack.kind.value} pack {uuid} missing, restoring from {pack.archive_path}")
    path = installer.install_from_file(pack.archive_path, pack.kind, expected_uuid=uuid)
    installed[uuid] = path
    return PackOutcome(
        name=name,
        kind=pack.kind,
        status=OutcomeStatus.RESTORED,
        uuid=uuid,
        installed_path=path,
    )


def restore_missing_packs(store: PackArchiveStore, installer: PackInstaller) -> BatchResult:
    """Reinstall every archived pack that is missing from its installation directory.

    Args:
        store: Archive to replay
        installer: Installer targeting the live installation roots

    Returns:
        BatchResult with one outcome per archived pack
    """
    result = BatchResult()

    for kind in PackKind:
        archived = store.enumerate(kind)
        if not archived:
            continue

        installed = scan_installed(installer.layout.install_dir(kind))
        for pack in archived:
            try:
                result.add(_restore_one(pack, installer, installed))
            except Exception as e:
                logger.warning(f"Failed to restore {kind.value} pack {pack.key}: {e}")
                result.add(PackOutcome.failed(pack.archive_path.name, kind, e))

    restored = sum(1 for o in result.outcomes if o.status is OutcomeStatus.RESTORED)
    logger.info(
        f"Restoration pass finished: {restored} restored, "
        f"{len(result.failed)} failed, {len(result.outcomes)} archived"
    )
    return result
