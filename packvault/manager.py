"""Pack manager: the operations exposed to the HTTP layer and the CLI.

This module provides the PackManager class, which wires the archive store,
installer, restoration pass and active-addon resolver onto one layout.
"""

import logging
from pathlib import Path

from packvault.active import (
    ActiveAddon,
    find_behavior_declaration,
    find_resource_declaration,
    resolve_active_addons,
)
from packvault.archive_store import PackArchiveStore
from packvault.index import list_installed_names
from packvault.ingest import ingest_upload
from packvault.installer import PackInstaller
from packvault.layout import PackLayout
from packvault.models import BatchResult, IngestResult, PackKind
from packvault.restore import restore_missing_packs
from packvault.world import resolve_world_folder

logger = logging.getLogger(__name__)


class PackManager:
    """Entry point for pack operations on one server data volume.

    Attributes:
        layout: Filesystem layout (installation roots, archive, world)
        store: Durable archive of uploaded packs
        installer: Installer targeting the installation roots
    """

    def __init__(self, layout: PackLayout):
        self.layout = layout
        self.store = PackArchiveStore(layout.archive_root)
        self.installer = PackInstaller(layout)

    def ingest_upload(self, upload_path: Path, upload_name: str | None = None) -> IngestResult:
        """Archive and install every pack in an uploaded composite archive.

        Raises:
            FileNotFoundError: If the upload doesn't exist
            InvalidArchiveError: If the upload is not a zip archive
            PackWriteError: If the archive roots cannot be created
        """
        self.store.ensure_roots()
        return ingest_upload(upload_path, self.store, self.installer, upload_name=upload_name)

    def list_installed(self) -> dict[str, list[str]]:
        """Names of the installed pack directories, per kind."""
        return {kind.value: list_installed_names(self.layout.install_dir(kind)) for kind in PackKind}

    def list_active(self) -> dict[str, list[ActiveAddon]]:
        """Declared addons of the configured world that are actually installed.

        Raises:
            FileNotFoundError: If the properties file or a declaration file is missing
            WorldPropertiesError: If level-name is missing or empty
            DeclarationParseError: If a declaration file is malformed
        """
        world_folder = resolve_world_folder(self.layout.server_properties, self.layout.worlds_dir)
        behavior_json = find_behavior_declaration(world_folder)
        resource_json = find_resource_declaration(world_folder)

        return {
            PackKind.BEHAVIOR.value: resolve_active_addons(behavior_json, self.layout.behavior_packs_dir),
            PackKind.RESOURCE.value: resolve_active_addons(resource_json, self.layout.resource_packs_dir),
        }

    def restore_missing(self) -> BatchResult:
        """Reinstall archived packs missing from the installation roots.

        Raises:
            PackWriteError: If the archive roots cannot be created
        """
        self.store.ensure_roots()
        return restore_missing_packs(self.store, self.installer)
