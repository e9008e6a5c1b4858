"""PackVault: add-on pack archive and restoration engine.

This module provides the core infrastructure for ingesting uploaded add-on
archives, keeping a durable UUID-keyed archive of every pack, restoring packs
missing from the installation directories, and resolving a world's active
addons against what is actually installed.
"""

from packvault.active import ActiveAddon, resolve_active_addons
from packvault.archive_store import ArchivedPack, PackArchiveStore
from packvault.errors import (
    DeclarationNotFoundError,
    DeclarationParseError,
    InvalidArchiveError,
    ManifestNotFoundError,
    ManifestParseError,
    PackInstallError,
    PackVaultError,
    PackWriteError,
    UnsafeArchiveEntryError,
    WorldPropertiesError,
)
from packvault.extraction import ExtractionReport, extract_archive
from packvault.index import list_installed_names, scan_installed
from packvault.ingest import ingest_upload
from packvault.installer import PackInstaller
from packvault.layout import PackLayout
from packvault.manager import PackManager
from packvault.manifest import PackManifest, load_manifest, read_manifest_from_zip
from packvault.models import BatchResult, IngestResult, OutcomeStatus, PackKind, PackOutcome
from packvault.restore import restore_missing_packs
from packvault.world import resolve_world_folder

__all__ = [
    # Manifest
    "PackManifest",
    "load_manifest",
    "read_manifest_from_zip",
    # Extraction
    "extract_archive",
    "ExtractionReport",
    # Archive
    "PackArchiveStore",
    "ArchivedPack",
    # Installation
    "PackInstaller",
    "scan_installed",
    "list_installed_names",
    # Batch operations
    "ingest_upload",
    "restore_missing_packs",
    "BatchResult",
    "IngestResult",
    "PackOutcome",
    "OutcomeStatus",
    # World
    "ActiveAddon",
    "resolve_active_addons",
    "resolve_world_folder",
    # Facade
    "PackLayout",
    "PackManager",
    "PackKind",
    # Errors
    "PackVaultError",
    "ManifestNotFoundError",
    "ManifestParseError",
    "InvalidArchiveError",
    "UnsafeArchiveEntryError",
    "PackWriteError",
    "PackInstallError",
    "DeclarationNotFoundError",
    "DeclarationParseError",
    "WorldPropertiesError",
]
