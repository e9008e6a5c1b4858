"""Installed-pack discovery.

Scans an installation directory and maps each installed pack's UUID to its
directory. Nothing is cached: every call reads the filesystem again, since the
installation directories can be changed or wiped underneath us.
"""

import logging
from pathlib import Path

from packvault.errors import ManifestNotFoundError, ManifestParseError
from packvault.manifest import load_manifest

logger = logging.getLogger(__name__)


def scan_installed(install_dir: Path) -> dict[str, Path]:
    """Map installed pack UUIDs to their directories.

    Subdirectories without a readable manifest.json, or whose manifest
    declares no UUID, are left out. When two directories declare the same
    UUID, the later one (in sorted name order) wins.

    Args:
        install_dir: Installation root (e.g., /data/behavior_packs)

    Returns:
        Dictionary of UUID to pack directory (empty if install_dir doesn't exist)
    """
    if not install_dir.is_dir():
        return {}

    installed: dict[str, Path] = {}
    for item in sorted(install_dir.iterdir()):
        if not item.is_dir():
            continue

        try:
            manifest = load_manifest(item)
        except ManifestNotFoundError:
            logger.debug(f"No manifest.json in {item.name}, skipping")
            continue
        except (ManifestParseError, OSError) as e:
            logger.warning(f"Could not read manifest.json in {item.name}: {e}")
            continue

        if not manifest.uuid:
            logger.warning(f"manifest.json in {item.name} declares no UUID, skipping")
            continue

        if manifest.uuid in installed:
            logger.warning(
                f"Duplicate install of {manifest.uuid}: {installed[manifest.uuid].name} "
                f"shadowed by {item.name}"
            )
        installed[manifest.uuid] = item

    return installed


def is_installed(install_dir: Path, uuid: str) -> bool:
    return uuid in scan_installed(install_dir)


def list_installed_names(install_dir: Path) -> list[str]:
    """Return the names of the directories under an installation root."""
    if not install_dir.is_dir():
        return []
    return sorted(item.name for item in install_dir.iterdir() if item.is_dir())
