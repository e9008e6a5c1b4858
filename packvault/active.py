"""Active-addon resolution.

A world declares the packs it wants active in world_behavior_packs.json and
world_resource_packs.json. A declaration does not mean the pack is installed:
each one is checked against the installed-pack index and dropped if missing.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from packvault.errors import DeclarationNotFoundError, DeclarationParseError
from packvault.index import scan_installed

logger = logging.getLogger(__name__)

BEHAVIOR_DECLARATION_NAMES = ("world_behavior_packs.json", "world_behaviour_packs.json")
RESOURCE_DECLARATION_NAME = "world_resource_packs.json"


@dataclass
class ActiveAddon:
    """One entry of a world declaration file.

    Attributes:
        pack_id: UUID of the declared pack
        version: Declared version as an ordered list of integers
    """

    pack_id: str
    version: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"pack_id": self.pack_id, "version": list(self.version)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActiveAddon":
        pack_id = data.get("pack_id")
        if not isinstance(pack_id, str) or not pack_id:
            raise ValueError(f"Declaration has no pack_id: {data!r}")
        version = data.get("version") or []
        if not isinstance(version, list):
            raise ValueError(f"Declaration version is not a list: {data!r}")
        return cls(pack_id=pack_id, version=[int(v) for v in version])


def load_declarations(declaration_path: Path) -> list[ActiveAddon]:
    """Load a world declaration file.

    Malformed entries are skipped with a warning.

    Raises:
        DeclarationNotFoundError: If the file doesn't exist
        DeclarationParseError: If the file is not a JSON array
    """
    if not declaration_path.is_file():
        raise DeclarationNotFoundError(f"{declaration_path.name} not found")

    try:
        data = json.loads(declaration_path.read_text(encoding="utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DeclarationParseError(f"Invalid JSON in {declaration_path.name}: {e}") from e

    if not isinstance(data, list):
        raise DeclarationParseError(f"{declaration_path.name} is not a JSON array")

    addons = []
    for entry in data:
        try:
            if not isinstance(entry, dict):
                raise ValueError(f"Declaration is not an object: {entry!r}")
            addons.append(ActiveAddon.from_dict(entry))
        except (TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed entry in {declaration_path.name}: {e}")
    return addons


def find_behavior_declaration(world_folder: Path) -> Path:
    """Locate the behavior declaration, accepting both spellings.

    Raises:
        DeclarationNotFoundError: If neither spelling exists
    """
    for name in BEHAVIOR_DECLARATION_NAMES:
        candidate = world_folder / name
        if candidate.is_file():
            return candidate
    raise DeclarationNotFoundError(f"{BEHAVIOR_DECLARATION_NAMES[0]} not found in {world_folder}")


def find_resource_declaration(world_folder: Path) -> Path:
    candidate = world_folder / RESOURCE_DECLARATION_NAME
    if not candidate.is_file():
        raise DeclarationNotFoundError(f"{RESOURCE_DECLARATION_NAME} not found in {world_folder}")
    return candidate


def filter_installed(addons: list[ActiveAddon], install_dir: Path) -> list[ActiveAddon]:
    """Keep the declarations whose pack is installed, preserving order."""
    installed = scan_installed(install_dir)
    active = []
    for addon in addons:
        if addon.pack_id in installed:
            active.append(addon)
        else:
            logger.info(f"Installed addon not found for pack_id: {addon.pack_id}")
    return active


def resolve_active_addons(declaration_path: Path, install_dir: Path) -> list[ActiveAddon]:
    """Load a declaration file and drop entries whose pack is not installed."""
    return filter_installed(load_declarations(declaration_path), install_dir)
