"""Pack manifest data model and operations.

This module provides the PackManifest dataclass and functions for reading a
pack's manifest.json either from an extracted pack directory or straight out
of a zip-formatted pack archive (.mcpack / .zip).
"""

import json
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from packvault.errors import InvalidArchiveError, ManifestNotFoundError, ManifestParseError
from packvault.models import PackKind

MANIFEST_NAME = "manifest.json"

# Module types that mark a pack as behavior or resource content.
BEHAVIOR_MODULE_TYPES = frozenset({"data", "script", "javascript", "client_data"})
RESOURCE_MODULE_TYPES = frozenset({"resources"})


def _int_list(value: Any) -> list[int]:
    if isinstance(value, list):
        return [int(v) for v in value if isinstance(v, (int, float)) and not isinstance(v, bool)]
    return []


@dataclass
class PackHeader:
    """Identity block of a pack manifest.

    Attributes:
        uuid: Pack UUID (empty string when the manifest has no header)
        version: Version as an ordered list of integers (e.g., [1, 0, 0])
        name: Display name (optional)
    """

    uuid: str = ""
    version: list[int] = field(default_factory=list)
    name: str | None = None


@dataclass
class PackModule:
    """One entry of the manifest's modules array."""

    type: str
    uuid: str | None = None
    version: list[int] = field(default_factory=list)


@dataclass
class PackManifest:
    """Parsed manifest.json.

    Attributes:
        header: Pack identity (uuid, version, name)
        modules: Declared content modules
        format_version: Manifest format version (optional)
    """

    header: PackHeader = field(default_factory=PackHeader)
    modules: list[PackModule] = field(default_factory=list)
    format_version: int | None = None

    @property
    def uuid(self) -> str:
        return self.header.uuid

    @property
    def version(self) -> list[int]:
        return self.header.version

    @property
    def pack_kind(self) -> PackKind | None:
        """Kind declared by the modules array, or None if no module type is recognized."""
        for module in self.modules:
            module_type = module.type.lower()
            if module_type in RESOURCE_MODULE_TYPES:
                return PackKind.RESOURCE
            if module_type in BEHAVIOR_MODULE_TYPES:
                return PackKind.BEHAVIOR
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert manifest to dictionary."""
        header: dict[str, Any] = {"uuid": self.header.uuid, "version": list(self.header.version)}
        if self.header.name is not None:
            header["name"] = self.header.name
        result: dict[str, Any] = {"header": header}
        if self.format_version is not None:
            result["format_version"] = self.format_version
        if self.modules:
            result["modules"] = [
                {"type": m.type, "uuid": m.uuid, "version": list(m.version)} for m in self.modules
            ]
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PackManifest":
        """Create manifest from dictionary.

        A missing or malformed header is tolerated and yields an empty UUID;
        callers decide whether an empty UUID is acceptable.
        """
        header_data = data.get("header")
        if isinstance(header_data, dict):
            uuid = header_data.get("uuid")
            name = header_data.get("name")
            header = PackHeader(
                uuid=uuid if isinstance(uuid, str) else "",
                version=_int_list(header_data.get("version")),
                name=name if isinstance(name, str) else None,
            )
        else:
            header = PackHeader()

        modules = []
        for entry in data.get("modules") or []:
            if isinstance(entry, dict) and isinstance(entry.get("type"), str):
                modules.append(
                    PackModule(
                        type=entry["type"],
                        uuid=entry.get("uuid") if isinstance(entry.get("uuid"), str) else None,
                        version=_int_list(entry.get("version")),
                    )
                )

        format_version = data.get("format_version")
        return cls(
            header=header,
            modules=modules,
            format_version=format_version if isinstance(format_version, int) else None,
        )


def parse_manifest(raw: bytes | str, source: str = MANIFEST_NAME) -> PackManifest:
    """Parse manifest.json content.

    Args:
        raw: Document bytes or text
        source: Where the document came from (used in error messages)

    Returns:
        Parsed PackManifest

    Raises:
        ManifestParseError: If the document is not valid JSON or not a JSON object
    """
    try:
        text = raw.decode("utf-8-sig") if isinstance(raw, bytes) else raw
        data = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ManifestParseError(f"Invalid JSON in {source}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestParseError(f"{source} is not a JSON object")

    try:
        return PackManifest.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ManifestParseError(f"Malformed {source}: {e}") from e


def load_manifest(pack_dir: Path) -> PackManifest:
    """Load pack manifest from an extracted pack directory.

    Raises:
        ManifestNotFoundError: If manifest.json doesn't exist
        ManifestParseError: If manifest.json cannot be decoded
    """
    manifest_path = pack_dir / MANIFEST_NAME
    if not manifest_path.is_file():
        raise ManifestNotFoundError(f"{MANIFEST_NAME} not found in {pack_dir}")

    return parse_manifest(manifest_path.read_bytes(), source=str(manifest_path))


def find_manifest_entry(archive: zipfile.ZipFile) -> zipfile.ZipInfo | None:
    """Return the manifest entry of an open pack archive.

    An entry at the archive root wins; otherwise the shallowest entry named
    manifest.json, taking archive order on ties.
    """
    best: zipfile.ZipInfo | None = None
    best_depth = 0
    for info in archive.infolist():
        if info.is_dir():
            continue
        parts = info.filename.replace("\\", "/").strip("/").split("/")
        if parts[-1] != MANIFEST_NAME:
            continue
        depth = len(parts)
        if best is None or depth < best_depth:
            best, best_depth = info, depth
            if depth == 1:
                break
    return best


def read_manifest_from_zip(archive_path: Path) -> PackManifest:
    """Read manifest.json out of a zip-formatted pack archive without extracting it.

    Raises:
        ManifestNotFoundError: If the archive has no manifest.json entry
        InvalidArchiveError: If the file is not a zip archive
        ManifestParseError: If the manifest entry cannot be decoded
    """
    try:
        with zipfile.ZipFile(archive_path) as archive:
            entry = find_manifest_entry(archive)
            if entry is None:
                raise ManifestNotFoundError(f"{MANIFEST_NAME} not found in {archive_path.name}")
            raw = archive.read(entry)
    except zipfile.BadZipFile as e:
        raise InvalidArchiveError(f"Not a zip archive: {archive_path.name}") from e

    return parse_manifest(raw, source=f"{archive_path.name}:{entry.filename}")


def read_pack_uuid(archive_path: Path) -> str:
    """Return the UUID declared by a pack archive (may be empty)."""
    return read_manifest_from_zip(archive_path).uuid


def save_manifest(manifest: PackManifest, pack_dir: Path) -> None:
    """Save pack manifest to directory (created if it doesn't exist)."""
    pack_dir.mkdir(parents=True, exist_ok=True)
    manifest_path = pack_dir / MANIFEST_NAME

    with open(manifest_path, "w") as f:
        json.dump(manifest.to_dict(), f, indent=2)
        f.write("\n")
