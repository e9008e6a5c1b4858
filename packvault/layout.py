"""Filesystem layout of the game server's data volume."""

from dataclasses import dataclass
from pathlib import Path

from packvault.models import PackKind

DEFAULT_DATA_ROOT = Path("/data")


@dataclass(frozen=True)
class PackLayout:
    """Where packs are installed, archived, and where the world lives.

    Attributes:
        behavior_packs_dir: Installation root for behavior packs
        resource_packs_dir: Installation root for resource packs
        archive_root: Durable archive of uploaded pack files
        server_properties: Properties file holding level-name
        worlds_dir: Directory holding one folder per world
    """

    behavior_packs_dir: Path
    resource_packs_dir: Path
    archive_root: Path
    server_properties: Path
    worlds_dir: Path

    @classmethod
    def from_root(cls, data_root: Path = DEFAULT_DATA_ROOT) -> "PackLayout":
        """Standard layout below a single data root."""
        return cls(
            behavior_packs_dir=data_root / "behavior_packs",
            resource_packs_dir=data_root / "resource_packs",
            archive_root=data_root / "pack_archive",
            server_properties=data_root / "server.properties",
            worlds_dir=data_root / "worlds",
        )

    def install_dir(self, kind: PackKind) -> Path:
        if kind is PackKind.RESOURCE:
            return self.resource_packs_dir
        return self.behavior_packs_dir
