"""Root conftest.py: local source path priority and shared pack fixtures."""
import json
import os
import sys
import zipfile
from pathlib import Path

import pytest

# Insert the project root at the beginning of sys.path so that our local
# packvault/ and backend/ directories take precedence over an installed copy.
_project_root = os.path.dirname(os.path.abspath(__file__))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

# Rate limiting is disabled for every test session.
os.environ.setdefault("PACKVAULT_RATE_LIMIT_ENABLED", "false")


def manifest_json(uuid: str | None, version=(1, 0, 0), module_type: str | None = None) -> bytes:
    """Build manifest.json content; uuid=None omits the header entirely."""
    data: dict = {"format_version": 2}
    if uuid is not None:
        data["header"] = {"name": f"pack {uuid}", "uuid": uuid, "version": list(version)}
    if module_type is not None:
        data["modules"] = [{"type": module_type, "uuid": f"{uuid}-module", "version": list(version)}]
    return json.dumps(data).encode()


def write_zip(path: Path, entries: dict[str, bytes]) -> Path:
    """Write a zip archive from a mapping of entry name to content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return path


@pytest.fixture
def make_pack(tmp_path):
    """Factory creating .mcpack files.

    make_pack("a.mcpack", uuid="X") writes manifest.json at the archive root;
    folder="A" wraps the pack in a top-level folder instead.
    """

    def _make(
        name: str = "pack.mcpack",
        uuid: str | None = "11111111-1111-1111-1111-111111111111",
        version=(1, 0, 0),
        module_type: str | None = None,
        folder: str | None = None,
        directory: Path | None = None,
        extra: dict[str, bytes] | None = None,
    ) -> Path:
        prefix = f"{folder}/" if folder else ""
        entries = {f"{prefix}manifest.json": manifest_json(uuid, version, module_type)}
        entries[f"{prefix}pack_icon.png"] = b"\x89PNG fake icon"
        for entry_name, content in (extra or {}).items():
            entries[f"{prefix}{entry_name}"] = content
        return write_zip((directory or tmp_path / "src") / name, entries)

    return _make


@pytest.fixture
def make_composite(tmp_path):
    """Factory creating composite uploads from {entry name: pack path or bytes}."""

    def _make(entries: dict, name: str = "addon.mcaddon") -> Path:
        resolved = {
            entry: content.read_bytes() if isinstance(content, Path) else content
            for entry, content in entries.items()
        }
        return write_zip(tmp_path / "uploads" / name, resolved)

    return _make


@pytest.fixture
def layout(tmp_path):
    """PackLayout below a temporary data root."""
    from packvault.layout import PackLayout

    return PackLayout.from_root(tmp_path / "data")


@pytest.fixture
def scratch_root(tmp_path, monkeypatch) -> Path:
    """Point tempfile at a private directory so leftover scratch dirs can be detected."""
    import tempfile

    root = tmp_path / "scratch"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root
