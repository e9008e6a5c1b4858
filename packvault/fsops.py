"""Filesystem helpers: tree merging, scratch directories and pack packaging."""

import logging
import re
import shutil
import tempfile
import zipfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from packvault.errors import PackInstallError

logger = logging.getLogger(__name__)

PACK_SUFFIXES = (".mcpack", ".zip")


def is_pack_archive(path: Path) -> bool:
    """Check whether a file name carries a pack archive suffix."""
    return path.suffix.lower() in PACK_SUFFIXES


def sanitize_name(value: str, fallback: str = "pack") -> str:
    """Convert a UUID or file stem into a filesystem-safe directory name."""
    name = re.sub(r"[^A-Za-z0-9._-]+", "_", value.strip())
    name = name.strip("._")
    return name or fallback


@contextmanager
def scratch_dir(prefix: str = "packvault-") -> Iterator[Path]:
    """Temporary directory that is removed on every exit path."""
    with tempfile.TemporaryDirectory(prefix=prefix) as tmp:
        yield Path(tmp)


def merge_tree(src: Path, dst: Path) -> None:
    """Recursively merge src into dst, preserving file modes.

    Existing files in dst are overwritten, files only present in dst are kept.

    Raises:
        PackInstallError: If any file or directory could not be copied
    """
    try:
        shutil.copytree(src, dst, dirs_exist_ok=True)
    except shutil.Error as e:
        failures = e.args[0] if e.args else []
        raise PackInstallError(f"Failed to copy {len(failures)} item(s) into {dst}: {failures}") from e
    except OSError as e:
        raise PackInstallError(f"Failed to copy {src} into {dst}: {e}") from e


def _should_exclude(path: Path, base_dir: Path) -> bool:
    """Hidden files and directories are left out of packaged packs."""
    try:
        rel_path = path.relative_to(base_dir)
    except ValueError:
        return False
    return any(part.startswith(".") or part == "__MACOSX" for part in rel_path.parts)


def package_dir(pack_dir: Path, output_path: Path) -> Path:
    """Create a zip-formatted pack archive from a loose pack directory.

    Entries are written relative to pack_dir, so manifest.json sits at the
    archive root.

    Args:
        pack_dir: Directory containing manifest.json
        output_path: Path for the output archive (.mcpack)

    Returns:
        Path to created archive
    """
    if not pack_dir.is_dir():
        raise FileNotFoundError(f"Pack directory not found: {pack_dir}")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(output_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for item in sorted(pack_dir.rglob("*")):
            if _should_exclude(item, pack_dir):
                continue
            archive.write(item, arcname=item.relative_to(pack_dir).as_posix())

    logger.debug(f"Packaged {pack_dir.name} into {output_path.name}")
    return output_path
