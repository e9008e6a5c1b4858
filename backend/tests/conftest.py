"""
Pytest configuration and shared fixtures for backend tests.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def data_root(tmp_path: Path, monkeypatch) -> Path:
    """Point the settings at a temporary data volume and command pipe."""
    from backend.config import settings

    root = tmp_path / "data"
    root.mkdir()
    monkeypatch.setattr(settings, "data_root", str(root))
    monkeypatch.setattr(settings, "fifo_path", str(tmp_path / "command_fifo"))
    return root


@pytest.fixture
def fifo_file(data_root, tmp_path: Path) -> Path:  # noqa: ARG001
    """A plain file standing in for the server's command pipe."""
    path = tmp_path / "command_fifo"
    path.touch()
    return path


@pytest.fixture
def command_store():
    """Saved command store, emptied around each test."""
    from backend.services.pack_service import get_command_store

    store = get_command_store()
    store.clear()
    yield store
    store.clear()


@pytest.fixture
def client(data_root, command_store):  # noqa: ARG001
    """Create FastAPI test client (runs the startup restoration pass)."""
    from backend.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def world(data_root: Path) -> Path:
    """A configured world with empty declaration files."""
    (data_root / "server.properties").write_text("level-name=Bedrock level\n")
    world_dir = data_root / "worlds" / "Bedrock level"
    world_dir.mkdir(parents=True)
    (world_dir / "world_behavior_packs.json").write_text("[]")
    (world_dir / "world_resource_packs.json").write_text("[]")
    return world_dir
