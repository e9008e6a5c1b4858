"""Tests for active-addon resolution."""

import json
from pathlib import Path

import pytest

from packvault.active import (
    ActiveAddon,
    filter_installed,
    find_behavior_declaration,
    find_resource_declaration,
    load_declarations,
    resolve_active_addons,
)
from packvault.errors import DeclarationNotFoundError, DeclarationParseError


def _install(root: Path, name: str, uuid: str) -> None:
    pack_dir = root / name
    pack_dir.mkdir(parents=True)
    (pack_dir / "manifest.json").write_text(json.dumps({"header": {"uuid": uuid, "version": [1, 0, 0]}}))


class TestLoadDeclarations:
    """Test load_declarations function."""

    def test_loads_entries(self, tmp_path: Path):
        path = tmp_path / "world_behavior_packs.json"
        path.write_text(json.dumps([{"pack_id": "A", "version": [1, 0, 0]}, {"pack_id": "B", "version": [2, 1, 0]}]))

        assert load_declarations(path) == [ActiveAddon("A", [1, 0, 0]), ActiveAddon("B", [2, 1, 0])]

    def test_skips_malformed_entries(self, tmp_path: Path):
        path = tmp_path / "world_behavior_packs.json"
        path.write_text(json.dumps([{"version": [1]}, "junk", {"pack_id": "A", "version": "1.0"}, {"pack_id": "B"}]))

        assert load_declarations(path) == [ActiveAddon("B", [])]

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(DeclarationNotFoundError):
            load_declarations(tmp_path / "world_behavior_packs.json")

    @pytest.mark.parametrize("content", ["{broken", '{"pack_id": "A"}'])
    def test_invalid_documents(self, tmp_path: Path, content):
        path = tmp_path / "world_resource_packs.json"
        path.write_text(content)

        with pytest.raises(DeclarationParseError):
            load_declarations(path)


class TestFindDeclarations:
    """Test declaration file lookup."""

    def test_british_spelling_accepted(self, tmp_path: Path):
        (tmp_path / "world_behaviour_packs.json").write_text("[]")
        assert find_behavior_declaration(tmp_path) == tmp_path / "world_behaviour_packs.json"

    def test_american_spelling_preferred(self, tmp_path: Path):
        (tmp_path / "world_behaviour_packs.json").write_text("[]")
        (tmp_path / "world_behavior_packs.json").write_text("[]")
        assert find_behavior_declaration(tmp_path) == tmp_path / "world_behavior_packs.json"

    def test_neither_spelling(self, tmp_path: Path):
        with pytest.raises(DeclarationNotFoundError):
            find_behavior_declaration(tmp_path)

    def test_resource_declaration_missing(self, tmp_path: Path):
        with pytest.raises(DeclarationNotFoundError):
            find_resource_declaration(tmp_path)


class TestFilterInstalled:
    """Test filter_installed and resolve_active_addons."""

    def test_keeps_installed_in_declared_order(self, tmp_path: Path):
        """Test that uninstalled declarations are dropped and order is kept."""
        install_dir = tmp_path / "behavior_packs"
        _install(install_dir, "first", "A")
        _install(install_dir, "third", "C")
        addons = [ActiveAddon("C", [1]), ActiveAddon("B", [1]), ActiveAddon("A", [1])]

        assert filter_installed(addons, install_dir) == [ActiveAddon("C", [1]), ActiveAddon("A", [1])]

    def test_nothing_installed(self, tmp_path: Path):
        assert filter_installed([ActiveAddon("A")], tmp_path / "missing") == []

    def test_resolve_active_addons(self, tmp_path: Path):
        install_dir = tmp_path / "resource_packs"
        _install(install_dir, "tex", "R")
        declaration = tmp_path / "world_resource_packs.json"
        declaration.write_text(json.dumps([{"pack_id": "R", "version": [1, 0, 0]}, {"pack_id": "gone", "version": [1]}]))

        assert resolve_active_addons(declaration, install_dir) == [ActiveAddon("R", [1, 0, 0])]
