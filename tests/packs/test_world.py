"""Tests for world folder resolution."""

from pathlib import Path

import pytest

from packvault.errors import WorldPropertiesError
from packvault.world import parse_properties, read_level_name, resolve_world_folder


class TestParseProperties:
    """Test parse_properties function."""

    def test_trims_and_skips_comments(self):
        text = "# Server settings\n! legacy comment\n\nserver-name = Dedicated \nlevel-name=Bedrock level\n"
        assert parse_properties(text) == {"server-name": "Dedicated", "level-name": "Bedrock level"}

    def test_value_may_contain_equals(self):
        assert parse_properties("motd=a=b") == {"motd": "a=b"}

    def test_lines_without_equals_ignored(self):
        assert parse_properties("garbage line\nkey=value") == {"key": "value"}


class TestResolveWorldFolder:
    """Test read_level_name and resolve_world_folder."""

    def test_level_name_with_whitespace(self, tmp_path: Path):
        """Test that surrounding whitespace and comments are ignored."""
        props = tmp_path / "server.properties"
        props.write_text("# comment\nlevel-name =  MyWorld  \n")

        assert resolve_world_folder(props, tmp_path / "worlds") == tmp_path / "worlds" / "MyWorld"

    def test_missing_properties_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            read_level_name(tmp_path / "server.properties")

    def test_missing_level_name(self, tmp_path: Path):
        props = tmp_path / "server.properties"
        props.write_text("server-name=x\n")

        with pytest.raises(WorldPropertiesError, match="not found"):
            read_level_name(props)

    def test_empty_level_name(self, tmp_path: Path):
        props = tmp_path / "server.properties"
        props.write_text("level-name=\n")

        with pytest.raises(WorldPropertiesError, match="empty"):
            read_level_name(props)
