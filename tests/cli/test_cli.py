"""Tests for the packvault command line interface."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from packvault.cli import build_parser, main


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    return tmp_path / "data"


class TestParser:
    """Test argument parsing."""

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_serve_defaults(self):
        args = build_parser().parse_args(["serve"])
        assert args.host == "0.0.0.0"
        assert args.port == 8080

    def test_data_root_from_environment(self, monkeypatch):
        monkeypatch.setenv("PACKVAULT_DATA_ROOT", "/srv/bedrock")
        args = build_parser().parse_args(["list"])
        assert args.data_root == "/srv/bedrock"

    def test_data_root_after_subcommand(self, monkeypatch):
        monkeypatch.setenv("PACKVAULT_DATA_ROOT", "/srv/bedrock")
        args = build_parser().parse_args(["serve", "--data-root", "/x", "--port", "9000"])
        assert args.data_root == "/x"
        assert args.port == 9000

    def test_data_root_before_subcommand_kept(self):
        args = build_parser().parse_args(["--data-root", "/y", "list"])
        assert args.data_root == "/y"


class TestCommands:
    """Test subcommands end to end."""

    def test_ingest_then_list(self, data_root, make_pack, make_composite, capsys):
        upload = make_composite({"bp.mcpack": make_pack("bp.mcpack", uuid="A", module_type="data", folder="BP")})

        assert main(["--data-root", str(data_root), "ingest", str(upload)]) == 0
        ingested = json.loads(capsys.readouterr().out)
        assert ingested["succeeded"] == 1
        assert ingested["packs"][0]["uuid"] == "A"

        assert main(["--data-root", str(data_root), "list"]) == 0
        assert json.loads(capsys.readouterr().out) == {"behavior": ["BP"], "resource": []}

    def test_ingest_partial_failure_exit_code(self, data_root, make_pack, make_composite, capsys):
        upload = make_composite(
            {"bad.mcpack": b"not a zip", "good.mcpack": make_pack("good.mcpack", uuid="G", module_type="data")}
        )

        assert main(["--data-root", str(data_root), "ingest", str(upload)]) == 2
        assert json.loads(capsys.readouterr().out)["failed"] == 1

    def test_ingest_invalid_upload(self, data_root, tmp_path, capsys):
        bogus = tmp_path / "bogus.mcaddon"
        bogus.write_text("nope")

        assert main(["--data-root", str(data_root), "ingest", str(bogus)]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_restore(self, data_root, make_pack, make_composite, capsys):
        upload = make_composite({"bp.mcpack": make_pack("bp.mcpack", uuid="A", module_type="data", folder="BP")})
        main(["--data-root", str(data_root), "ingest", str(upload)])
        capsys.readouterr()

        assert main(["--data-root", str(data_root), "restore"]) == 0
        result = json.loads(capsys.readouterr().out)
        assert [p["status"] for p in result["packs"]] == ["already_present"]

    def test_active_without_world(self, data_root, capsys):
        assert main(["--data-root", str(data_root), "active"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_serve_runs_uvicorn(self, data_root, monkeypatch):
        monkeypatch.setenv("PACKVAULT_DATA_ROOT", "/data")
        with patch("uvicorn.run") as run:
            assert main(["--data-root", str(data_root), "serve", "--port", "9000"]) == 0

        run.assert_called_once_with("backend.main:app", host="0.0.0.0", port=9000, log_level="info")
        assert os.environ["PACKVAULT_DATA_ROOT"] == str(data_root)

    def test_restore_unwritable_data_root(self, tmp_path, capsys):
        """Test that an archive root that cannot be created exits 1 with an error."""
        blocker = tmp_path / "blocker"
        blocker.write_text("file")

        assert main(["restore", "--data-root", str(blocker / "data")]) == 1
        captured = capsys.readouterr()
        assert "Error:" in captured.err
        assert captured.out == ""

    def test_commands_accept_data_root_last(self, data_root, make_pack, capsys):
        """Test that --data-root is accepted after the subcommand name."""
        pack = make_pack("solo.mcpack", uuid="S", module_type="data")

        assert main(["ingest", str(pack), "--data-root", str(data_root)]) == 0
        capsys.readouterr()
        assert main(["list", "--data-root", str(data_root)]) == 0
        assert json.loads(capsys.readouterr().out) == {"behavior": ["solo"], "resource": []}
