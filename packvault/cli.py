"""
PackVault CLI - manage add-on packs on a game server data volume.

Usage:
    packvault restore [--data-root /data]
        Reinstalls archived packs missing from the installation directories.

    packvault list [--data-root /data]
        Lists installed behavior and resource pack directories.

    packvault active [--data-root /data]
        Lists the world's declared addons that are actually installed.

    packvault ingest addon.mcaddon [--data-root /data]
        Archives and installs every pack in an add-on archive.

    packvault serve [--host 0.0.0.0] [--port 8080] [--data-root /data]
        Runs the HTTP sidecar.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from packvault.errors import PackVaultError
from packvault.layout import DEFAULT_DATA_ROOT, PackLayout
from packvault.manager import PackManager

logger = logging.getLogger(__name__)


def _manager(args: argparse.Namespace) -> PackManager:
    return PackManager(PackLayout.from_root(Path(args.data_root)))


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2))


def cmd_restore(args: argparse.Namespace) -> int:
    try:
        result = _manager(args).restore_missing()
    except PackVaultError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _print_json(result.to_dict())
    return 0 if result.complete else 2


def cmd_list(args: argparse.Namespace) -> int:
    _print_json(_manager(args).list_installed())
    return 0


def cmd_active(args: argparse.Namespace) -> int:
    try:
        active = _manager(args).list_active()
    except (FileNotFoundError, PackVaultError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _print_json({kind: [addon.to_dict() for addon in addons] for kind, addons in active.items()})
    return 0


def cmd_ingest(args: argparse.Namespace) -> int:
    upload = Path(args.file)
    try:
        result = _manager(args).ingest_upload(upload)
    except (FileNotFoundError, PackVaultError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _print_json(result.to_dict())
    return 0 if result.complete else 2


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    os.environ["PACKVAULT_DATA_ROOT"] = args.data_root
    uvicorn.run("backend.main:app", host=args.host, port=args.port, log_level="info")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="packvault",
        description="PackVault - add-on pack archive and restoration for game servers",
    )
    parser.add_argument(
        "--data-root",
        type=str,
        default=os.environ.get("PACKVAULT_DATA_ROOT", str(DEFAULT_DATA_ROOT)),
        help="Server data volume holding pack directories, archive and worlds",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    # Lets --data-root follow the subcommand too; SUPPRESS keeps the global value otherwise
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--data-root", type=str, default=argparse.SUPPRESS, help="Server data volume")

    subparsers = parser.add_subparsers(dest="command", required=True)

    restore_parser = subparsers.add_parser(
        "restore", parents=[common], help="Reinstall archived packs that are missing"
    )
    restore_parser.set_defaults(func=cmd_restore)

    list_parser = subparsers.add_parser("list", parents=[common], help="List installed pack directories")
    list_parser.set_defaults(func=cmd_list)

    active_parser = subparsers.add_parser(
        "active", parents=[common], help="List installed addons active in the world"
    )
    active_parser.set_defaults(func=cmd_active)

    ingest_parser = subparsers.add_parser(
        "ingest", parents=[common], help="Archive and install an add-on archive"
    )
    ingest_parser.add_argument("file", type=str, help="Path to .mcaddon / .mcpack / .zip file")
    ingest_parser.set_defaults(func=cmd_ingest)

    serve_parser = subparsers.add_parser("serve", parents=[common], help="Run the HTTP sidecar")
    serve_parser.add_argument("--host", type=str, default="0.0.0.0", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8080, help="Bind port")
    serve_parser.set_defaults(func=cmd_serve)

    return parser



def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
