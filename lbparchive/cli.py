"""Command line entry point: download a level and write it as a save backup."""

from __future__ import annotations

import argparse
import asyncio
import hashlib
import sqlite3
import sys
from pathlib import Path
from typing import Optional, Sequence

import aiohttp

from .config import Config, read_config
from .db import DatabaseError, get_slot_info
from .icon import make_icon
from .pfd import make_pfd
from .resource_dl import download_level
from .resource_parse import BinaryMethod, ResrcData, Sha1Descriptor
from .save_archive import make_savearchive
from .sfo import make_sfo
from .slot_list import make_slotlist
from .versions import GameVersion

_VERSION = "2.5.0"
_MAX_PARALLEL_LIMIT = 10


def _warn(message: str) -> None:
    print(f"WARNING: {message}", file=sys.stderr)


async def dl_as_backup(level_id: int, config: Config, force_lbp3: bool) -> Path:
    """Download a level with all its resources and write a save backup; return its directory."""
    slot_info = get_slot_info(level_id, config.database_path)

    print("Level found!")
    print(f"Name: {slot_info.name}")
    print(f"Creator: {slot_info.np_handle}")
    print(f"Game: {slot_info.game.short_title}")

    max_parallel = config.max_parallel_downloads
    if max_parallel > _MAX_PARALLEL_LIMIT:
        _warn(f"max_parallel_downloads is too high, reverting to {_MAX_PARALLEL_LIMIT}")
        max_parallel = _MAX_PARALLEL_LIMIT
    elif max_parallel == 0:
        raise ValueError("max_parallel_downloads cannot be set to zero")

    print("Downloading resources", end="", flush=True)

    icon_sha1 = slot_info.icon.sha1 if isinstance(slot_info.icon, Sha1Descriptor) else None

    result = await download_level(
        slot_info.root_level, icon_sha1, config.download_server, max_parallel
    )
    print()

    resources = dict(result.resources)
    root_data = resources.get(bytes(slot_info.root_level))
    if root_data is None:
        raise RuntimeError("rootLevel is missing from the archive, rip")

    print("Done!")
    print(f"{result.success_count} resources downloaded, {result.error_count} failed")

    root = ResrcData.parse(root_data, parse_texture=False)
    if not isinstance(root.method, BinaryMethod):
        raise RuntimeError("rootLevel uses non-binary serialization method, is this corrupted?")

    revision = root.method.revision
    game_version = revision.game_version
    if force_lbp3:
        if game_version is not GameVersion.LBP3:
            _warn("Writing LBP3 backup")
            game_version = GameVersion.LBP3
            revision = game_version.latest_revision
    elif slot_info.game is not game_version:
        _warn(
            f"This is a {slot_info.game.short_title} level "
            f"in {game_version.short_title} format"
        )
        if config.fix_backup_version:
            _warn(f"Writing {game_version.short_title} backup")
        else:
            _warn(
                f"Writing {game_version.short_title} backup anyways, "
                "you should backport this level!"
            )
            game_version = slot_info.game
            revision = game_version.latest_revision

    slot_id = f"{level_id & 0xFFFFFFFF:08X}"
    kind = "ADVLBP3AAZ" if slot_info.is_adventure_planet else "LEVEL"
    bkp_name = f"{game_version.title_id}{kind}{slot_id}"
    bkp_path = Path(config.backup_directory) / bkp_name
    bkp_path.mkdir(parents=True, exist_ok=True)

    slt = make_slotlist(revision, slot_info)
    slt_hash = hashlib.sha1(slt).digest()
    resources[slt_hash] = slt

    make_icon(bkp_path, icon_sha1, resources)
    make_savearchive(revision, slt_hash, resources, bkp_path)
    sfo = make_sfo(slot_info, bkp_name, bkp_path, game_version)
    make_pfd(4 if game_version is GameVersion.LBP3 else 3, sfo, bkp_path)

    print(f"Backup written to {bkp_name}")
    return bkp_path


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lbparchive")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_VERSION}")
    commands = parser.add_subparsers(dest="command", required=True)
    bkp = commands.add_parser("bkp", help="Download level and save as level backup")
    bkp.add_argument("level_id", type=int, help="Level ID from database")
    bkp.add_argument("-l", "--lbp3", action="store_true", help="Force LBP3 backup")
    return parser


_FAILURES = (
    DatabaseError,
    ValueError,
    RuntimeError,
    OSError,
    sqlite3.Error,
    aiohttp.ClientError,
)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line tool and return its exit status."""
    try:
        config = read_config()
    except _FAILURES as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    args = _parser().parse_args(argv)

    if args.command == "bkp":
        force_lbp3 = args.lbp3 or config.force_lbp3_backups
        try:
            asyncio.run(dl_as_backup(args.level_id, config, force_lbp3))
        except _FAILURES as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())