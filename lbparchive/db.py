"""Lookup of level slot information in the level database."""

from __future__ import annotations

import sqlite3
import struct
from contextlib import closing
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from .labels import LABEL_LAMS_KEY_IDS
from .resource_parse import Descriptor, GuidDescriptor, Sha1Descriptor
from .versions import GameVersion

_QUERY = """
    SELECT name, description, npHandle, rootLevel, icon, game, initiallyLocked,
        isSubLevel, background, shareable, authorLabels, leveltype, minPlayers,
        maxPlayers, isAdventurePlanet
    FROM slot WHERE id = ?
"""


class DatabaseError(Exception):
    """The level database is missing, or holds no usable entry for a level."""


class LevelType(Enum):
    COOPERATIVE = "cooperative"
    VERSUS = "versus"
    CUTSCENE = "cutscene"


@dataclass
class SlotInfo:
    """Everything the database knows about one level."""

    name: str
    np_handle: str
    root_level: bytes
    icon: Descriptor
    game: GameVersion
    description: str = ""
    initially_locked: bool = False
    is_sub_level: bool = False
    background_guid: Optional[int] = None
    shareable: bool = False
    author_labels: list[int] = field(default_factory=list)
    leveltype: LevelType = LevelType.COOPERATIVE
    min_players: Optional[int] = None
    max_players: Optional[int] = None
    is_adventure_planet: bool = False


def decode_author_labels(blob: Optional[bytes]) -> list[int]:
    """Turn the label bitfield of a level into LAMS key ids, least significant bit first."""
    if blob is None:
        return []
    if len(blob) * 8 < len(LABEL_LAMS_KEY_IDS):
        raise DatabaseError("invalid authorLabels in db")
    return [
        key_id
        for index, key_id in enumerate(LABEL_LAMS_KEY_IDS)
        if blob[index // 8] >> (index % 8) & 1
    ]


def _required(row: sqlite3.Row, column: str) -> Any:
    value = row[column]
    if value is None:
        raise DatabaseError(f"missing {column} in db")
    return value


def _integer(row: sqlite3.Row, column: str) -> int:
    value = _required(row, column)
    if not isinstance(value, int):
        raise DatabaseError(f"invalid {column} in db")
    return value


def _optional_integer(row: sqlite3.Row, column: str) -> Optional[int]:
    if row[column] is None:
        return None
    return _integer(row, column)


def _blob(row: sqlite3.Row, column: str) -> bytes:
    value = _required(row, column)
    if not isinstance(value, bytes):
        raise DatabaseError(f"invalid {column} in db")
    return value


def _icon(blob: bytes) -> Descriptor:
    if len(blob) == 20:
        return Sha1Descriptor(blob)
    if len(blob) == 4:
        return GuidDescriptor(struct.unpack(">I", blob)[0])
    raise DatabaseError("invalid icon in db")


def _game(value: int) -> GameVersion:
    try:
        return GameVersion(value)
    except ValueError:
        raise DatabaseError("invalid game version in db") from None


def _leveltype(value: Optional[str]) -> LevelType:
    if value is None:
        return LevelType.COOPERATIVE
    if value == "versus":
        return LevelType.VERSUS
    if value == "cutscene":
        return LevelType.CUTSCENE
    raise DatabaseError("invalid leveltype in db")


def get_slot_info(level_id: int, db_path: Union[str, Path]) -> SlotInfo:
    """Read the slot with the given id from the database at ``db_path``."""
    path = Path(db_path)
    if not path.exists():
        raise DatabaseError(
            "Database file is missing, download it or check if the path in config.yml is correct"
        )

    with closing(sqlite3.connect(path)) as connection:
        connection.row_factory = sqlite3.Row
        row = connection.execute(_QUERY, (level_id,)).fetchone()

    if row is None:
        raise DatabaseError("Level not found")

    root_level = _blob(row, "rootLevel")
    if len(root_level) != 20:
        raise DatabaseError("invalid rootLevel in db")

    np_handle = _required(row, "npHandle")
    if not isinstance(np_handle, str):
        raise DatabaseError("invalid npHandle in db")

    background = _optional_integer(row, "background")
    min_players = _optional_integer(row, "minPlayers")
    max_players = _optional_integer(row, "maxPlayers")

    return SlotInfo(
        name=row["name"] or "",
        description=row["description"] or "",
        np_handle=np_handle,
        root_level=root_level,
        icon=_icon(_blob(row, "icon")),
        game=_game(_integer(row, "game")),
        initially_locked=_integer(row, "initiallyLocked") == 1,
        is_sub_level=_integer(row, "isSubLevel") == 1,
        background_guid=None if background is None else background & 0xFFFFFFFF,
        shareable=_integer(row, "shareable") == 1,
        author_labels=decode_author_labels(row["authorLabels"]),
        leveltype=_leveltype(row["leveltype"]),
        min_players=None if min_players is None else min_players & 0xFF,
        max_players=None if max_players is None else max_players & 0xFF,
        is_adventure_planet=_integer(row, "isAdventurePlanet") == 1,
    )