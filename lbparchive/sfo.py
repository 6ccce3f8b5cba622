"""Serialization of the PARAM.SFO metadata file of a PS3 save."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

from .db import SlotInfo
from .versions import GameVersion

_HEADER_SIZE = 20
_INDEX_ENTRY_SIZE = 16


class _Format(Enum):
    ARRAY = b"\x04\x00"
    STRING = b"\x04\x02"
    INTEGER = b"\x04\x04"


@dataclass(frozen=True)
class _Entry:
    key: str
    fmt: _Format
    data: bytes
    max_size: int


def _array(key: str, max_size: int, value: bytes) -> _Entry:
    if len(value) > max_size:
        raise ValueError(f"{key} holds {len(value)} bytes, at most {max_size} allowed")
    return _Entry(key, _Format.ARRAY, bytes(value), max_size)


def _string(key: str, max_size: int, text: str) -> _Entry:
    encoded = text.encode("utf-8")
    if len(encoded) >= max_size:
        # Cut on a character boundary so the result stays valid UTF-8.
        head = encoded[: max_size - 4].decode("utf-8", "ignore").encode("utf-8")
        encoded = head + b"..."
    return _Entry(key, _Format.STRING, encoded + b"\0", max_size)


def _integer(key: str, value: int) -> _Entry:
    return _Entry(key, _Format.INTEGER, struct.pack("<I", value), 4)


def _entries(slot_info: SlotInfo, bkp_name: str, game_version: GameVersion) -> list[_Entry]:
    kind = "Adventure" if slot_info.is_adventure_planet else "Level"
    title = f"{game_version.title} Dry Archive {kind} Backup"
    subtitle = f"{slot_info.name} by {slot_info.np_handle}"

    # Keys must be in alphabetical order.
    return [
        _array("ACCOUNT_ID", 16, b"0000000000000000"),
        _integer("ATTRIBUTE", 0),
        _string("CATEGORY", 4, "SD"),
        _string("DETAIL", 1024, slot_info.description),
        _array("PARAMS", 1024, bytes(1024)),
        _array("PARAMS2", 1024, bytes(12)),
        _string("SAVEDATA_DIRECTORY", 64, bkp_name),
        _string("SAVEDATA_LIST_PARAM", 8, ""),
        _string("SUB_TITLE", 128, subtitle),
        _string("TITLE", 128, title),
    ]


def build_sfo(slot_info: SlotInfo, bkp_name: str, game_version: GameVersion) -> bytes:
    """Build the PARAM.SFO contents describing a level backup."""
    entries = _entries(slot_info, bkp_name, game_version)

    key_offsets = []
    key_table = bytearray()
    for entry in entries:
        key_offsets.append(len(key_table))
        key_table += entry.key.encode("ascii") + b"\0"

    data_offsets = []
    data_table = bytearray()
    for entry in entries:
        data_offsets.append(len(data_table))
        data_table += entry.data.ljust(entry.max_size, b"\0")

    key_table_offset = _HEADER_SIZE + _INDEX_ENTRY_SIZE * len(entries)
    key_table += bytes(-(key_table_offset + len(key_table)) % 4)
    data_table_offset = key_table_offset + len(key_table)

    index = b"".join(
        struct.pack("<H", key_offset)
        + entry.fmt.value
        + struct.pack("<3I", len(entry.data), entry.max_size, data_offset)
        for entry, key_offset, data_offset in zip(entries, key_offsets, data_offsets)
    )

    return b"".join((
        b"\0PSF",
        b"\x01\x01\x00\x00",  # version 1.1
        struct.pack("<3I", key_table_offset, data_table_offset, len(entries)),
        index,
        bytes(key_table),
        bytes(data_table),
    ))


def make_sfo(
    slot_info: SlotInfo,
    bkp_name: str,
    directory: Union[str, Path],
    game_version: GameVersion,
) -> bytes:
    """Write PARAM.SFO into ``directory`` and return its contents."""
    sfo = build_sfo(slot_info, bkp_name, game_version)
    (Path(directory) / "PARAM.SFO").write_bytes(sfo)
    return sfo