"""Serialization of a single-slot SLT (slot list) resource."""

from __future__ import annotations

import struct
from typing import Optional

from .db import LevelType, SlotInfo
from .labels import LBP2_LABELS
from .resource_parse import Descriptor, Sha1Descriptor
from .versions import GameVersion, ResrcRevision

_DEVELOPER_LEVEL_TYPES = {
    LevelType.COOPERATIVE: 0,  # MAIN_PATH
    LevelType.VERSUS: 6,
    LevelType.CUTSCENE: 7,
}

_GAME_MODES = {
    LevelType.COOPERATIVE: 0,
    LevelType.VERSUS: 1,
    LevelType.CUTSCENE: 2,
}

_FAKE_SLOT = 6
_PLAN_TYPE = 38


class _SlotListWriter:
    def __init__(self, revision: ResrcRevision) -> None:
        self.revision = revision
        self.out = bytearray()
        self.dependencies: list[tuple[Descriptor, int]] = []

    def raw(self, data: bytes) -> None:
        self.out += data

    def u8(self, value: int) -> None:
        self.out += struct.pack(">B", value)

    def u16(self, value: int) -> None:
        self.out += struct.pack(">H", value)

    def u32(self, value: int) -> None:
        self.out += struct.pack(">I", value)

    def string(self, text: str) -> None:
        encoded = text.encode("utf-8")
        self.u32(len(encoded))
        self.raw(encoded)

    def wide_string(self, text: str) -> None:
        encoded = text.encode("utf-16-be")
        self.u32(len(encoded) // 2)
        self.raw(encoded)

    def online_id(self, np_handle: str) -> None:
        handle = np_handle.encode("utf-8")
        if len(handle) > 16:
            raise ValueError(f"PSN handle {np_handle!r} is longer than 16 bytes")
        length_prefixed = self.revision.version < 0x234
        if length_prefixed:
            self.u32(16)
        self.raw(handle.ljust(16, b"\0"))
        self.u8(0)  # terminator
        if length_prefixed:
            self.u32(3)
        self.raw(b"\0\0\0")

    def descriptor(self, descriptor: Optional[Descriptor], resrc_type: int) -> None:
        # Early revisions swapped the tags for hashes and GUIDs.
        hash_tag, guid_tag = (2, 1) if self.revision.version < 0x191 else (1, 2)
        if descriptor is None:
            self.u8(0)
            return
        if isinstance(descriptor, Sha1Descriptor):
            self.u8(hash_tag)
            self.raw(descriptor.sha1)
        else:
            self.u8(guid_tag)
            self.u32(descriptor.guid)
        self.dependencies.append((descriptor, resrc_type))

    def slot(self, slot_info: SlotInfo) -> None:
        rev = self.revision
        version = rev.version
        subversion = rev.subversion
        root = Sha1Descriptor(bytes(slot_info.root_level))
        adventure = slot_info.is_adventure_planet

        self.u32(_FAKE_SLOT)
        self.u32(0)
        self.descriptor(None if adventure else root, 9)
        if subversion >= 0x145:
            self.descriptor(root if adventure else None, 31)
        self.descriptor(slot_info.icon, 1)

        self.raw(bytes(16))  # location, four floats
        self.online_id(slot_info.np_handle)
        if version >= 0x13B:
            self.wide_string(slot_info.np_handle)

        self.string("")  # translationTag
        self.wide_string(slot_info.name)
        self.wide_string(slot_info.description)

        self.u32(0)  # primaryLinkLevel
        self.u32(0)
        if version >= 0x134:
            self.u32(0)  # group
            self.u32(0)

        self.u8(int(slot_info.initially_locked))

        if version > 0x237:
            self.u8(int(slot_info.shareable))
            self.u32(slot_info.background_guid or 0)

        if version > 0x333:
            self.descriptor(None, _PLAN_TYPE)  # planetDecorations

        if version < 0x188:
            self.u8(0)

        if version > 0x1DE:
            self.u32(_DEVELOPER_LEVEL_TYPES[slot_info.leveltype])
        else:
            self.u8(0)  # sideMission

        if 0x1AD < version < 0x1B9:
            self.u8(0)

        if 0x1B8 < version < 0x36C:
            self.u32(0)  # gameProgressionState

        if version <= 0x2C3:
            return

        if version >= 0x33C:
            labels = list(slot_info.author_labels)
            if rev.game_version is GameVersion.LBP2:
                labels = [key for key in labels if key in LBP2_LABELS]
            self.u32(len(labels))
            for order, key_id in enumerate(labels):
                self.u32(key_id)
                self.u32(order)

        if version >= 0x2EA:
            self.u32(3)  # collectabubblesRequired
            for _ in range(3):
                self.descriptor(None, _PLAN_TYPE)
                self.u32(0)

        if version >= 0x2F4:
            self.u32(0)  # collectabubblesContained

        if version >= 0x352:
            self.u8(int(slot_info.is_sub_level))

        if version < 0x3D0:
            return

        self.u8(1 if slot_info.min_players is None else slot_info.min_players)
        self.u8(4 if slot_info.max_players is None else slot_info.max_players)

        if subversion >= 0x215:
            self.u8(0)  # enforceMinMaxPlayers
        self.u8(0)  # moveRecommended
        if version >= 0x3E9:
            self.u8(0)  # crossCompatible
        if version >= 0x3D1:
            self.u8(1)  # showOnPlanet
        if version >= 0x3D2:
            self.u8(0)  # livesOverride

        if not rev.is_lbp3:
            return

        if subversion >= 0x12:
            self.u8(_GAME_MODES[slot_info.leveltype])
        if subversion >= 0xD2:
            self.u8(0)  # isGameKit
        if subversion >= 0x11B:
            self.wide_string("")  # entranceName
            self.u32(0)  # originalSlotID
            self.u32(0)
        if subversion >= 0x153:
            self.u8(1)  # customBadgeSize
        if subversion >= 0x192:
            self.string("")  # localPath
            if subversion >= 0x206:
                self.string("")  # thumbPath


def make_slotlist(revision: ResrcRevision, slot_info: SlotInfo) -> bytes:
    """Serialize an uncompressed slot list resource holding one slot."""
    writer = _SlotListWriter(revision)
    head = revision.head

    writer.raw(b"SLTb")
    writer.u32(head)
    if head >= 0x109:
        writer.u32(0)  # dependency table offset, patched below
        if head >= 0x189:
            if head >= 0x271:
                writer.u16(revision.branch_id)
                writer.u16(revision.branch_revision)
            if head >= 0x297 or (
                head == 0x272 and revision.branch_id == 0x4C44 and revision.branch_revision >= 0x2
            ):
                writer.u8(0)  # compression flags
            writer.u8(0)  # not compressed

    writer.u32(1)  # slot count
    writer.slot(slot_info)

    if revision.version >= 0x3B6:
        writer.u8(1)  # fromProductionBuild

    if head >= 0x109:
        writer.out[8:12] = struct.pack(">I", len(writer.out))
        writer.u32(len(writer.dependencies))
        for descriptor, resrc_type in writer.dependencies:
            if isinstance(descriptor, Sha1Descriptor):
                writer.u8(1)
                writer.raw(descriptor.sha1)
            else:
                writer.u8(2)
                writer.u32(descriptor.guid)
            writer.u32(resrc_type)

    return bytes(writer.out)