import struct

import pytest

from lbparchive.db import SlotInfo
from lbparchive.labels import lams
from lbparchive.resource_parse import (
    BinaryMethod,
    GuidDescriptor,
    ResrcData,
    ResrcDependency,
    Sha1Descriptor,
)
from lbparchive.slot_list import make_slotlist
from lbparchive.versions import GameVersion, ResrcRevision

ROOT = bytes(range(20))
ICON = bytes(range(100, 120))


def slot(**overrides):
    values = dict(
        name="Level Name",
        np_handle="creator",
        root_level=ROOT,
        icon=Sha1Descriptor(ICON),
        game=GameVersion.LBP2,
        description="Some description",
    )
    values.update(overrides)
    return SlotInfo(**values)


@pytest.mark.parametrize("game", list(GameVersion))
def test_round_trip_header_and_dependencies(game):
    revision = game.latest_revision
    data = make_slotlist(revision, slot())
    parsed = ResrcData.parse(data)
    assert parsed.resrc_type == b"SLT"
    assert isinstance(parsed.method, BinaryMethod)
    assert parsed.method.revision == revision
    assert parsed.method.is_encrypted is False
    assert parsed.method.dependencies == (
        ResrcDependency(Sha1Descriptor(ROOT), 9),
        ResrcDependency(Sha1Descriptor(ICON), 1),
    )


def test_lbp1_header_bytes():
    revision = GameVersion.LBP1.latest_revision
    data = make_slotlist(revision, slot())
    assert data[:4] == b"SLTb"
    assert data[4:8] == struct.pack(">I", 0x272)
    assert data[12:16] == struct.pack(">HH", 0x4C44, 0x17)
    assert data[16:18] == b"\0\0"
    assert data[18:22] == struct.pack(">I", 1)


def test_dependency_table_offset_points_at_count():
    data = make_slotlist(GameVersion.LBP2.latest_revision, slot())
    offset = struct.unpack(">I", data[8:12])[0]
    assert struct.unpack(">I", data[offset:offset + 4])[0] == 2
    assert data[offset + 4] == 1
    assert data[offset + 5:offset + 25] == ROOT


def test_adventure_planet_lbp3():
    data = make_slotlist(GameVersion.LBP3.latest_revision, slot(is_adventure_planet=True))
    deps = ResrcData.parse(data).method.dependencies
    assert deps == (
        ResrcDependency(Sha1Descriptor(ROOT), 31),
        ResrcDependency(Sha1Descriptor(ICON), 1),
    )


def test_adventure_planet_lbp1_has_no_root():
    data = make_slotlist(GameVersion.LBP1.latest_revision, slot(is_adventure_planet=True))
    deps = ResrcData.parse(data).method.dependencies
    assert deps == (ResrcDependency(Sha1Descriptor(ICON), 1),)


def test_guid_icon_dependency():
    data = make_slotlist(GameVersion.LBP2.latest_revision, slot(icon=GuidDescriptor(0x1234)))
    deps = ResrcData.parse(data).method.dependencies
    assert deps[-1] == ResrcDependency(GuidDescriptor(0x1234), 1)


def test_old_revision_swaps_hash_tag():
    revision = ResrcRevision(head=0x180)
    data = make_slotlist(revision, slot())
    assert data[16:24] == struct.pack(">II", 6, 0)
    assert data[24] == 2
    assert data[25:45] == ROOT
    parsed = ResrcData.parse(data)
    assert parsed.method.revision == revision
    assert parsed.method.dependencies[0] == ResrcDependency(Sha1Descriptor(ROOT), 9)


def test_name_written_as_utf16():
    name = "Héllo ✓"
    data = make_slotlist(GameVersion.LBP2.latest_revision, slot(name=name))
    assert struct.pack(">I", len(name)) + name.encode("utf-16-be") in data


def test_lbp2_drops_unknown_labels():
    labels = [lams("LABEL_RPG"), lams("LABEL_SinglePlayer")]
    data = make_slotlist(GameVersion.LBP2.latest_revision, slot(author_labels=labels))
    assert struct.pack(">III", 1, lams("LABEL_SinglePlayer"), 0) in data
    assert struct.pack(">I", lams("LABEL_RPG")) not in data


def test_lbp3_keeps_all_labels():
    labels = [lams("LABEL_RPG"), lams("LABEL_SinglePlayer")]
    data = make_slotlist(GameVersion.LBP3.latest_revision, slot(author_labels=labels))
    assert struct.pack(">IIIII", 2, labels[0], 0, labels[1], 1) in data


def test_handle_too_long():
    with pytest.raises(ValueError):
        make_slotlist(GameVersion.LBP2.latest_revision, slot(np_handle="x" * 17))


def test_revision_below_dependency_tables_has_no_table():
    data = make_slotlist(ResrcRevision(head=0x100), slot())
    assert data[8:12] == struct.pack(">I", 1)
    parsed = ResrcData.parse(data)
    assert parsed.method.dependencies == ()