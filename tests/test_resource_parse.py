import struct
import zlib

import pytest

from lbparchive.gtf_texture import CellGcmEnumForGtf
from lbparchive.resource_parse import (
    BinaryMethod,
    GuidDescriptor,
    ResourceError,
    ResrcData,
    ResrcDependency,
    Sha1Descriptor,
    TextureMethod,
    parse_dependency_table,
)
from lbparchive.versions import ResrcRevision

SHA1 = bytes(range(20))


def dep_table(*entries):
    body = b"".join(entries)
    return struct.pack(">I", len(entries)) + body


def sha1_entry(sha1, rtype):
    return b"\x01" + sha1 + struct.pack(">I", rtype)


def guid_entry(guid, rtype):
    return b"\x02" + struct.pack(">II", guid, rtype)


def binary(kind=b"LVL", method=b"b", head=0x3F8, branch=(0, 0), table=dep_table()):
    prefix = kind + method + struct.pack(">I", head)
    offset = len(prefix) + 4 + 4
    return prefix + struct.pack(">I", offset) + struct.pack(">HH", *branch) + table


def test_binary_with_dependencies():
    data = binary(table=dep_table(sha1_entry(SHA1, 9), guid_entry(0x1234, 1)))
    parsed = ResrcData.parse(data)
    assert parsed.resrc_type == b"LVL"
    assert parsed.method == BinaryMethod(
        is_encrypted=False,
        revision=ResrcRevision(0x3F8, 0, 0),
        dependencies=(
            ResrcDependency(Sha1Descriptor(SHA1), 9),
            ResrcDependency(GuidDescriptor(0x1234), 1),
        ),
    )


def test_encrypted_and_branch():
    data = binary(method=b"e", head=0x272, branch=(0x4C44, 0x17))
    method = ResrcData.parse(data).method
    assert method.is_encrypted
    assert method.revision == ResrcRevision(0x272, 0x4C44, 0x17)
    assert method.dependencies == ()


def test_old_revision_has_no_table_or_branch():
    data = b"PLNb" + struct.pack(">I", 0x100) + b"\xff" * 8
    method = ResrcData.parse(data).method
    assert method.revision == ResrcRevision(0x100)
    assert method.dependencies == ()


def test_smh_skips_branch_fields():
    data = b"SMHb" + struct.pack(">II", 0x3F8, 12) + dep_table()
    method = ResrcData.parse(data).method
    assert method.revision == ResrcRevision(0x3F8)


def test_empty_entries_are_skipped():
    table = dep_table(b"\x00" + struct.pack(">I", 5), guid_entry(7, 2))
    assert parse_dependency_table(table, 0) == [ResrcDependency(GuidDescriptor(7), 2)]


def test_invalid_dependency_type():
    table = dep_table(b"\x03" + bytes(8))
    with pytest.raises(ResourceError):
        parse_dependency_table(table, 0)


def test_truncated_resource():
    with pytest.raises(ResourceError):
        ResrcData.parse(b"LVLb\x00\x00")


def test_unknown_method_is_none():
    assert ResrcData.parse(b"LVLt" + bytes(8)).method is None


def texture_body(chunks):
    header = struct.pack(">HH", 1, len(chunks))
    sizes = b"".join(struct.pack(">HH", len(c), len(r)) for c, r in chunks)
    return header + sizes + b"".join(c for c, _ in chunks)


def test_texture_not_parsed_by_default():
    raw = b"hello world"
    data = b"TEX " + texture_body([(zlib.compress(raw), raw)])
    assert ResrcData.parse(data).method is None


def test_tex_chunks_are_joined():
    raw = b"hello world"
    data = b"TEX " + texture_body([(zlib.compress(raw), raw), (b"abcd", b"abcd")])
    method = ResrcData.parse(data, parse_texture=True).method
    assert method == TextureMethod(data=raw + b"abcd", gcm_info=None)


def test_gtf_header_is_parsed():
    gcm = (
        bytes([0x86, 1, 2, 0])
        + struct.pack(">I", 0xAAE4)
        + struct.pack(">HHH", 64, 32, 1)
        + bytes([1, 0])
        + struct.pack(">II", 0, 0)
    )
    data = b"GTF " + gcm + texture_body([(b"wxyz", b"wxyz")])
    method = ResrcData.parse(data, parse_texture=True).method
    assert method.data == b"wxyz"
    assert method.gcm_info.format is CellGcmEnumForGtf.DXT1
    assert (method.gcm_info.width, method.gcm_info.height) == (64, 32)
    assert method.gcm_info.remap == 0xAAE4


def test_gtf_invalid_format():
    data = b"GTF " + bytes([0x10]) + bytes(40)
    with pytest.raises(ResourceError):
        ResrcData.parse(data, parse_texture=True)


def test_non_texture_with_texture_method():
    with pytest.raises(ResourceError):
        ResrcData.parse(b"LVL " + bytes(8), parse_texture=True)