"""Parsing of resource headers, dependency tables and texture payloads."""

from __future__ import annotations

import struct
import zlib
from dataclasses import dataclass
from typing import Optional, Union

from .gtf_texture import CellGcmEnumForGtf, CellGcmTexture
from .versions import ResrcRevision


class ResourceError(ValueError):
    """A resource could not be parsed."""


@dataclass(frozen=True)
class Sha1Descriptor:
    sha1: bytes


@dataclass(frozen=True)
class GuidDescriptor:
    guid: int


Descriptor = Union[Sha1Descriptor, GuidDescriptor]


@dataclass(frozen=True)
class ResrcDependency:
    descriptor: Descriptor
    resrc_type: int


@dataclass(frozen=True)
class BinaryMethod:
    is_encrypted: bool
    revision: ResrcRevision
    dependencies: tuple[ResrcDependency, ...]


@dataclass(frozen=True)
class TextureMethod:
    data: bytes
    gcm_info: Optional[CellGcmTexture]


class _Reader:
    def __init__(self, data: bytes, position: int = 0) -> None:
        self._data = bytes(data)
        self.position = position

    def read(self, size: int) -> bytes:
        end = self.position + size
        if end > len(self._data):
            raise ResourceError("unexpected end of resource data")
        chunk = self._data[self.position:end]
        self.position = end
        return chunk

    def skip(self, size: int) -> None:
        self.position += size

    def u8(self) -> int:
        return self.read(1)[0]

    def u16(self) -> int:
        return struct.unpack(">H", self.read(2))[0]

    def u32(self) -> int:
        return struct.unpack(">I", self.read(4))[0]


def parse_dependency_table(data: bytes, table_offset: int) -> list[ResrcDependency]:
    """Read the dependency table located at ``table_offset``."""
    reader = _Reader(data, table_offset)
    dependencies = []
    for _ in range(reader.u32()):
        kind = reader.u8()
        if kind == 0:
            # Some LBP3 levels carry empty entries; only the type field follows.
            reader.skip(4)
            continue
        if kind == 1:
            descriptor: Descriptor = Sha1Descriptor(reader.read(20))
        elif kind == 2:
            descriptor = GuidDescriptor(reader.u32())
        else:
            raise ResourceError(f"invalid descriptor type {kind} in dependency table")
        dependencies.append(ResrcDependency(descriptor, reader.u32()))
    return dependencies


def _read_gcm(reader: _Reader) -> CellGcmTexture:
    try:
        fmt = CellGcmEnumForGtf.from_byte(reader.u8())
    except ResourceError:
        raise
    except ValueError as exc:
        raise ResourceError(str(exc)) from exc
    return CellGcmTexture(
        format=fmt,
        mipmap=reader.u8(),
        dimension=reader.u8(),
        cubemap=reader.u8(),
        remap=reader.u32(),
        width=reader.u16(),
        height=reader.u16(),
        depth=reader.u16(),
        location=reader.u8(),
        flags=reader.u8(),
        pitch=reader.u32(),
        offset=reader.u32(),
    )


def _read_texture(reader: _Reader, resrc_type: bytes) -> TextureMethod:
    if resrc_type not in (b"TEX", b"GTF"):
        raise ResourceError(f"{resrc_type!r} resource is not a texture")

    gcm = _read_gcm(reader) if resrc_type == b"GTF" else None

    reader.skip(2)
    chunk_sizes = [(reader.u16(), reader.u16()) for _ in range(reader.u16())]
    total = sum(decompressed for _, decompressed in chunk_sizes)
    output = bytearray(total)

    position = 0
    for compressed_size, decompressed_size in chunk_sizes:
        chunk = reader.read(compressed_size)
        if compressed_size == decompressed_size:
            inflated = chunk
        else:
            try:
                inflated = zlib.decompressobj().decompress(chunk)
            except zlib.error:
                inflated = b""
        inflated = inflated[: max(total - position, 0)]
        output[position:position + len(inflated)] = inflated
        position += decompressed_size

    return TextureMethod(bytes(output), gcm)


@dataclass(frozen=True)
class ResrcData:
    """Header information of a resource."""

    resrc_type: bytes
    method: Union[BinaryMethod, TextureMethod, None]

    @classmethod
    def parse(cls, data: bytes, parse_texture: bool = False) -> ResrcData:
        """Parse a resource; textures are decompressed only if ``parse_texture``."""
        reader = _Reader(data)
        resrc_type = reader.read(3)
        method_byte = reader.u8()

        method: Union[BinaryMethod, TextureMethod, None] = None
        if method_byte in (ord("b"), ord("e")):
            head = reader.u32()
            dependencies: list[ResrcDependency] = []
            if head >= 0x109:
                dependencies = parse_dependency_table(data, reader.u32())
            branch_id = branch_revision = 0
            if resrc_type != b"SMH" and head >= 0x271:
                branch_id = reader.u16()
                branch_revision = reader.u16()
            method = BinaryMethod(
                is_encrypted=method_byte == ord("e"),
                revision=ResrcRevision(head, branch_id, branch_revision),
                dependencies=tuple(dependencies),
            )
        elif method_byte == ord(" ") and parse_texture:
            method = _read_texture(reader, resrc_type)

        return cls(resrc_type=resrc_type, method=method)