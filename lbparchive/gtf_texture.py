"""GTF texture metadata and DDS header generation."""

import struct
from dataclasses import dataclass
from enum import IntEnum

DDS_HEADER_FLAGS_TEXTURE = 0x00001007
DDS_HEADER_FLAGS_MIPMAP = 0x00020000

DDS_SURFACE_FLAGS_COMPLEX = 0x00000008
DDS_SURFACE_FLAGS_TEXTURE = 0x00001000
DDS_SURFACE_FLAGS_MIPMAP = 0x00400000

DDS_SURFACE_FLAGS_CUBEMAP = 0x00000200
DDS_SURFACE_FLAGS_CUBEMAP_POSITIVEX = 0x00000400
DDS_SURFACE_FLAGS_CUBEMAP_NEGATIVEX = 0x00000800
DDS_SURFACE_FLAGS_CUBEMAP_POSITIVEY = 0x00001000
DDS_SURFACE_FLAGS_CUBEMAP_NEGATIVEY = 0x00002000
DDS_SURFACE_FLAGS_CUBEMAP_POSITIVEZ = 0x00004000
DDS_SURFACE_FLAGS_CUBEMAP_NEGATIVEZ = 0x00008000

DDS_FOURCC = 0x4
DDS_RGB = 0x40
DDS_RGBA = 0x41
DDS_LUMINANCE = 0x00020000

_CUBEMAP_CAPS2 = (
    DDS_SURFACE_FLAGS_CUBEMAP
    | DDS_SURFACE_FLAGS_CUBEMAP_POSITIVEX
    | DDS_SURFACE_FLAGS_CUBEMAP_NEGATIVEX
    | DDS_SURFACE_FLAGS_CUBEMAP_POSITIVEY
    | DDS_SURFACE_FLAGS_CUBEMAP_NEGATIVEY
    | DDS_SURFACE_FLAGS_CUBEMAP_POSITIVEZ
    | DDS_SURFACE_FLAGS_CUBEMAP_NEGATIVEZ
)


class CellGcmEnumForGtf(IntEnum):
    """Pixel formats a GTF texture can use."""

    B8 = 0x81
    A1R5G5B5 = 0x82
    A4R4G4B4 = 0x83
    R5G6B5 = 0x84
    A8R8G8B8 = 0x85
    DXT1 = 0x86
    DXT3 = 0x87
    DXT5 = 0x88
    G8B8 = 0x8B
    R5G5B5 = 0x8F

    @classmethod
    def from_byte(cls, value: int) -> "CellGcmEnumForGtf":
        try:
            return cls(value)
        except ValueError:
            raise ValueError("Invalid GTF texture pixel format") from None

    def dds_pixelformat(self) -> tuple[int, ...]:
        """The eight words of the DDS_PIXELFORMAT structure for this format."""
        try:
            return _PIXEL_FORMATS[self]
        except KeyError:
            raise ValueError(f"DDS pixel format {self.name} is not supported") from None


_PIXEL_FORMATS = {
    CellGcmEnumForGtf.B8: (0x20, DDS_LUMINANCE, 0, 8, 0, 0, 0x000000FF, 0),
    CellGcmEnumForGtf.A1R5G5B5: (0x20, DDS_RGBA, 0, 16, 0x00007C00, 0x000003E0, 0x0000001F, 0x00008000),
    CellGcmEnumForGtf.A4R4G4B4: (0x20, DDS_RGBA, 0, 16, 0x00000F00, 0x000000F0, 0x0000000F, 0x0000F000),
    CellGcmEnumForGtf.R5G6B5: (0x20, DDS_RGB, 0, 16, 0x0000F800, 0x000007E0, 0x0000001F, 0x00000000),
    CellGcmEnumForGtf.A8R8G8B8: (0x20, DDS_RGBA, 0, 32, 0x00FF0000, 0x0000FF00, 0x000000FF, 0xFF000000),
    CellGcmEnumForGtf.DXT1: (0x20, DDS_FOURCC, 0x31545844, 0, 0, 0, 0, 0),
    CellGcmEnumForGtf.DXT3: (0x20, DDS_FOURCC, 0x33545844, 0, 0, 0, 0, 0),
    CellGcmEnumForGtf.DXT5: (0x20, DDS_FOURCC, 0x35545844, 0, 0, 0, 0, 0),
}


@dataclass(frozen=True)
class CellGcmTexture:
    """Texture description stored in a GTF resource header."""

    format: CellGcmEnumForGtf
    mipmap: int
    dimension: int
    cubemap: int
    remap: int
    width: int
    height: int
    depth: int
    location: int
    flags: int
    pitch: int
    offset: int


def make_dds_header(gcm: CellGcmTexture) -> bytes:
    """Build the 128-byte DDS header describing a GTF texture."""
    pixelformat = gcm.format.dds_pixelformat()

    flags = DDS_HEADER_FLAGS_TEXTURE
    caps1 = DDS_SURFACE_FLAGS_TEXTURE
    caps2 = 0
    if gcm.mipmap != 1:
        flags |= DDS_HEADER_FLAGS_MIPMAP
        caps1 |= DDS_SURFACE_FLAGS_MIPMAP | DDS_SURFACE_FLAGS_COMPLEX
    if gcm.cubemap == 1:
        caps1 |= DDS_SURFACE_FLAGS_COMPLEX
        caps2 |= _CUBEMAP_CAPS2

    return b"".join(
        (
            b"DDS ",
            struct.pack("<7I", 0x7C, flags, gcm.height, gcm.width, 0, 0, gcm.mipmap),
            bytes(11 * 4),
            struct.pack("<8I", *pixelformat),
            struct.pack("<2I", caps1, caps2),
            bytes(3 * 4),
        )
    )