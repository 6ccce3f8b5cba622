import struct
import zlib

from PIL import Image

from lbparchive.gtf_texture import CellGcmEnumForGtf, CellGcmTexture, make_dds_header
from lbparchive.icon import resize_with_padding, make_icon

COLOR = (200, 100, 50, 255)
TRANSPARENT = (0, 0, 0, 0)
WIDTH, HEIGHT = 32, 16
# A8R8G8B8 pixels are stored B, G, R, A in memory.
PIXELS = bytes([50, 100, 200, 255]) * (WIDTH * HEIGHT)


def gcm():
    return CellGcmTexture(
        format=CellGcmEnumForGtf.A8R8G8B8,
        mipmap=1,
        dimension=2,
        cubemap=0,
        remap=0,
        width=WIDTH,
        height=HEIGHT,
        depth=1,
        location=0,
        flags=0,
        pitch=0,
        offset=0,
    )


def texture_resource(kind, payload, gcm_bytes=b"", compress=False):
    if compress:
        chunks = [(zlib.compress(payload), len(payload))]
    else:
        chunks = [(payload, len(payload))]
    header = kind + b" " + gcm_bytes + struct.pack(">HH", 1, len(chunks))
    header += b"".join(struct.pack(">HH", len(data), size) for data, size in chunks)
    return header + b"".join(data for data, _ in chunks)


def gtf_gcm_bytes():
    return struct.pack(">BBBBIHHHBBII", 0x85, 1, 2, 0, 0, WIDTH, HEIGHT, 1, 0, 0, 0, 0)


def test_resize_keeps_exact_size_image():
    image = Image.new("RGBA", (320, 176), COLOR)
    result = resize_with_padding(image)
    assert result.size == (320, 176)
    assert result.getpixel((0, 0)) == COLOR
    assert result.getpixel((319, 175)) == COLOR


def test_resize_tall_image_is_pillarboxed():
    result = resize_with_padding(Image.new("RGB", (100, 400), COLOR[:3]))
    assert result.size == (320, 176)
    assert result.getpixel((160, 88)) == COLOR
    assert result.getpixel((0, 88)) == TRANSPARENT
    assert result.getpixel((319, 88)) == TRANSPARENT


def test_resize_wide_image_is_letterboxed():
    result = resize_with_padding(Image.new("RGBA", (1000, 100), COLOR))
    assert result.size == (320, 176)
    assert result.getpixel((160, 88)) == COLOR
    assert result.getpixel((160, 0)) == TRANSPARENT
    assert result.getpixel((160, 175)) == TRANSPARENT


def test_missing_icon_writes_blank(tmp_path):
    path = make_icon(tmp_path, b"\x01" * 20, {})
    assert path == tmp_path / "ICON0.PNG"
    with Image.open(path) as image:
        assert image.size == (320, 176)
        assert image.convert("RGBA").getpixel((160, 88)) == TRANSPARENT


def test_non_texture_icon_writes_blank(tmp_path):
    icon_hash = b"\x02" * 20
    resources = {icon_hash: b"PLNb" + struct.pack(">I", 0x100)}
    path = make_icon(tmp_path, icon_hash, resources)
    with Image.open(path) as image:
        assert image.convert("RGBA").getpixel((10, 10)) == TRANSPARENT


def test_tex_icon_is_decoded(tmp_path):
    icon_hash = b"\x03" * 20
    dds = make_dds_header(gcm()) + PIXELS
    resources = {icon_hash: texture_resource(b"TEX", dds, compress=True)}
    path = make_icon(tmp_path, icon_hash, resources)
    with Image.open(path) as image:
        image = image.convert("RGBA")
        assert image.size == (320, 176)
        assert image.getpixel((160, 88)) == COLOR
        assert image.getpixel((160, 2)) == TRANSPARENT


def test_gtf_icon_gets_dds_header(tmp_path):
    icon_hash = b"\x04" * 20
    resources = {icon_hash: texture_resource(b"GTF", PIXELS, gtf_gcm_bytes())}
    path = make_icon(tmp_path, icon_hash, resources)
    with Image.open(path) as image:
        image = image.convert("RGBA")
        assert image.getpixel((160, 88)) == COLOR
        assert image.getpixel((160, 173)) == TRANSPARENT