"""Creation of the ICON0.PNG picture of a level backup."""

from __future__ import annotations

import io
from collections.abc import Mapping
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from .gtf_texture import make_dds_header
from .resource_parse import ResrcData, TextureMethod

MAX_WIDTH = 320
MAX_HEIGHT = 176


def resize_with_padding(image: Image.Image) -> Image.Image:
    """Scale an image to fit 320x176, keeping its aspect ratio, on a transparent canvas."""
    width, height = image.size
    aspect_ratio = width / height

    if width > MAX_WIDTH or height < MAX_HEIGHT:
        width = MAX_WIDTH
        height = int(width / aspect_ratio)

    if height > MAX_HEIGHT or width < MAX_WIDTH:
        height = MAX_HEIGHT
        width = int(height * aspect_ratio)

    thumbnail = image.convert("RGBA").resize((width, height), Image.Resampling.BILINEAR)
    canvas = Image.new("RGBA", (MAX_WIDTH, MAX_HEIGHT), (0, 0, 0, 0))
    canvas.alpha_composite(
        thumbnail, dest=((MAX_WIDTH - width) // 2, (MAX_HEIGHT - height) // 2)
    )
    return canvas


def _icon_texture(
    icon_hash: Optional[bytes], resources: Mapping[bytes, bytes]
) -> Optional[TextureMethod]:
    if icon_hash is None or icon_hash not in resources:
        return None
    method = ResrcData.parse(resources[icon_hash], parse_texture=True).method
    return method if isinstance(method, TextureMethod) else None


def make_icon(
    bkp_path: Union[str, Path],
    icon_hash: Optional[bytes],
    resources: Mapping[bytes, bytes],
) -> Path:
    """Write ICON0.PNG from the level's icon texture, or a blank one if there is none."""
    texture = _icon_texture(icon_hash, resources)

    if texture is None:
        image = Image.new("RGBA", (MAX_WIDTH, MAX_HEIGHT), (0, 0, 0, 0))
    else:
        data = texture.data
        if texture.gcm_info is not None:
            data = make_dds_header(texture.gcm_info) + data
        with Image.open(io.BytesIO(data), formats=["DDS"]) as dds:
            image = resize_with_padding(dds)

    path = Path(bkp_path) / "ICON0.PNG"
    image.save(path, format="PNG")
    return path