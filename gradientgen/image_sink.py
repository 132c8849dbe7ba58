"""PNG encoding of rendered (a, r, g, b) pixel buffers."""

from __future__ import annotations

import io

import numpy as np
from numpy.typing import NDArray
from PIL import Image

PNG_MEDIA_TYPE = "image/png"


def alpha7_to_opacity(alpha: NDArray) -> NDArray:
    """Map 7-bit alpha (0 opaque, 127 transparent) to 8-bit opacity."""
    a = alpha.astype(np.uint16)
    return (255 - ((a << 1) + (a >> 6))).astype(np.uint8)


def to_image(pixels: NDArray) -> Image.Image:
    """
    Build a Pillow image from a (height, width, 4) uint8 ARGB buffer.

    The alpha channel is only kept when some pixel is translucent.
    """
    rgb = np.ascontiguousarray(pixels[..., 1:4], dtype=np.uint8)
    if not np.any(pixels[..., 0]):
        return Image.fromarray(rgb)

    rgba = np.empty(pixels.shape, dtype=np.uint8)
    rgba[..., :3] = rgb
    rgba[..., 3] = alpha7_to_opacity(pixels[..., 0])
    return Image.fromarray(rgba)


def encode_png(pixels: NDArray) -> bytes:
    buf = io.BytesIO()
    to_image(pixels).save(buf, format="PNG")
    return buf.getvalue()
