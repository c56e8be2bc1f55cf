"""
Pixel Metrics

Numeric helpers shared by the classifiers: RMSE between RGBA buffers,
RGB to HSL conversion and the single RGBA decode used per screenshot.
"""

import colorsys
import io
from typing import Tuple, Union

import numpy as np
from PIL import Image

BufferLike = Union[bytes, bytearray, memoryview, np.ndarray]


def _as_flat(buffer: BufferLike) -> np.ndarray:
    """View any RGBA buffer as a flat float array."""
    if isinstance(buffer, (bytes, bytearray, memoryview)):
        flat = np.frombuffer(buffer, dtype=np.uint8)
    else:
        flat = np.asarray(buffer).ravel()
    return flat.astype(np.float64)


def rmse(a: BufferLike, b: BufferLike) -> float:
    """
    Root-mean-square difference of the R, G and B channels of two RGBA buffers.

    Alpha (every fourth byte) is ignored.

    Args:
        a: First RGBA buffer (bytes or numpy array of any shape)
        b: Second RGBA buffer

    Returns:
        RMSE in 0-255 units, or infinity if the buffers differ in length
    """
    flat_a = _as_flat(a)
    flat_b = _as_flat(b)

    if flat_a.size != flat_b.size:
        return float("inf")
    if flat_a.size == 0:
        return 0.0

    color = (np.arange(flat_a.size) % 4) != 3
    diff = flat_a[color] - flat_b[color]
    if diff.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(diff * diff)))


def rgb_to_hsl(r: float, g: float, b: float) -> Tuple[float, float, float]:
    """
    Convert 0-255 RGB to HSL.

    Returns:
        Tuple of (hue in degrees 0-360, saturation 0-1, lightness 0-1)
    """
    h, l, s = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)
    return h * 360.0, s, l


def decode_rgba(image_bytes: bytes) -> np.ndarray:
    """
    Decode encoded image bytes into an (H, W, 4) uint8 RGBA array.

    Args:
        image_bytes: PNG/JPEG/WebP encoded image

    Returns:
        Contiguous RGBA pixel array
    """
    with Image.open(io.BytesIO(image_bytes)) as img:
        return np.array(img.convert("RGBA"), dtype=np.uint8)


def image_size(image_bytes: bytes) -> Tuple[int, int]:
    """Read (width, height) from the image header without decoding pixels."""
    with Image.open(io.BytesIO(image_bytes)) as img:
        return img.size


def encode_png(pixels: np.ndarray) -> bytes:
    """Encode an RGB/RGBA pixel array as PNG bytes."""
    buffer = io.BytesIO()
    Image.fromarray(pixels).save(buffer, "PNG")
    return buffer.getvalue()
