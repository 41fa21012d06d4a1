"""
Image to ASCII Art Converter - Color Palette
============================================
Hex encoding and 256-color quantization for the colored outputs.

Rounding follows browser ``Math.round`` (halves up) rather than Python's
banker's rounding, so indices agree with text produced by the web tool.
"""

import math
import re

import numpy as np

from asciify.constants import COLOR_TOKEN_PREFIX


COLOR_TOKEN_PATTERN = re.compile(re.escape(COLOR_TOKEN_PREFIX) + r'(\d{3})')


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(value + 0.5))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert RGB to a lowercase ``#rrggbb`` string."""
    return f"#{int(r):02x}{int(g):02x}{int(b):02x}"


def rgb_to_ansi256(r: int, g: int, b: int) -> int:
    """
    Quantize an RGB color to a 256-color palette index.

    Exact grays use the 24-step grayscale ramp (232-255) with pure black and
    white folded onto the cube corners; everything else goes to the 6x6x6
    color cube (16-231).
    """
    r, g, b = int(r), int(g), int(b)
    if r == g == b:
        if r < 8:
            return 16
        if r > 248:
            return 231
        return round_half_up((r - 8) / 247 * 24) + 232

    return (16 +
            36 * round_half_up(r / 255 * 5) +
            6 * round_half_up(g / 255 * 5) +
            round_half_up(b / 255 * 5))


def ansi256_grid(rgb: np.ndarray) -> np.ndarray:
    """
    Vectorized :func:`rgb_to_ansi256` over an ``(H, W, 3)`` array.

    Args:
        rgb: uint8 array of red, green and blue channels

    Returns:
        int array of shape ``(H, W)`` with palette indices
    """
    channels = rgb.astype(np.float64)
    r, g, b = channels[..., 0], channels[..., 1], channels[..., 2]

    cube = (16 +
            36 * np.floor(r / 255 * 5 + 0.5) +
            6 * np.floor(g / 255 * 5 + 0.5) +
            np.floor(b / 255 * 5 + 0.5))

    gray = np.floor((r - 8) / 247 * 24 + 0.5) + 232
    gray = np.where(r < 8, 16, np.where(r > 248, 231, gray))

    is_gray = (r == g) & (g == b)
    return np.where(is_gray, gray, cube).astype(np.int64)


def color_token(index: int) -> str:
    """Format a palette index as an inline color-switch token, e.g. ``$x196``."""
    return f"{COLOR_TOKEN_PREFIX}{index:03d}"
