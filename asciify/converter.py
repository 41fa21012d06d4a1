"""
Image to ASCII Art Converter - Core Conversion
==============================================
Turns a PIL image into three synchronized text renderings built in a single
pass over the resampled pixels:

- plain text, one ramp character per pixel
- HTML, each glyph wrapped in a color-styled ``<span>``
- color-coded text, ``$xNNN`` palette tokens in front of color changes
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image

from asciify.constants import (
    ASCII_CHARS,
    BLANK_CHAR,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    LINE_BREAK_HTML,
)
from asciify.exceptions import PixelReadError
from asciify.palette import ansi256_grid, color_token, rgb_to_hex, round_half_up


logger = logging.getLogger(__name__)

# Weights for perceived brightness (ITU-R BT.601)
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class ConversionSettings:
    """Caller-supplied conversion parameters."""

    width: int = DEFAULT_WIDTH                  # Characters per row (0 = derive)
    height: int = DEFAULT_HEIGHT                # Rows (0 = derive)
    maintain_aspect_ratio: bool = True          # Couple width and height

    def validate(self) -> None:
        """Raise ValueError for dimensions no image could satisfy."""
        if self.width < 0 or self.height < 0:
            raise ValueError("width and height must not be negative")
        if self.width == 0 and self.height == 0:
            raise ValueError("at least one of width and height must be set")


@dataclass(frozen=True)
class AsciiOutputs:
    """The three renderings of one conversion."""
    plain: str                  # Newline-terminated character rows
    html: str                   # Colored spans, rows separated by <br>
    color_coded: str            # Characters with $xNNN color tokens
    width: int = 0
    height: int = 0

    @property
    def lines(self) -> List[str]:
        """Rows of the plain rendering without their newlines."""
        return self.plain.splitlines()


# =============================================================================
# DIMENSIONS
# =============================================================================

def resolve_dimensions(width: int, height: int,
                       image_size: Tuple[int, int]) -> Tuple[int, int]:
    """
    Fill in an unset (zero) dimension from the image's natural aspect ratio.

    Args:
        width: Requested width in characters, 0 if unset
        height: Requested height in characters, 0 if unset
        image_size: Natural ``(width, height)`` of the source image

    Returns:
        Tuple of (width, height) in characters

    Raises:
        ValueError: If neither dimension is set
        PixelReadError: If the derived dimension rounds to zero
    """
    img_width, img_height = image_size
    if img_width <= 0 or img_height <= 0:
        raise ValueError(f"image has no pixels: {img_width}x{img_height}")

    if width > 0 and height > 0:
        return width, height
    if width > 0:
        height = round_half_up(width * img_height / img_width)
    elif height > 0:
        width = round_half_up(height * img_width / img_height)
    else:
        raise ValueError("at least one of width and height must be set")

    if width < 1 or height < 1:
        # Nothing to sample; reported like any other unreadable image
        logger.warning("Derived size %sx%s is empty for a %sx%s image",
                       width, height, img_width, img_height)
        raise PixelReadError()
    return width, height


# =============================================================================
# CONVERTER
# =============================================================================

class AsciiConverter:
    """Convert PIL images to plain, HTML and color-coded ASCII art."""

    def __init__(self, settings: Optional[ConversionSettings] = None):
        """Initialize with optional settings."""
        self.settings = settings or ConversionSettings()

    def convert(self, image: Image.Image) -> AsciiOutputs:
        """
        Convert an image using the current settings.

        Args:
            image: Decoded (or lazily opened) PIL image; never modified

        Returns:
            AsciiOutputs with all three renderings

        Raises:
            ValueError: If the settings cannot produce a grid
            PixelReadError: If the pixels cannot be read back
        """
        self.settings.validate()
        width, height = resolve_dimensions(
            self.settings.width, self.settings.height, image.size
        )
        logger.debug("Converting %sx%s image to %sx%s characters",
                     image.width, image.height, width, height)

        pixels = self.sample(image, width, height)
        return self.render(pixels)

    @staticmethod
    def sample(image: Image.Image, width: int, height: int) -> np.ndarray:
        """
        Resample an image to the character grid and read its pixels.

        Returns:
            uint8 array of shape ``(height, width, 4)`` in RGBA order
        """
        try:
            rgba = image.convert('RGBA')
            resized = rgba.resize((width, height), Image.Resampling.LANCZOS)
            pixels = np.asarray(resized, dtype=np.uint8)
        except (OSError, ValueError, SyntaxError) as err:
            logger.warning("Could not read image pixels: %s", err)
            raise PixelReadError() from err

        if pixels.shape != (height, width, 4):
            raise PixelReadError()
        return pixels

    @staticmethod
    def render(pixels: np.ndarray) -> AsciiOutputs:
        """
        Render an RGBA pixel grid to the three outputs in one pass.

        Args:
            pixels: uint8 array of shape ``(height, width, 4)``

        Returns:
            AsciiOutputs whose grids agree cell for cell
        """
        height, width = pixels.shape[:2]
        rgb = pixels[..., :3]
        alpha = pixels[..., 3]

        # Brightness and ramp index for every cell
        channels = rgb.astype(np.float64)
        brightness = (LUMA_WEIGHTS[0] * channels[..., 0] +
                      LUMA_WEIGHTS[1] * channels[..., 1] +
                      LUMA_WEIGHTS[2] * channels[..., 2]) / 255
        last_index = len(ASCII_CHARS) - 1
        char_indices = np.clip(np.floor(brightness * last_index), 0, last_index).astype(np.int64)

        # Transparent or pure black cells are always blank
        blank = (alpha == 0) | ~rgb.any(axis=-1)
        palette = ansi256_grid(rgb)

        plain = []
        html = []
        coded = []

        for y in range(height):
            last_code = None

            for x in range(width):
                if blank[y, x]:
                    plain.append(BLANK_CHAR)
                    html.append(BLANK_CHAR)
                    coded.append(BLANK_CHAR)
                    continue

                char = ASCII_CHARS[char_indices[y, x]]
                plain.append(char)

                if char == BLANK_CHAR:
                    html.append(char)
                else:
                    r, g, b = rgb[y, x]
                    escaped = char.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')
                    html.append(f'<span style="color: {rgb_to_hex(r, g, b)}">{escaped}</span>')

                code = int(palette[y, x])
                if code != last_code:
                    coded.append(color_token(code))
                    last_code = code
                coded.append(char)

            plain.append('\n')
            html.append(LINE_BREAK_HTML)
            coded.append('\n')

        return AsciiOutputs(
            plain=''.join(plain),
            html=''.join(html),
            color_coded=''.join(coded),
            width=width,
            height=height,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def image_to_ascii(image: Image.Image,
                   width: int = DEFAULT_WIDTH,
                   height: int = DEFAULT_HEIGHT,
                   maintain_aspect_ratio: bool = True) -> AsciiOutputs:
    """
    Convenience function to convert an image to the three ASCII renderings.

    Args:
        image: PIL Image
        width: Output width in characters (0 to derive from height)
        height: Output height in characters (0 to derive from width)
        maintain_aspect_ratio: Recorded on the settings for callers that
            couple width and height

    Returns:
        AsciiOutputs
    """
    settings = ConversionSettings(
        width=width,
        height=height,
        maintain_aspect_ratio=maintain_aspect_ratio,
    )
    return AsciiConverter(settings).convert(image)
