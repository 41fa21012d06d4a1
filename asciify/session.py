"""
Image to ASCII Art Converter - Converter Session
================================================
Stateful counterpart of the converter form: width and height controls with
an aspect-ratio lock, the current image, the last outputs and the last error.
"""

import logging
from typing import Optional

import httpx

from asciify.constants import (
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    HEIGHT_RANGE,
    WIDTH_RANGE,
)
from asciify.converter import AsciiConverter, AsciiOutputs, ConversionSettings
from asciify.exceptions import ConversionError
from asciify.loader import load_image
from asciify.palette import round_half_up


logger = logging.getLogger(__name__)

EXPORT_KINDS = ('plain', 'html', 'color')


def _check_range(name: str, value: int, bounds) -> None:
    low, high = bounds
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")


class ConverterSession:
    """Interactive conversion state, one image at a time."""

    def __init__(self,
                 width: int = DEFAULT_WIDTH,
                 height: int = DEFAULT_HEIGHT,
                 maintain_aspect_ratio: bool = True,
                 timeout: float = DEFAULT_FETCH_TIMEOUT,
                 client: Optional[httpx.Client] = None):
        self.settings = ConversionSettings(
            width=width,
            height=height,
            maintain_aspect_ratio=maintain_aspect_ratio,
        )
        self.settings.validate()
        self.timeout = timeout
        self.client = client

        self.aspect_ratio = 0.0             # image height / width, 0 until loaded
        self.current_source = ''
        self.outputs: Optional[AsciiOutputs] = None
        self.error = ''

    @property
    def width(self) -> int:
        return self.settings.width

    @property
    def height(self) -> int:
        return self.settings.height

    @property
    def maintain_aspect_ratio(self) -> bool:
        return self.settings.maintain_aspect_ratio

    def set_width(self, width: int) -> None:
        """Set the width; with the lock on, the height follows."""
        _check_range('width', width, WIDTH_RANGE)
        self.settings.width = width
        if self.settings.maintain_aspect_ratio and self.aspect_ratio > 0:
            self.settings.height = round_half_up(width * self.aspect_ratio)

    def set_height(self, height: int) -> None:
        """Set the height; with the lock on, the width follows."""
        _check_range('height', height, HEIGHT_RANGE)
        self.settings.height = height
        if self.settings.maintain_aspect_ratio and self.aspect_ratio > 0:
            self.settings.width = round_half_up(height / self.aspect_ratio)

    def set_maintain_aspect_ratio(self, enabled: bool) -> None:
        self.settings.maintain_aspect_ratio = bool(enabled)

    def convert(self, source: str) -> Optional[AsciiOutputs]:
        """
        Load an image and convert it with the current settings.

        On a conversion error the message is stored in ``error`` and the
        previous outputs are kept.

        Args:
            source: Data URL, http(s) URL or path

        Returns:
            The new outputs, or None if the conversion failed
        """
        self.current_source = source

        try:
            image = load_image(source, timeout=self.timeout, client=self.client)
            self.aspect_ratio = image.height / image.width
            outputs = AsciiConverter(self.settings).convert(image)
        except ConversionError as err:
            logger.warning("Conversion failed: %s", err.message)
            self.error = err.message
            return None

        self.outputs = outputs
        self.error = ''
        logger.info("Converted image to %sx%s characters", outputs.width, outputs.height)
        return outputs

    def convert_again(self) -> Optional[AsciiOutputs]:
        """Re-run the conversion on the current image, if there is one."""
        if not self.current_source:
            return None
        return self.convert(self.current_source)

    def export(self, kind: str = 'plain') -> str:
        """
        Return one of the last outputs by name.

        Args:
            kind: 'plain', 'html' or 'color'

        Returns:
            The requested text, empty before the first successful conversion
        """
        if kind not in EXPORT_KINDS:
            raise ValueError(f"Unknown export kind: {kind}")
        if self.outputs is None:
            return ''
        if kind == 'plain':
            return self.outputs.plain
        if kind == 'html':
            return self.outputs.html
        return self.outputs.color_coded
