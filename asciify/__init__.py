"""
Image to ASCII Art Converter
============================
Convert raster images into plain, HTML-colored and color-coded ASCII art.
"""

from asciify.constants import ASCII_CHARS, HEIGHT_RANGE, WIDTH_RANGE
from asciify.converter import (
    AsciiConverter,
    AsciiOutputs,
    ConversionSettings,
    image_to_ascii,
    resolve_dimensions,
)
from asciify.exceptions import ConversionError, ImageDecodeError, PixelReadError
from asciify.formatters import AnsiFormatter, HtmlFormatter
from asciify.loader import load_image
from asciify.palette import rgb_to_ansi256, rgb_to_hex
from asciify.session import ConverterSession

__version__ = '0.1.0'

__all__ = [
    # Main classes
    'AsciiConverter',
    'AsciiOutputs',
    'ConversionSettings',
    'ConverterSession',

    # Errors
    'ConversionError',
    'ImageDecodeError',
    'PixelReadError',

    # Formatters
    'AnsiFormatter',
    'HtmlFormatter',

    # Functions
    'image_to_ascii',
    'load_image',
    'resolve_dimensions',
    'rgb_to_ansi256',
    'rgb_to_hex',

    # Constants
    'ASCII_CHARS',
    'WIDTH_RANGE',
    'HEIGHT_RANGE',
]
