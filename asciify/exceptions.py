"""Recoverable conversion errors."""

from typing import Optional

from asciify.constants import LOAD_ERROR_MESSAGE, PROCESS_ERROR_MESSAGE


class ConversionError(Exception):
    """Base class for errors that leave the previous outputs untouched."""

    default_message = PROCESS_ERROR_MESSAGE

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return self.args[0]


class ImageDecodeError(ConversionError):
    """The image source could not be fetched or identified."""

    default_message = LOAD_ERROR_MESSAGE


class PixelReadError(ConversionError):
    """The decoded image could not be read back as RGBA pixels."""

    default_message = PROCESS_ERROR_MESSAGE
