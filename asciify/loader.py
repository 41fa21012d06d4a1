"""
Image to ASCII Art Converter - Image Loading
============================================
Open an image from a data URL, an http(s) URL or a local path.

Only the header is parsed here; Pillow decodes pixel data lazily, so a
corrupt body surfaces later as a PixelReadError during conversion.
"""

import base64
import binascii
import io
import logging
import os
from typing import Optional
from urllib.parse import unquote_to_bytes

import httpx
from PIL import Image, UnidentifiedImageError

from asciify.constants import DEFAULT_FETCH_TIMEOUT
from asciify.exceptions import ImageDecodeError


logger = logging.getLogger(__name__)


def source_kind(source: str) -> str:
    """Classify an image source as 'data', 'url' or 'path'."""
    lowered = source[:8].lower()
    if lowered.startswith('data:'):
        return 'data'
    if lowered.startswith('http://') or lowered.startswith('https://'):
        return 'url'
    return 'path'


def decode_data_url(data_url: str) -> bytes:
    """
    Decode the payload of a ``data:`` URL.

    Args:
        data_url: e.g. ``data:image/png;base64,iVBORw0...``

    Returns:
        Raw payload bytes
    """
    header, sep, payload = data_url.partition(',')
    if not sep:
        raise ImageDecodeError()

    if header.lower().endswith(';base64'):
        try:
            return base64.b64decode(payload, validate=False)
        except (binascii.Error, ValueError) as err:
            raise ImageDecodeError() from err
    return unquote_to_bytes(payload)


def fetch_url(url: str,
              timeout: float = DEFAULT_FETCH_TIMEOUT,
              client: Optional[httpx.Client] = None) -> bytes:
    """
    Download image bytes over HTTP.

    Args:
        url: http(s) URL
        timeout: Request timeout in seconds
        client: Optional preconfigured client (its own timeout applies)

    Returns:
        Response body
    """
    try:
        if client is not None:
            response = client.get(url, follow_redirects=True)
        else:
            response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPError as err:
        logger.warning("Fetching %s failed: %s", url, err)
        raise ImageDecodeError() from err
    return response.content


def open_image_bytes(data: bytes) -> Image.Image:
    """Identify image bytes and return a lazily decoded PIL image."""
    try:
        return Image.open(io.BytesIO(data))
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as err:
        logger.warning("Could not identify image data: %s", err)
        raise ImageDecodeError() from err


def load_image(source: str,
               timeout: float = DEFAULT_FETCH_TIMEOUT,
               client: Optional[httpx.Client] = None) -> Image.Image:
    """
    Open an image from any supported source.

    Args:
        source: Data URL, http(s) URL or filesystem path
        timeout: Timeout for URL fetches
        client: Optional httpx client for URL fetches

    Returns:
        PIL Image

    Raises:
        ImageDecodeError: If the source cannot be read or is not an image
    """
    kind = source_kind(source)
    logger.debug("Loading image from %s source", kind)

    if kind == 'data':
        return open_image_bytes(decode_data_url(source))
    if kind == 'url':
        return open_image_bytes(fetch_url(source, timeout=timeout, client=client))

    path = os.path.expanduser(source)
    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as err:
        logger.warning("Could not read %s: %s", path, err)
        raise ImageDecodeError() from err
    return open_image_bytes(data)

