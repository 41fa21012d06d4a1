"""
Shared test fixtures for the asciify test suite.

Images are built in memory with Pillow and numpy so no fixture files are
needed.
"""

import base64
import io
import struct
import zlib

import numpy as np
import pytest
from PIL import Image


def encode_png(image: Image.Image) -> bytes:
    """Encode a PIL image as PNG bytes."""
    buf = io.BytesIO()
    image.save(buf, format='PNG')
    return buf.getvalue()


def to_data_url(data: bytes, mime_type: str = 'image/png') -> str:
    """Encode bytes as a base64 data URL, as a browser file picker would."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def _png_chunk(kind: bytes, body: bytes) -> bytes:
    return (struct.pack('>I', len(body)) + kind + body +
            struct.pack('>I', zlib.crc32(kind + body) & 0xFFFFFFFF))


def oversized_png(width: int = 20000, height: int = 20000) -> bytes:
    """PNG whose header declares far more pixels than Pillow will open."""
    ihdr = struct.pack('>IIBBBBB', width, height, 8, 2, 0, 0, 0)
    return (b'\x89PNG\r\n\x1a\n' +
            _png_chunk(b'IHDR', ihdr) +
            _png_chunk(b'IDAT', zlib.compress(b'\x00' * 64)) +
            _png_chunk(b'IEND', b''))


def noise_image(width: int, height: int, seed: int = 0, mode: str = 'RGB') -> Image.Image:
    """Random-pixel image; incompressible, so its PNG body is large."""
    rng = np.random.default_rng(seed)
    channels = len(mode)
    arr = rng.integers(0, 256, size=(height, width, channels), dtype=np.uint8)
    return Image.fromarray(arr)


@pytest.fixture
def png_bytes():
    """Factory: PNG bytes for a solid-color image."""
    def make(width=40, height=20, color=(200, 100, 50)):
        mode = 'RGBA' if len(color) == 4 else 'RGB'
        return encode_png(Image.new(mode, (width, height), color))
    return make


@pytest.fixture
def data_url(png_bytes):
    """Factory: base64 data URL for a solid-color PNG."""
    def make(width=40, height=20, color=(200, 100, 50)):
        return to_data_url(png_bytes(width, height, color))
    return make


@pytest.fixture
def truncated_data_url():
    """Data URL whose PNG header parses but whose pixel data is cut short."""
    data = encode_png(noise_image(64, 64, seed=7))
    return to_data_url(data[:len(data) // 2])
