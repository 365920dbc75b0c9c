from io import BytesIO

import numpy as np
import pytest
from PIL import Image as PILImage

from imagefilters.models.pixel_buffer import PixelBuffer
from imagefilters.repositories.image_repository import ImageRepository


def make_buffer(rows) -> PixelBuffer:
    """Build a buffer from a list of rows of (r, g, b, a) tuples."""
    return PixelBuffer(np.array(rows, dtype=np.uint8))


def png_bytes(image: PILImage.Image) -> bytes:
    out = BytesIO()
    image.save(out, format="PNG")
    return out.getvalue()


@pytest.fixture
def two_pixel_buffer() -> PixelBuffer:
    """Black and white, both opaque, side by side."""
    return make_buffer([[(0, 0, 0, 255), (255, 255, 255, 255)]])


@pytest.fixture
def mixed_buffer() -> PixelBuffer:
    """2x2 buffer with distinct channels and a translucent pixel."""
    return make_buffer([
        [(100, 100, 100, 255), (200, 10, 63, 128)],
        [(10, 20, 31, 0), (255, 255, 254, 255)],
    ])


@pytest.fixture
def ramp_buffer() -> PixelBuffer:
    """16x16 buffer whose pixel i has R = G = B = i, alpha 200."""
    values = np.arange(256, dtype=np.uint8).reshape((16, 16))
    pixels = np.stack([values, values, values, np.full_like(values, 200)], axis=-1)
    return PixelBuffer(pixels)


@pytest.fixture
def mixed_image(mixed_buffer) -> PILImage.Image:
    return PILImage.fromarray(mixed_buffer.pixels.copy())


@pytest.fixture
def resource_dir(tmp_path, mixed_image):
    """A resource folder holding sample.png and plain.png."""
    folder = tmp_path / "resources"
    folder.mkdir()
    mixed_image.save(folder / "sample.png")
    PILImage.new("RGB", (3, 2), (40, 80, 120)).save(folder / "plain.png")
    return folder


@pytest.fixture
def repository(resource_dir) -> ImageRepository:
    return ImageRepository(resource_dir=resource_dir, default_name="sample")
