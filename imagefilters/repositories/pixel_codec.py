import logging

import numpy as np
from PIL import Image as PILImage

from ..errors import DecodeError, EncodeError
from ..models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


class PixelCodec:
    """
    Converts between Pillow images (the opaque handle) and PixelBuffer.
    No filter logic here.
    """

    @staticmethod
    def decode(image: PILImage.Image) -> PixelBuffer:
        if image is None:
            raise DecodeError("No image to decode")
        if not isinstance(image, PILImage.Image):
            raise DecodeError(f"Cannot decode object of type {type(image).__name__}")

        width, height = image.size
        if width == 0 or height == 0:
            raise DecodeError(f"Cannot decode empty image ({width}x{height})")

        try:
            rgba = image if image.mode == "RGBA" else image.convert("RGBA")
            pixels = np.array(rgba, dtype=np.uint8)
        except (OSError, ValueError) as err:
            raise DecodeError(f"Could not convert {image.mode} image to RGBA: {err}") from err

        logger.debug("Decoded %dx%d %s image", width, height, image.mode)
        return PixelBuffer(pixels)

    @staticmethod
    def encode(buffer: PixelBuffer) -> PILImage.Image:
        if buffer is None:
            raise EncodeError("No pixel buffer to encode")

        pixels = getattr(buffer, "pixels", None)
        if not isinstance(pixels, np.ndarray):
            raise EncodeError(f"Cannot encode object of type {type(buffer).__name__}")
        if pixels.ndim != 3 or pixels.shape[2] != 4 or 0 in pixels.shape[:2]:
            raise EncodeError(f"Malformed pixel buffer of shape {pixels.shape}")

        # fromarray can map the array memory directly; hand it a private copy.
        return PILImage.fromarray(np.array(pixels, dtype=np.uint8, order="C"))

