from .filter_name import FilterName
from .pixel_buffer import Pixel, PixelBuffer

__all__ = ["FilterName", "Pixel", "PixelBuffer"]
