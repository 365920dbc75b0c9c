from .image_repository import ImageRepository
from .pixel_codec import PixelCodec

__all__ = ["ImageRepository", "PixelCodec"]
