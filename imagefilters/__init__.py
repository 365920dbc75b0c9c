from .errors import (
    ImageFiltersError,
    ResourceNotFoundError,
    DecodeError,
    EncodeError,
    InvalidDimensionsError,
    InvalidFactorError,
    UnknownFilterError,
)
from .models.filter_name import FilterName
from .models.image_adjustments import (
    NO_ARGUMENT,
    ContrastMode,
    normalize_brightness,
    normalize_contrast,
    normalize_contrast_primitive,
)
from .models.pixel_buffer import Pixel, PixelBuffer
from .pipeline.filter_pipeline import apply_by_name, apply_filter
from .repositories.image_repository import ImageRepository
from .repositories.pixel_codec import PixelCodec
from .services.image_session import ImageSession
from .services.statistics_service import StatisticsService
from .services.transform_service import TransformService

__version__ = "1.0.0"

__all__ = [
    "ImageFiltersError", "ResourceNotFoundError", "DecodeError", "EncodeError",
    "InvalidDimensionsError", "InvalidFactorError", "UnknownFilterError",
    "FilterName",
    "NO_ARGUMENT", "ContrastMode",
    "normalize_brightness", "normalize_contrast", "normalize_contrast_primitive",
    "Pixel", "PixelBuffer",
    "apply_by_name", "apply_filter",
    "ImageRepository", "PixelCodec",
    "ImageSession", "StatisticsService", "TransformService",
]
