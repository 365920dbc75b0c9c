from __future__ import annotations

import logging
import os
from typing import Callable, Dict, Iterable, Optional, Union

from PIL import Image as PILImage
from dotenv import load_dotenv

from ..models.image_adjustments import (
    NO_ARGUMENT,
    ContrastMode,
    normalize_contrast_primitive,
    resolve_brightness,
    resolve_contrast,
)
from ..models.pixel_buffer import PixelBuffer
from ..pipeline.filter_pipeline import apply_by_name
from ..repositories.image_repository import ImageRepository
from ..repositories.pixel_codec import PixelCodec
from .statistics_service import StatisticsService
from .transform_service import TransformService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class ImageSession:
    """
    One image plus the filters that can be applied to it.

    Sessions are values: every transform runs a pure PixelBuffer transform on
    the decoded pixels and returns a *new* session wrapping the re-encoded
    result.  The session it was called on keeps its image, so

        base = ImageSession.from_name("sample")
        result = base.more_contrast(3.0).darken(0.3).grey_scale()

    leaves ``base`` untouched.
    """

    codec = PixelCodec()

    def __init__(self, image: PILImage.Image, *, strict: Optional[bool] = None):
        # Decode once up front so a bad handle fails here, not on first use.
        self._buffer = self.codec.decode(image)
        self._image = self.codec.encode(self._buffer)
        self.strict = _env_flag("FILTER_STRICT") if strict is None else strict

    # ─── Construction ──────────────────────────────────────────────
    @classmethod
    def from_name(cls, name: str, repository: ImageRepository = None, **kwargs) -> "ImageSession":
        repository = repository or ImageRepository()
        return cls(repository.load(name), **kwargs)

    @classmethod
    def from_path(cls, path, repository: ImageRepository = None, **kwargs) -> "ImageSession":
        repository = repository or ImageRepository()
        return cls(repository.load_path(path), **kwargs)

    @classmethod
    def from_default(cls, repository: ImageRepository = None, **kwargs) -> "ImageSession":
        repository = repository or ImageRepository()
        return cls(repository.load_default(), **kwargs)

    @classmethod
    def from_buffer(cls, buffer: PixelBuffer, **kwargs) -> "ImageSession":
        return cls(cls.codec.encode(buffer), **kwargs)

    # ─── State ─────────────────────────────────────────────────────
    @property
    def image(self) -> PILImage.Image:
        """A copy of the current image; mutating it does not affect the session."""
        return self._image.copy()

    @property
    def buffer(self) -> PixelBuffer:
        return PixelBuffer(self._buffer.pixels.copy())

    @property
    def width(self) -> int:
        return self._buffer.width

    @property
    def height(self) -> int:
        return self._buffer.height

    def __repr__(self):
        return f"ImageSession({self.width}x{self.height}, strict={self.strict})"

    def _derive(self, transform: Callable[[PixelBuffer], PixelBuffer]) -> "ImageSession":
        result = transform(self._buffer)
        logger.debug("Derived %dx%d session via %s", result.width, result.height,
                     getattr(transform, "__name__", "transform"))
        return type(self)(self.codec.encode(result), strict=self.strict)

    # ─── Filters ───────────────────────────────────────────────────
    def lighten(self, percent: Union[float, None] = NO_ARGUMENT) -> "ImageSession":
        factor = resolve_brightness(percent)
        return self._derive(lambda buf: TransformService.lighten(buf, factor))

    def darken(self, percent: Union[float, None] = NO_ARGUMENT) -> "ImageSession":
        factor = resolve_brightness(percent)
        return self._derive(lambda buf: TransformService.darken(buf, factor))

    def less_contrast(self, alpha: Union[float, None] = NO_ARGUMENT) -> "ImageSession":
        """
        Reduce contrast.

        With no argument the factor is 0.5.  An explicit None is neutral (1.0),
        values above 1 are inverted (4 → 0.25).
        """
        return self.change_contrast(resolve_contrast(alpha, ContrastMode.LESS))

    def more_contrast(self, alpha: Union[float, None] = NO_ARGUMENT) -> "ImageSession":
        """
        Increase contrast.

        With no argument the factor is 2.0.  An explicit None is neutral (1.0),
        values below 1 are inverted (0.25 → 4).
        """
        return self.change_contrast(resolve_contrast(alpha, ContrastMode.MORE))

    def change_contrast(self, alpha: Optional[float] = None) -> "ImageSession":
        factor = normalize_contrast_primitive(alpha)
        return self._derive(lambda buf: TransformService.change_contrast(buf, factor))

    def grey_scale(self) -> "ImageSession":
        return self._derive(TransformService.grey_scale)

    # ─── Dispatch ──────────────────────────────────────────────────
    def filter(self, names: Union[str, Iterable[str]], *, strict: Optional[bool] = None) -> "ImageSession":
        """Apply one filter name, or several in order, with default parameters."""
        return apply_by_name(self, names, strict=self.strict if strict is None else strict)

    # ─── Statistics ────────────────────────────────────────────────
    def rgba_averages(self) -> Dict[str, int]:
        return StatisticsService.rgba_averages(self._buffer)
