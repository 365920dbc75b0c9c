from __future__ import annotations
import logging
import math

import numpy as np

from ..errors import InvalidFactorError
from ..models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

_MID_GREY = 128.0


class TransformService:
    """
    Per-pixel brightness/contrast/greyscale transforms.

    *   Pure: every call returns a new PixelBuffer, the input is left as is.
    *   Factors are expected to be normalized already (see image_adjustments).
    *   Alpha is never touched.
    *   NaN or infinite factors raise InvalidFactorError.
    """

    @staticmethod
    def _clamp(values: np.ndarray) -> np.ndarray:
        """Truncate toward zero, then clamp to [0, 255]."""
        # Huge finite factors can overflow to +-inf; NaN must never reach the cast.
        values = np.nan_to_num(values, nan=0.0, posinf=255.0, neginf=0.0)
        return np.clip(np.trunc(values), 0, 255).astype(np.uint8)

    @staticmethod
    def _check_factor(factor: float) -> float:
        factor = float(factor)
        if not math.isfinite(factor):
            raise InvalidFactorError(f"Factor must be finite, got {factor}")
        return factor

    @classmethod
    def _map_rgb(cls, buffer: PixelBuffer, fn) -> PixelBuffer:
        out = buffer.pixels.copy()
        rgb = buffer.pixels[..., :3].astype(np.float64)
        out[..., :3] = cls._clamp(fn(rgb))
        return PixelBuffer(out)

    # ─── Public API ────────────────────────────────────────────────
    @classmethod
    def lighten(cls, buffer: PixelBuffer, factor: float) -> PixelBuffer:
        """Push every channel toward white: v + (255 - v) * factor."""
        factor = cls._check_factor(factor)
        logger.debug("lighten factor=%.4f on %dx%d", factor, buffer.width, buffer.height)
        return cls._map_rgb(buffer, lambda v: v + (255.0 - v) * factor)

    @classmethod
    def darken(cls, buffer: PixelBuffer, factor: float) -> PixelBuffer:
        """Push every channel toward black: v * (1 - factor)."""
        factor = cls._check_factor(factor)
        logger.debug("darken factor=%.4f on %dx%d", factor, buffer.width, buffer.height)
        return cls._map_rgb(buffer, lambda v: v * (1.0 - factor))

    @classmethod
    def change_contrast(cls, buffer: PixelBuffer, factor: float) -> PixelBuffer:
        """
        Scale each channel's distance from mid-grey: factor * (v - 128) + 128.

        1.0 is the identity, 0.0 flattens to 128, >1 adds contrast.
        """
        factor = cls._check_factor(factor)
        logger.debug("contrast factor=%.4f on %dx%d", factor, buffer.width, buffer.height)
        return cls._map_rgb(buffer, lambda v: factor * (v - _MID_GREY) + _MID_GREY)

    @classmethod
    def grey_scale(cls, buffer: PixelBuffer) -> PixelBuffer:
        """Replace R, G and B with their plain mean."""
        logger.debug("greyscale on %dx%d", buffer.width, buffer.height)

        def _mean(rgb):
            grey = rgb.sum(axis=-1, keepdims=True) / 3.0
            return np.broadcast_to(grey, rgb.shape)

        return cls._map_rgb(buffer, _mean)
