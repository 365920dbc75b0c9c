from __future__ import annotations
from dataclasses import dataclass
from typing import NamedTuple
import numpy as np

from ..errors import InvalidDimensionsError


class Pixel(NamedTuple):
    red: int
    green: int
    blue: int
    alpha: int


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    Simple data object: dense RGBA pixels of a decoded image.
    Pixel (x, y) lives at linear index y * width + x.
    """
    pixels: np.ndarray  # Shape (H, W, 4), dtype uint8, RGBA order.

    def __post_init__(self):
        pixels = self.pixels
        if not isinstance(pixels, np.ndarray):
            raise InvalidDimensionsError(f"Expected a numpy array, got {type(pixels).__name__}")
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise InvalidDimensionsError(f"Expected shape (H, W, 4), got {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise InvalidDimensionsError(f"Expected dtype uint8, got {pixels.dtype}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise InvalidDimensionsError(f"Empty pixel buffer: {pixels.shape[1]}x{pixels.shape[0]}")

    @classmethod
    def from_flat(cls, width: int, height: int, pixels) -> "PixelBuffer":
        """Build a buffer from a flat sequence of (r, g, b, a) tuples in row-major order."""
        if width <= 0 or height <= 0:
            raise InvalidDimensionsError(f"Invalid dimensions: {width}x{height}")
        arr = np.asarray(pixels, dtype=np.uint8)
        if arr.shape != (width * height, 4):
            raise InvalidDimensionsError(
                f"Expected {width * height} RGBA pixels, got array of shape {arr.shape}"
            )
        return cls(arr.reshape((height, width, 4)).copy())

    @classmethod
    def filled(cls, width: int, height: int, rgba) -> "PixelBuffer":
        """Return a width x height buffer where every pixel equals *rgba*."""
        if width <= 0 or height <= 0:
            raise InvalidDimensionsError(f"Invalid dimensions: {width}x{height}")
        arr = np.empty((height, width, 4), dtype=np.uint8)
        arr[...] = np.asarray(rgba, dtype=np.uint8)
        return cls(arr)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> int:
        return self.width * self.height

    def flat(self) -> np.ndarray:
        """Return a read-only (width*height, 4) view indexed by y * width + x."""
        view = self.pixels.reshape((-1, 4))
        view.flags.writeable = False
        return view

    def pixel(self, index: int) -> Pixel:
        if not 0 <= index < self.size:
            raise IndexError(f"Pixel index {index} out of range for {self.width}x{self.height}")
        y, x = divmod(index, self.width)
        return self.pixel_at(x, y)

    def pixel_at(self, x: int, y: int) -> Pixel:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) out of range for {self.width}x{self.height}")
        return Pixel(*(int(c) for c in self.pixels[y, x]))

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(np.array_equal(self.pixels, other.pixels))

    __hash__ = None
