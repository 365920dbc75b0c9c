from typing import Dict

import numpy as np

from ..errors import InvalidDimensionsError
from ..models.pixel_buffer import PixelBuffer

CHANNELS = ("red", "green", "blue", "alpha")


class StatisticsService:
    """Summary statistics over a PixelBuffer."""

    @staticmethod
    def rgba_averages(buffer: PixelBuffer) -> Dict[str, int]:
        """
        Per-channel mean, truncated to an int.

        Args:
            buffer: Pixels to average.

        Returns:
            dict: {"red": r, "green": g, "blue": b, "alpha": a}
        """
        count = buffer.width * buffer.height if buffer is not None else 0
        if count == 0:
            raise InvalidDimensionsError("Cannot average an empty pixel buffer")

        # uint64 sums cannot overflow for any realistic image size
        totals = buffer.pixels.reshape((-1, 4)).sum(axis=0, dtype=np.uint64)
        return {name: int(total) // count for name, total in zip(CHANNELS, totals)}
