"""Pixel buffer, mask and bounding box data structures."""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..errors import DimensionMismatchError


@dataclass
class PixelBuffer:
    """Decoded image as interleaved 8-bit RGBA samples.

    Attributes:
        pixels: Array of shape (height, width, 4), dtype uint8, RGBA order.
        format: Pillow name of the container the image was decoded from
            (e.g. 'JPEG', 'PNG'), used to re-encode in the same format.
    """

    pixels: np.ndarray
    format: Optional[str] = None

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError(
                f"Expected RGBA array of shape (height, width, 4), got {self.pixels.shape}"
            )
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"Expected uint8 samples, got {self.pixels.dtype}")
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Empty pixel buffer: {self.width}x{self.height}")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        """Get (width, height)."""
        return self.width, self.height

    @property
    def alpha(self) -> np.ndarray:
        """Get the alpha channel as a (height, width) view."""
        return self.pixels[:, :, 3]


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned crop rectangle in pixel coordinates.

    Attributes:
        x: Left edge (inclusive).
        y: Top edge (inclusive).
        width: Width in pixels, at least 1.
        height: Height in pixels, at least 1.
    """

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        """Inclusive right edge."""
        return self.x + self.width - 1

    @property
    def bottom(self) -> int:
        """Inclusive bottom edge."""
        return self.y + self.height - 1

    def fits(self, width: int, height: int) -> bool:
        """Check whether the box lies inside a width x height canvas."""
        return (
            self.x >= 0
            and self.y >= 0
            and self.width >= 1
            and self.height >= 1
            and self.x + self.width <= width
            and self.y + self.height <= height
        )


@dataclass
class ForegroundMask:
    """Per-pixel mask values in [0.0, 1.0], row-major.

    Produced by a segmenter; the pipeline only reads it.

    Attributes:
        values: Either a (height, width) array or a flat array of
            width * height values. Stored as float32.
    """

    values: np.ndarray

    def __post_init__(self):
        self.values = np.asarray(self.values, dtype=np.float32)

    def to_grid(self, width: int, height: int) -> np.ndarray:
        """Get the values as a (height, width) array.

        Raises:
            DimensionMismatchError: If the mask does not cover width x height.
        """
        values = self.values
        if values.ndim == 2 and values.shape != (height, width):
            raise DimensionMismatchError(
                f"Mask shape {values.shape} does not match image {width}x{height}"
            )
        if values.ndim > 2 or values.size != width * height:
            raise DimensionMismatchError(
                f"Mask has {values.size} values, image has {width * height} pixels"
            )
        return values.reshape(height, width)
