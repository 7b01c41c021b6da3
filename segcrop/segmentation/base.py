"""Base segmenter protocol and mask validation."""

from typing import Protocol

import numpy as np

from ..core.buffer import ForegroundMask, PixelBuffer
from ..errors import SegmentationError


class Segmenter(Protocol):
    """Protocol for segmentation models."""

    def segment(self, image: PixelBuffer) -> ForegroundMask:
        """Compute a mask for an image.

        Args:
            image: Working image (RGBA).

        Returns:
            ForegroundMask with the image's dimensions.
        """
        ...


def validate_mask(mask: ForegroundMask) -> ForegroundMask:
    """Check a segmenter's output before it is composited.

    Only the values are checked here; composite_mask checks the size.

    Args:
        mask: Value returned by Segmenter.segment.

    Returns:
        The mask, unchanged.

    Raises:
        SegmentationError: If the output is not a usable mask.
    """
    if not isinstance(mask, ForegroundMask):
        raise SegmentationError(
            f"Segmenter returned {type(mask).__name__}, expected ForegroundMask"
        )

    values = mask.values
    if values.size == 0:
        raise SegmentationError("Segmenter returned an empty mask")
    if not np.all(np.isfinite(values)):
        raise SegmentationError("Mask contains non-finite values")
    if values.min() < 0.0 or values.max() > 1.0:
        raise SegmentationError(
            f"Mask values outside [0, 1]: {values.min():.3f}..{values.max():.3f}"
        )

    return mask
