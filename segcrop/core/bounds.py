"""Bounding box extraction from a composited alpha channel."""

from typing import Optional, Tuple

import numpy as np

from ..config import ALPHA_THRESHOLD, PADDING
from .buffer import BoundingBox, PixelBuffer


def content_extent(
    masked: PixelBuffer, alpha_threshold: int = ALPHA_THRESHOLD
) -> Optional[Tuple[int, int, int, int]]:
    """Find the extent of content pixels, before padding.

    A pixel is content when its alpha is strictly greater than
    alpha_threshold. Every pixel is considered.

    Args:
        masked: Buffer whose alpha channel carries the composited mask.
        alpha_threshold: Alpha value a pixel must exceed.

    Returns:
        Inclusive (min_x, min_y, max_x, max_y), or None if nothing qualifies.
    """
    content = masked.alpha > alpha_threshold
    rows = np.flatnonzero(content.any(axis=1))
    if rows.size == 0:
        return None
    cols = np.flatnonzero(content.any(axis=0))
    return int(cols[0]), int(rows[0]), int(cols[-1]), int(rows[-1])


def find_bounding_box(
    masked: PixelBuffer,
    alpha_threshold: int = ALPHA_THRESHOLD,
    padding: int = PADDING,
) -> Optional[BoundingBox]:
    """Compute the padded crop box around all content pixels.

    Args:
        masked: Buffer whose alpha channel carries the composited mask.
        alpha_threshold: Alpha value a pixel must exceed to count as content.
        padding: Pixels added on every side before clamping to the image.

    Returns:
        BoundingBox, or None when the buffer has no content.
    """
    extent = content_extent(masked, alpha_threshold)
    if extent is None:
        return None

    min_x, min_y, max_x, max_y = extent
    min_x = max(0, min_x - padding)
    min_y = max(0, min_y - padding)
    max_x = min(masked.width - 1, max_x + padding)
    max_y = min(masked.height - 1, max_y + padding)

    return BoundingBox(
        x=min_x,
        y=min_y,
        width=max_x - min_x + 1,
        height=max_y - min_y + 1,
    )
