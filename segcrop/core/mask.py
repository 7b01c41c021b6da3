"""Combine a segmentation mask with an image's alpha channel."""

import numpy as np

from .buffer import ForegroundMask, PixelBuffer


def composite_mask(buffer: PixelBuffer, mask: ForegroundMask) -> PixelBuffer:
    """Write the inverted mask into a copy of the buffer's alpha channel.

    Each alpha becomes round((1 - mask) * 255), clamped to [0, 255]. Color
    channels are copied unchanged and the input buffer is left untouched.

    Args:
        buffer: Working image.
        mask: Per-pixel mask with the same dimensions as buffer.

    Returns:
        New buffer with the composited alpha.

    Raises:
        DimensionMismatchError: If the mask size does not match the buffer.
    """
    grid = mask.to_grid(buffer.width, buffer.height).astype(np.float64)
    alpha = np.floor((1.0 - grid) * 255.0 + 0.5)

    pixels = buffer.pixels.copy()
    pixels[:, :, 3] = np.clip(alpha, 0, 255).astype(np.uint8)
    return PixelBuffer(pixels=pixels, format=buffer.format)
