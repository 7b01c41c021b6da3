"""Image buffers and the pure processing stages of the auto-crop pipeline."""

from .bounds import content_extent, find_bounding_box
from .buffer import BoundingBox, ForegroundMask, PixelBuffer
from .io import crop_buffer, encode_image, load_image, scaled_dimensions
from .mask import composite_mask

__all__ = [
    "BoundingBox",
    "ForegroundMask",
    "PixelBuffer",
    "composite_mask",
    "content_extent",
    "crop_buffer",
    "encode_image",
    "find_bounding_box",
    "load_image",
    "scaled_dimensions",
]
