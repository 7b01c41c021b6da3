"""Segmentation-guided auto-crop for photographs."""

__version__ = "0.1.0"

from .core.buffer import BoundingBox, ForegroundMask, PixelBuffer
from .errors import (
    AutoCropError,
    DecodeError,
    DimensionMismatchError,
    EncodeError,
    SegmentationError,
)
from .pipeline import AutoCropPipeline, AutoCropResult, PipelineState, auto_crop_file
from .segmentation.base import Segmenter

__all__ = [
    "__version__",
    "AutoCropError",
    "AutoCropPipeline",
    "AutoCropResult",
    "BoundingBox",
    "DecodeError",
    "DimensionMismatchError",
    "EncodeError",
    "ForegroundMask",
    "PipelineState",
    "PixelBuffer",
    "SegmentationError",
    "Segmenter",
    "auto_crop_file",
]
