"""Segmentation collaborators producing per-pixel masks."""

from ..core.buffer import ForegroundMask
from .base import Segmenter, validate_mask

# Lazy imports for torch/transformers-backed segmenters
def __getattr__(name):
    if name in ("SegformerSegmenter", "resolve_device"):
        from . import segformer
        return getattr(segformer, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    "ForegroundMask",
    "Segmenter",
    "SegformerSegmenter",
    "resolve_device",
    "validate_mask",
]
