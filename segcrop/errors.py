"""Exception types raised by the auto-crop stages."""


class AutoCropError(Exception):
    """Base class for failures inside the auto-crop pipeline."""


class DecodeError(AutoCropError):
    """Input bytes could not be decoded as an image."""


class SegmentationError(AutoCropError):
    """The segmenter failed or returned a malformed mask."""


class DimensionMismatchError(AutoCropError):
    """Mask dimensions do not match the image they were computed from."""


class EncodeError(AutoCropError):
    """The output image could not be encoded."""
