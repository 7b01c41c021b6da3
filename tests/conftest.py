import io

import numpy as np
import pytest
from PIL import Image

from segcrop.core.buffer import ForegroundMask, PixelBuffer


def gradient_rgb(width: int, height: int) -> np.ndarray:
    xs = np.arange(width)[None, :]
    ys = np.arange(height)[:, None]
    rgb = np.zeros((height, width, 3), dtype=np.uint8)
    rgb[..., 0] = xs % 256
    rgb[..., 1] = ys % 256
    rgb[..., 2] = (xs + ys) % 256
    return rgb


class StubSegmenter:
    """Segmenter returning 0.0 inside an inclusive rectangle and 1.0 elsewhere."""

    def __init__(self, rect=None, error=None, result=None):
        self.rect = rect
        self.error = error
        self.result = result
        self.calls = 0
        self.seen_sizes = []

    def segment(self, image: PixelBuffer) -> ForegroundMask:
        self.calls += 1
        self.seen_sizes.append(image.size)
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result
        values = np.ones((image.height, image.width), dtype=np.float32)
        if self.rect is not None:
            x0, y0, x1, y1 = self.rect
            values[y0 : y1 + 1, x0 : x1 + 1] = 0.0
        return ForegroundMask(values=values)


@pytest.fixture
def make_image_bytes():
    def _make(width, height, image_format="JPEG"):
        output = io.BytesIO()
        Image.fromarray(gradient_rgb(width, height)).save(output, format=image_format)
        return output.getvalue()

    return _make


@pytest.fixture
def make_rotated_jpeg():
    """JPEG whose stored pixels are width x height, tagged EXIF orientation 6.

    Viewers rotate it 90 degrees clockwise, so it displays as height x width.
    """

    def _make(width, height):
        exif = Image.Exif()
        exif[0x0112] = 6
        output = io.BytesIO()
        Image.fromarray(gradient_rgb(width, height)).save(
            output, format="JPEG", exif=exif
        )
        return output.getvalue()

    return _make


@pytest.fixture
def make_buffer():
    def _make(width, height, alpha=255, image_format="PNG"):
        pixels = np.dstack(
            [gradient_rgb(width, height), np.full((height, width), alpha, dtype=np.uint8)]
        )
        return PixelBuffer(pixels=pixels, format=image_format)

    return _make


@pytest.fixture
def stub_segmenter():
    return StubSegmenter
