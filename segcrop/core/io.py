"""Image decoding, cropping and encoding."""

import io
import logging
from typing import Optional, Tuple

import cv2
import numpy as np
from PIL import Image, ImageOps

from ..config import JPEG_QUALITY, MAX_IMAGE_DIMENSION
from ..errors import DecodeError, EncodeError
from .buffer import BoundingBox, PixelBuffer

logger = logging.getLogger(__name__)

# Formats that accept a quality setting on save.
LOSSY_FORMATS = {"JPEG", "WEBP"}
# Formats that keep the alpha channel; everything else is written as RGB.
ALPHA_FORMATS = {"PNG", "WEBP", "TIFF"}
# Containers Pillow decodes but should be written back as plain JPEG.
FORMAT_ALIASES = {"MPO": "JPEG"}


def _scale_side(side: int, max_dimension: int, longer: int) -> int:
    # round(side * max_dimension / longer) with halves rounded up, in integers
    return max(1, (2 * side * max_dimension + longer) // (2 * longer))


def scaled_dimensions(
    width: int, height: int, max_dimension: int = MAX_IMAGE_DIMENSION
) -> Tuple[int, int]:
    """Compute the working size for an image.

    Images that fit inside max_dimension keep their size. Larger images
    are scaled so the longer side is exactly max_dimension, preserving
    aspect ratio.

    Args:
        width: Source width.
        height: Source height.
        max_dimension: Maximum width/height.

    Returns:
        Tuple of (width, height).
    """
    if width <= max_dimension and height <= max_dimension:
        return width, height

    if width > height:
        return max_dimension, _scale_side(height, max_dimension, width)
    return _scale_side(width, max_dimension, height), max_dimension


def load_image(data: bytes, max_dimension: int = MAX_IMAGE_DIMENSION) -> PixelBuffer:
    """Decode an image and scale it down to fit max_dimension.

    Args:
        data: Encoded image bytes.
        max_dimension: Maximum width/height of the returned buffer.

    Returns:
        Upright (EXIF orientation applied) RGBA PixelBuffer tagged with the
        source format.

    Raises:
        DecodeError: If the bytes are not a decodable image.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image_format = image.format
            # Phone cameras store rotated pixels plus an orientation tag
            upright = ImageOps.exif_transpose(image)
            pixels = np.array(upright.convert("RGBA"))
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Cannot decode image: {e}") from e

    height, width = pixels.shape[:2]
    new_width, new_height = scaled_dimensions(width, height, max_dimension)
    if (new_width, new_height) != (width, height):
        logger.debug(
            "Resizing %dx%d -> %dx%d", width, height, new_width, new_height
        )
        pixels = cv2.resize(
            pixels, (new_width, new_height), interpolation=cv2.INTER_AREA
        )

    return PixelBuffer(pixels=pixels, format=image_format)


def crop_buffer(buffer: PixelBuffer, box: BoundingBox) -> PixelBuffer:
    """Copy the pixels inside box into a new buffer.

    Args:
        buffer: Source buffer (original colors).
        box: Region to extract.

    Returns:
        Buffer of exactly box.width x box.height.

    Raises:
        ValueError: If box does not lie inside the buffer.
    """
    if not box.fits(buffer.width, buffer.height):
        raise ValueError(
            f"Bounding box {box} outside {buffer.width}x{buffer.height} image"
        )

    pixels = buffer.pixels[box.y : box.y + box.height, box.x : box.x + box.width]
    return PixelBuffer(pixels=pixels.copy(), format=buffer.format)


def encode_image(
    buffer: PixelBuffer,
    image_format: Optional[str] = None,
    quality: int = JPEG_QUALITY,
) -> bytes:
    """Encode a buffer, by default in the format it was decoded from.

    Args:
        buffer: Image to encode.
        image_format: Pillow format name; defaults to buffer.format, then JPEG.
        quality: Quality for lossy formats (ignored by lossless ones).

    Returns:
        Encoded image bytes.

    Raises:
        EncodeError: If the encoder fails or produces no output.
    """
    image_format = (image_format or buffer.format or "JPEG").upper()
    image_format = FORMAT_ALIASES.get(image_format, image_format)

    image = Image.fromarray(buffer.pixels)
    if image_format not in ALPHA_FORMATS:
        image = image.convert("RGB")

    params = {"quality": quality} if image_format in LOSSY_FORMATS else {}
    output = io.BytesIO()
    try:
        image.save(output, format=image_format, **params)
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(f"Cannot encode image as {image_format}: {e}") from e

    data = output.getvalue()
    if not data:
        raise EncodeError(f"Encoder produced no {image_format} output")
    return data
