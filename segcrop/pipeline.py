"""Auto-crop pipeline with fallback to the original image."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union

from .config import CropConfig
from .core.bounds import find_bounding_box
from .core.buffer import BoundingBox, ForegroundMask, PixelBuffer
from .core.io import crop_buffer, encode_image, load_image
from .core.mask import composite_mask
from .errors import AutoCropError, SegmentationError
from .segmentation.base import Segmenter, validate_mask

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    """Stages of a single auto-crop call."""

    IDLE = "idle"
    LOADING = "loading"
    SEGMENTING = "segmenting"
    COMPOSITING = "compositing"
    BOUNDS_SCAN = "bounds_scan"
    CROPPING = "cropping"
    DONE = "done"
    FALLBACK = "fallback"


@dataclass
class AutoCropResult:
    """Outcome of one auto-crop call.

    Attributes:
        data: Encoded output image. On fallback, the input bytes unchanged.
        state: Terminal state, DONE or FALLBACK.
        box: Crop box in working-image coordinates, None if nothing was cropped.
        size: (width, height) of the working image, None if loading failed.
        failed_stage: Stage that raised, on fallback.
        error: Exception that caused the fallback.
    """

    data: bytes
    state: PipelineState
    box: Optional[BoundingBox] = None
    size: Optional[Tuple[int, int]] = None
    failed_stage: Optional[PipelineState] = None
    error: Optional[Exception] = None

    @property
    def cropped(self) -> bool:
        """True if the output is a crop of the working image."""
        return self.state is PipelineState.DONE and self.box is not None

    @property
    def fell_back(self) -> bool:
        return self.state is PipelineState.FALLBACK


class AutoCropPipeline:
    """Crop a photo to the subject found by a segmenter.

    The pipeline keeps no per-call state, so one instance can serve
    concurrent calls as long as the segmenter can.
    """

    def __init__(self, segmenter: Segmenter, config: Optional[CropConfig] = None):
        """Initialize the pipeline.

        Args:
            segmenter: Mask provider, called once per image.
            config: Crop settings; defaults to CropConfig().
        """
        self.segmenter = segmenter
        self.config = config or CropConfig()

    def auto_crop(self, data: bytes) -> bytes:
        """Crop an encoded image, returning the input unchanged on failure."""
        return self.run(data).data

    def run(self, data: bytes) -> AutoCropResult:
        """Run all stages on an encoded image.

        Args:
            data: Encoded image bytes.

        Returns:
            AutoCropResult. Stage failures end in FALLBACK rather than raising.

        Raises:
            TypeError: If data is not bytes-like.
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Expected encoded image bytes, got {type(data).__name__}")
        data = bytes(data)

        stage = PipelineState.IDLE
        try:
            stage = self._advance(stage, PipelineState.LOADING)
            image = load_image(data, self.config.max_dimension)

            stage = self._advance(stage, PipelineState.SEGMENTING)
            mask = self._segment(image)

            stage = self._advance(stage, PipelineState.COMPOSITING)
            masked = composite_mask(image, mask)

            stage = self._advance(stage, PipelineState.BOUNDS_SCAN)
            box = find_bounding_box(
                masked, self.config.alpha_threshold, self.config.padding
            )
            if box is None:
                logger.info("No subject detected, returning uncropped image")
                output = encode_image(image, quality=self.config.quality)
            else:
                logger.info("Bounding box found: %s", box)
                stage = self._advance(stage, PipelineState.CROPPING)
                output = encode_image(
                    crop_buffer(image, box), quality=self.config.quality
                )
        except Exception as e:
            logger.warning(
                "Auto-crop failed while %s, returning original image: %s",
                stage.value,
                e,
            )
            return AutoCropResult(
                data=data,
                state=PipelineState.FALLBACK,
                failed_stage=stage,
                error=e,
            )

        self._advance(stage, PipelineState.DONE)
        return AutoCropResult(
            data=output, state=PipelineState.DONE, box=box, size=image.size
        )

    def _segment(self, image: PixelBuffer) -> ForegroundMask:
        try:
            mask = self.segmenter.segment(image)
        except AutoCropError:
            raise
        except Exception as e:
            raise SegmentationError(f"Segmenter failed: {e}") from e
        return validate_mask(mask)

    @staticmethod
    def _advance(current: PipelineState, target: PipelineState) -> PipelineState:
        logger.debug("%s -> %s", current.value, target.value)
        return target


def auto_crop_file(path: Union[str, Path], pipeline: AutoCropPipeline) -> bytes:
    """Read an image file and auto-crop it.

    Args:
        path: Image file to read.
        pipeline: Pipeline to run.

    Returns:
        Encoded output bytes.

    Raises:
        OSError: If the file cannot be read. Nothing is cropped in that case.
    """
    data = Path(path).read_bytes()
    return pipeline.auto_crop(data)
