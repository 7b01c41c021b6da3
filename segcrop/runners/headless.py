"""Headless single-image runner."""

import sys
from pathlib import Path

from ..config import ProcessingConfig, SegmenterConfig
from ..errors import SegmentationError
from ..pipeline import AutoCropPipeline, AutoCropResult, PipelineState
from ..segmentation.base import Segmenter


def create_segmenter(config: SegmenterConfig) -> Segmenter:
    """Create the segmentation model from config.

    Args:
        config: Segmenter configuration.

    Returns:
        Loaded segmenter.

    Raises:
        SegmentationError: If the model cannot be loaded.
    """
    from ..segmentation.segformer import SegformerSegmenter

    print(f"Loading segmentation model {config.model_name}...")
    return SegformerSegmenter.from_config(config)


def run_headless(config: ProcessingConfig) -> AutoCropResult:
    """Auto-crop one image file and write the result.

    A model that fails to load is treated like any other stage failure:
    the original image is written unchanged.

    Args:
        config: Processing configuration.

    Returns:
        Result of the pipeline run.

    Raises:
        OSError: If the input cannot be read or the output cannot be written.
    """
    data = Path(config.input_path).read_bytes()

    try:
        segmenter = create_segmenter(config.segmenter)
    except SegmentationError as e:
        print(f"Segmentation model unavailable: {e}", file=sys.stderr)
        result = AutoCropResult(
            data=data,
            state=PipelineState.FALLBACK,
            failed_stage=PipelineState.SEGMENTING,
            error=e,
        )
    else:
        pipeline = AutoCropPipeline(segmenter, config.crop)
        result = pipeline.run(data)

    Path(config.output_path).write_bytes(result.data)

    if result.cropped:
        box = result.box
        print(
            f"Cropped to {box.width}x{box.height} at ({box.x}, {box.y}) "
            f"of {result.size[0]}x{result.size[1]}"
        )
    elif result.fell_back:
        print(
            f"Auto-crop failed while {result.failed_stage.value}: {result.error}",
            file=sys.stderr,
        )
        print("Original image kept unchanged.", file=sys.stderr)
    else:
        print("No subject detected, image resized only.")

    print(f"Output saved to: {config.output_path}")
    return result
