"""Command-line interface for segcrop."""

import argparse
import logging
from pathlib import Path

from . import __version__
from .config import (
    DEFAULT_SEGMENTER_MODEL,
    DEVICES,
    JPEG_QUALITY,
    MAX_IMAGE_DIMENSION,
    ProcessingConfig,
)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

EPILOG = """\
Examples:
  segcrop photo.jpg
  segcrop photo.jpg -o cropped.jpg
  segcrop photo.png --device cpu --local-files-only -v

The output keeps the input's format. If cropping fails for any reason the
original image is written unchanged.
"""


def default_output_path(input_path: str) -> str:
    """Get '<stem>_cropped<suffix>' next to the input."""
    path = Path(input_path)
    return str(path.with_name(f"{path.stem}_cropped{path.suffix}"))


def configure_logging(verbose: bool = False) -> None:
    """Configure root logger for command-line runs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


def parse_args(args=None) -> ProcessingConfig:
    """Parse command-line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv).

    Returns:
        ProcessingConfig with parsed options.
    """
    parser = argparse.ArgumentParser(
        prog="segcrop",
        description="Crop a photo to the subject found by a segmentation model.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "input",
        type=str,
        help="Input image (.jpg, .png, .webp)",
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output image (default: <input>_cropped.<ext> next to the input)",
    )

    parser.add_argument(
        "--max-dimension",
        type=int,
        default=MAX_IMAGE_DIMENSION,
        help=f"Scale images down to this max width/height before segmenting (default: {MAX_IMAGE_DIMENSION})",
    )

    parser.add_argument(
        "--quality",
        type=int,
        default=JPEG_QUALITY,
        help=f"Output quality for JPEG/WebP, 1-100 (default: {JPEG_QUALITY})",
    )

    # Segmentation model arguments
    parser.add_argument(
        "--model",
        type=str,
        default=DEFAULT_SEGMENTER_MODEL,
        help=f"SegFormer model id or checkpoint directory (default: {DEFAULT_SEGMENTER_MODEL})",
    )

    parser.add_argument(
        "--device",
        type=str,
        default="auto",
        choices=DEVICES,
        help="Inference device; auto uses CUDA when available (default: auto)",
    )

    parser.add_argument(
        "--local-files-only",
        action="store_true",
        help="Do not download model weights, use the local cache only",
    )

    parser.add_argument(
        "--cache-dir",
        type=str,
        default=None,
        help="Directory for downloaded model weights",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log each pipeline stage",
    )

    parsed = parser.parse_args(args)

    # Validate input exists
    if not Path(parsed.input).exists():
        parser.error(f"Input file not found: {parsed.input}")
    if parsed.max_dimension < 1:
        parser.error("--max-dimension must be at least 1")
    if not 1 <= parsed.quality <= 100:
        parser.error("--quality must be between 1 and 100")

    return ProcessingConfig.from_args(
        input_path=parsed.input,
        output_path=parsed.output or default_output_path(parsed.input),
        max_dimension=parsed.max_dimension,
        quality=parsed.quality,
        model_name=parsed.model,
        device=parsed.device,
        local_files_only=parsed.local_files_only,
        cache_dir=parsed.cache_dir,
        verbose=parsed.verbose,
    )
