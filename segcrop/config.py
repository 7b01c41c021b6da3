"""Configuration dataclasses for segcrop."""

from dataclasses import dataclass, field
from typing import Optional


# Longest side of the working image handed to the segmenter.
MAX_IMAGE_DIMENSION = 1024
# Composited alpha must exceed this to count as subject.
ALPHA_THRESHOLD = 50
PADDING = 20
JPEG_QUALITY = 90

DEFAULT_SEGMENTER_MODEL = "nvidia/segformer-b0-finetuned-ade-512-512"
DEVICES = ["auto", "cpu", "cuda"]


@dataclass
class CropConfig:
    """Configuration for the auto-crop stages."""

    max_dimension: int = MAX_IMAGE_DIMENSION
    alpha_threshold: int = ALPHA_THRESHOLD
    padding: int = PADDING
    quality: int = JPEG_QUALITY


@dataclass
class SegmenterConfig:
    """Configuration for constructing the segmentation model.

    Attributes:
        model_name: Hugging Face model id or local checkpoint directory.
        device: 'auto', 'cpu' or 'cuda'. 'auto' picks CUDA when available.
        local_files_only: Never download weights, only use the local cache.
        cache_dir: Override for the model cache directory.
    """

    model_name: str = DEFAULT_SEGMENTER_MODEL
    device: str = "auto"
    local_files_only: bool = False
    cache_dir: Optional[str] = None


@dataclass
class ProcessingConfig:
    """Combined configuration for a command-line run."""

    input_path: str
    output_path: str
    crop: CropConfig = field(default_factory=CropConfig)
    segmenter: SegmenterConfig = field(default_factory=SegmenterConfig)
    verbose: bool = False

    @classmethod
    def from_args(
        cls,
        input_path: str,
        output_path: str,
        max_dimension: int = MAX_IMAGE_DIMENSION,
        quality: int = JPEG_QUALITY,
        # Segmenter config
        model_name: str = DEFAULT_SEGMENTER_MODEL,
        device: str = "auto",
        local_files_only: bool = False,
        cache_dir: Optional[str] = None,
        verbose: bool = False,
    ) -> "ProcessingConfig":
        """Create ProcessingConfig from CLI arguments."""
        return cls(
            input_path=input_path,
            output_path=output_path,
            crop=CropConfig(max_dimension=max_dimension, quality=quality),
            segmenter=SegmenterConfig(
                model_name=model_name,
                device=device,
                local_files_only=local_files_only,
                cache_dir=cache_dir,
            ),
            verbose=verbose,
        )
