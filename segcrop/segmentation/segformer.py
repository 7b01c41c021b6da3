"""SegFormer-based segmentation."""

import logging
from typing import Optional

import numpy as np
import torch
import torch.nn.functional as F
from transformers import SegformerForSemanticSegmentation, SegformerImageProcessor

from ..config import DEFAULT_SEGMENTER_MODEL, SegmenterConfig
from ..core.buffer import ForegroundMask, PixelBuffer
from ..errors import SegmentationError

logger = logging.getLogger(__name__)


def resolve_device(device: str) -> str:
    """Map 'auto' to 'cuda' when a GPU is available, else 'cpu'."""
    if device == "auto":
        return "cuda" if torch.cuda.is_available() else "cpu"
    return device


class SegformerSegmenter:
    """SegFormer semantic segmenter implementing the Segmenter protocol.

    The returned mask is the per-pixel probability of the first-ranked
    segment, i.e. the lowest label id present in the arg-max label map.

    Attributes:
        model_name: Hugging Face model id or checkpoint directory.
        device: Torch device inference runs on.
        processor: Image processor for the model.
        model: Loaded SegFormer model in eval mode.
    """

    def __init__(
        self,
        model_name: str = DEFAULT_SEGMENTER_MODEL,
        device: str = "auto",
        local_files_only: bool = False,
        cache_dir: Optional[str] = None,
    ):
        """Initialize SegformerSegmenter.

        Args:
            model_name: Hugging Face model id or checkpoint directory.
            device: 'auto', 'cpu' or 'cuda'.
            local_files_only: Only load weights already in the cache.
            cache_dir: Override for the model cache directory.

        Raises:
            SegmentationError: If the model cannot be loaded.
        """
        self.model_name = model_name
        self.device = torch.device(resolve_device(device))
        self.processor, self.model = self._load_model(local_files_only, cache_dir)

    @classmethod
    def from_config(cls, config: SegmenterConfig) -> "SegformerSegmenter":
        """Create SegformerSegmenter from SegmenterConfig."""
        return cls(
            model_name=config.model_name,
            device=config.device,
            local_files_only=config.local_files_only,
            cache_dir=config.cache_dir,
        )

    def _load_model(self, local_files_only: bool, cache_dir: Optional[str]):
        logger.info("Loading segmentation model %s on %s", self.model_name, self.device)
        try:
            processor = SegformerImageProcessor.from_pretrained(
                self.model_name,
                local_files_only=local_files_only,
                cache_dir=cache_dir,
            )
            model = SegformerForSemanticSegmentation.from_pretrained(
                self.model_name,
                local_files_only=local_files_only,
                cache_dir=cache_dir,
            )
            model = model.to(self.device).eval()
        except Exception as e:
            raise SegmentationError(
                f"Failed to load segmentation model {self.model_name}: {e}"
            ) from e
        return processor, model

    def segment(self, image: PixelBuffer) -> ForegroundMask:
        """Compute the mask for an image.

        Args:
            image: Working image (RGBA); alpha is ignored.

        Returns:
            ForegroundMask of shape (image.height, image.width).
        """
        rgb = np.ascontiguousarray(image.pixels[:, :, :3])
        inputs = self.processor(
            images=rgb, return_tensors="pt", input_data_format="channels_last"
        ).to(self.device)

        with torch.no_grad():
            logits = self.model(**inputs).logits

        # Pick the label at logit resolution (1/4 of the processor input) and
        # upsample only that channel
        probabilities = logits.softmax(dim=1)
        first_label = int(probabilities[0].argmax(dim=0).min())
        logger.debug("Masking segment label %d", first_label)

        selected = F.interpolate(
            probabilities[:, first_label : first_label + 1],
            size=(image.height, image.width),
            mode="bilinear",
            align_corners=False,
        )
        values = selected[0, 0].clamp(0.0, 1.0).cpu().numpy()
        return ForegroundMask(values=values)
