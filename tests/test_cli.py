import io
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image

from segcrop.cli import default_output_path, parse_args
from segcrop.config import DEFAULT_SEGMENTER_MODEL
from segcrop.errors import SegmentationError
from segcrop.pipeline import PipelineState
from segcrop.runners.headless import run_headless


def test_cli_defaults(tmp_path: Path):
    input_path = tmp_path / "chair.jpg"
    input_path.write_bytes(b"fake")

    config = parse_args([str(input_path)])

    assert config.input_path == str(input_path)
    assert config.output_path == str(tmp_path / "chair_cropped.jpg")
    assert config.crop.max_dimension == 1024
    assert config.crop.alpha_threshold == 50
    assert config.crop.padding == 20
    assert config.crop.quality == 90
    assert config.segmenter.model_name == DEFAULT_SEGMENTER_MODEL
    assert config.segmenter.device == "auto"
    assert config.segmenter.local_files_only is False
    assert config.verbose is False


def test_cli_parses_model_flags(tmp_path: Path):
    input_path = tmp_path / "input.png"
    input_path.write_bytes(b"fake")

    config = parse_args(
        [
            str(input_path),
            "-o",
            "out.png",
            "--model",
            "./checkpoints/segformer",
            "--device",
            "cpu",
            "--local-files-only",
            "--cache-dir",
            "/tmp/models",
            "--quality",
            "75",
            "-v",
        ]
    )

    assert config.output_path == "out.png"
    assert config.crop.quality == 75
    assert config.segmenter.model_name == "./checkpoints/segformer"
    assert config.segmenter.device == "cpu"
    assert config.segmenter.local_files_only is True
    assert config.segmenter.cache_dir == "/tmp/models"
    assert config.verbose is True


@pytest.mark.parametrize(
    "extra",
    [["--quality", "0"], ["--quality", "101"], ["--max-dimension", "0"], ["--device", "tpu"]],
)
def test_cli_rejects_invalid_values(tmp_path: Path, extra):
    input_path = tmp_path / "input.jpg"
    input_path.write_bytes(b"fake")

    with pytest.raises(SystemExit):
        parse_args([str(input_path), *extra])


def test_cli_rejects_missing_input(tmp_path: Path):
    with pytest.raises(SystemExit):
        parse_args([str(tmp_path / "nope.jpg")])


def test_default_output_path():
    assert default_output_path("/photos/IMG_1.JPG") == str(Path("/photos/IMG_1_cropped.JPG"))


def _write_photo(path: Path, make_image_bytes):
    path.write_bytes(make_image_bytes(400, 300))
    return parse_args([str(path)])


@patch("segcrop.runners.headless.create_segmenter")
def test_run_headless_writes_crop(mock_create, tmp_path, make_image_bytes, stub_segmenter, capsys):
    mock_create.return_value = stub_segmenter(rect=(100, 100, 159, 139))
    config = _write_photo(tmp_path / "table.jpg", make_image_bytes)

    result = run_headless(config)

    assert result.cropped
    with Image.open(io.BytesIO(Path(config.output_path).read_bytes())) as image:
        assert image.size == (100, 80)
    assert "Cropped to 100x80 at (80, 80)" in capsys.readouterr().out


@patch("segcrop.runners.headless.create_segmenter")
def test_run_headless_keeps_original_when_model_unavailable(
    mock_create, tmp_path, make_image_bytes, capsys
):
    mock_create.side_effect = SegmentationError("offline")
    config = _write_photo(tmp_path / "lamp.jpg", make_image_bytes)

    result = run_headless(config)

    assert result.state is PipelineState.FALLBACK
    assert Path(config.output_path).read_bytes() == Path(config.input_path).read_bytes()
    assert "Original image kept unchanged." in capsys.readouterr().err


@patch("segcrop.segmentation.segformer.SegformerForSemanticSegmentation")
@patch("segcrop.segmentation.segformer.SegformerImageProcessor")
def test_run_headless_keeps_original_when_device_unusable(
    mock_processor_cls, mock_model_cls, tmp_path, make_image_bytes, capsys
):
    model = MagicMock()
    model.to.side_effect = AssertionError("Torch not compiled with CUDA enabled")
    mock_model_cls.from_pretrained.return_value = model
    input_path = tmp_path / "sofa.jpg"
    input_path.write_bytes(make_image_bytes(400, 300))
    config = parse_args([str(input_path), "--device", "cuda"])

    result = run_headless(config)

    assert result.fell_back
    assert Path(config.output_path).read_bytes() == input_path.read_bytes()
    assert "Segmentation model unavailable" in capsys.readouterr().err
