"""
Tests for the end-to-end watermark pipeline, the image codec and the
command-line entry point.

Run with: python -m pytest tests/test_watermarker.py -v
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
import pytest
from PIL import Image

import main as entry_point
from warpmark import (
    BlendStrategy,
    ConfigurationError,
    EncodeFailure,
    ResourceUnavailable,
    WatermarkConfig,
    Watermarker,
    add_pattern_watermark,
    cli,
)
from warpmark.core.blend import DarkenInvert, Lighten, SinusoidalAlpha
from warpmark.core.codec import load_image, save_image


def create_test_image(directory: Path, width: int = 800, height: int = 600) -> Path:
    """Create a simple test image with gradient."""
    xs = np.linspace(0, 255, width, dtype=np.float64)
    ys = np.linspace(0, 255, height, dtype=np.float64)
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[..., 0] = xs[np.newaxis, :].astype(np.uint8)
    arr[..., 1] = ys[:, np.newaxis].astype(np.uint8)
    arr[..., 2] = 128

    path = directory / "source.png"
    Image.fromarray(arr).save(path)
    return path


def luminance(image: np.ndarray) -> float:
    return float((0.299 * image[..., 0] + 0.587 * image[..., 1] + 0.114 * image[..., 2]).mean())


# ===== Pipeline =====

def test_white_image_end_to_end():
    """800x600 white image, "TEST", 10 degrees, default warp settings."""
    white = np.full((600, 800, 3), 255, dtype=np.uint8)
    wm = Watermarker(WatermarkConfig(text="TEST", rotation=10))

    result = wm.watermark(white)

    assert result.shape == (600, 800, 3)
    assert result.dtype == np.uint8
    assert not np.array_equal(result, white)
    assert luminance(result) <= luminance(white)
    # the input is not modified
    assert (white == 255).all()


def test_empty_text_fails_before_any_work():
    with pytest.raises(ConfigurationError):
        Watermarker(WatermarkConfig(text=""))
    with pytest.raises(ConfigurationError):
        Watermarker("")


def test_text_only_constructor_uses_defaults():
    wm = Watermarker("TEST")
    assert wm.config == WatermarkConfig(text="TEST")
    assert wm.config.blend_strategy is BlendStrategy.DARKEN_INVERT


@pytest.mark.parametrize("size,rotation", [
    ((800, 600), 10),
    ((101, 77), 45),
    ((64, 200), 90),
    ((33, 33), 179),
])
def test_mask_matches_image_size(size, rotation):
    wm = Watermarker(WatermarkConfig(text="TEST", rotation=rotation))
    w, h = size

    mask = wm.create_watermark((w, h))

    assert mask.shape == (h, w)
    assert mask.dtype == np.uint8
    assert mask.max() > 0


def test_blend_passes_follow_strategy():
    def passes(strategy):
        wm = Watermarker(WatermarkConfig(text="TEST", blend_strategy=strategy))
        return [type(fn) for fn in wm.blend_passes((800, 600))]

    assert passes(BlendStrategy.DARKEN_INVERT) == [DarkenInvert]
    assert passes(BlendStrategy.LIGHTEN_THEN_DARKEN) == [Lighten, DarkenInvert]
    assert passes(BlendStrategy.SINUSOIDAL_ALPHA) == [SinusoidalAlpha]


def test_darken_invert_only_leaves_black_image_untouched():
    black = np.zeros((120, 160, 3), dtype=np.uint8)
    wm = Watermarker(WatermarkConfig(text="TEST", blend_strategy=BlendStrategy.DARKEN_INVERT))

    assert np.array_equal(wm.watermark(black), black)


def test_lighten_then_darken_marks_black_image():
    black = np.zeros((120, 160, 3), dtype=np.uint8)
    wm = Watermarker(WatermarkConfig(
        text="TEST", blend_strategy=BlendStrategy.LIGHTEN_THEN_DARKEN
    ))

    result, mask = wm.watermark_with_mask(black)

    assert result.max() > 0
    assert np.array_equal(result[..., 0], np.minimum(mask, 255 - mask))


def test_sinusoidal_alpha_marks_white_image():
    white = np.full((120, 160, 3), 255, dtype=np.uint8)
    wm = Watermarker(WatermarkConfig(
        text="TEST", blend_strategy=BlendStrategy.SINUSOIDAL_ALPHA, blend_ratio=1.0
    ))

    result = wm.watermark(white)

    assert not np.array_equal(result, white)
    assert luminance(result) <= 255


def test_watermark_accepts_pil_image():
    image = Image.new("L", (90, 60), 255)
    result = Watermarker("TEST").watermark(image)
    assert result.shape == (60, 90, 3)


def test_watermark_rejects_single_channel_buffer():
    with pytest.raises(ValueError):
        Watermarker("TEST").watermark(np.zeros((10, 10), dtype=np.uint8))


def test_watermark_is_deterministic():
    image = np.full((100, 150, 3), 200, dtype=np.uint8)
    wm = Watermarker("TEST")
    assert np.array_equal(wm.watermark(image), wm.watermark(image))


# ===== Files & codec =====

def test_process_writes_output_and_mask(tmp_path):
    source = create_test_image(tmp_path, 320, 240)
    output = tmp_path / "out" / "result.jpg"
    mask_path = tmp_path / "out" / "mask.png"

    result = Watermarker("TEST").process(source, output, mask_path=mask_path)

    assert result.shape == (240, 320, 3)
    with Image.open(output) as out_img:
        assert out_img.size == (320, 240)
        assert out_img.mode == "RGB"
    with Image.open(mask_path) as mask_img:
        assert mask_img.size == (320, 240)
        assert mask_img.mode == "L"


def test_add_pattern_watermark(tmp_path):
    source = create_test_image(tmp_path, 200, 150)
    output = tmp_path / "result.png"

    add_pattern_watermark(source, output, "TEST", rotation=-20, font_size=20)

    assert not np.array_equal(load_image(output), load_image(source))


def test_load_image_converts_to_rgb(tmp_path):
    path = tmp_path / "gray.png"
    Image.new("L", (30, 20), 77).save(path)

    buffer = load_image(path)

    assert buffer.shape == (20, 30, 3)
    assert (buffer == 77).all()


def test_missing_input_is_resource_unavailable(tmp_path):
    with pytest.raises(ResourceUnavailable):
        Watermarker("TEST").process(tmp_path / "missing.jpg", tmp_path / "out.jpg")


def test_undecodable_input_is_resource_unavailable(tmp_path):
    path = tmp_path / "broken.jpg"
    path.write_bytes(b"not an image")
    with pytest.raises(ResourceUnavailable):
        load_image(path)


def test_unwritable_output_is_encode_failure(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    buffer = np.zeros((10, 10, 3), dtype=np.uint8)

    with pytest.raises(EncodeFailure):
        save_image(buffer, blocker / "out.png")


def test_unknown_extension_is_encode_failure(tmp_path):
    with pytest.raises(EncodeFailure):
        save_image(np.zeros((10, 10, 3), dtype=np.uint8), tmp_path / "out.unknownext")


# ===== Command line =====

def test_cli_success(tmp_path):
    source = create_test_image(tmp_path, 160, 120)
    output = tmp_path / "cli.png"
    mask = tmp_path / "cli_mask.png"

    code = cli.main([
        str(source), str(output),
        "--text", "TEST",
        "--rotation", "15",
        "--strategy", "lighten-then-darken",
        "--warp-mode", "coupled",
        "--save-mask", str(mask),
    ])

    assert code == 0
    assert output.exists()
    assert mask.exists()


def test_cli_missing_input_exits_non_zero(tmp_path):
    code = cli.main([str(tmp_path / "missing.jpg"), str(tmp_path / "out.jpg")])
    assert code == 1


def test_cli_empty_text_exits_non_zero(tmp_path):
    source = create_test_image(tmp_path, 50, 50)
    code = cli.main([str(source), str(tmp_path / "out.jpg"), "--text", ""])
    assert code == 1
    assert not (tmp_path / "out.jpg").exists()


def test_cli_defaults():
    args = cli.create_parser().parse_args([])
    config = cli.build_config(args)

    assert args.input == cli.DEFAULT_INPUT
    assert args.output == cli.DEFAULT_OUTPUT
    assert config.text == cli.DEFAULT_TEXT
    assert config.rotation == 10.0


def test_root_script_runs_the_packaged_cli():
    assert entry_point.main is cli.main


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
