"""
Unit tests for the preprocessing module: behavioral tests only.

Covers: error handling, grayscale conversion, CLAHE equalization and the
patch normalization pipeline.
"""

import numpy as np
import pytest

from preprocessing import (
    CLAHEStep,
    GrayscaleStep,
    PatchNormalizeConfig,
    Pipeline,
    build_pipeline,
    normalize_patch,
    resize_to,
    to_grayscale,
)


class TestToGrayscale:
    """Tests for the to_grayscale function."""

    def test_pure_function_no_mutation(self):
        """Input should not be modified."""
        bgr = np.full((10, 10, 3), 128, dtype=np.uint8)
        original_data = bgr.copy()
        _ = to_grayscale(bgr)
        assert np.array_equal(bgr, original_data)

    def test_white_image_produces_white_gray(self):
        white = np.full((10, 10, 3), 255, dtype=np.uint8)
        assert np.all(to_grayscale(white) == 255)

    def test_black_image_produces_black_gray(self):
        black = np.zeros((10, 10, 3), dtype=np.uint8)
        assert np.all(to_grayscale(black) == 0)

    def test_blue_weighted_less_than_green(self):
        """BGR order: pure green must come out brighter than pure blue."""
        blue = np.zeros((4, 4, 3), dtype=np.uint8)
        blue[:, :, 0] = 255
        green = np.zeros((4, 4, 3), dtype=np.uint8)
        green[:, :, 1] = 255
        assert to_grayscale(green)[0, 0] > to_grayscale(blue)[0, 0]

    def test_grayscale_input_copied(self):
        gray = np.full((5, 5), 7, dtype=np.uint8)
        result = to_grayscale(gray)
        assert result is not gray
        assert np.array_equal(result, gray)

    def test_bgra_supported(self):
        bgra = np.full((5, 5, 4), 255, dtype=np.uint8)
        assert to_grayscale(bgra).shape == (5, 5)

    def test_invalid_type_raises(self):
        with pytest.raises(TypeError, match="Expected numpy.ndarray"):
            to_grayscale([[1, 2], [3, 4]])

    def test_empty_array_raises(self):
        with pytest.raises(ValueError):
            to_grayscale(np.zeros((0, 0), dtype=np.uint8))

    def test_1d_array_raises(self):
        with pytest.raises(ValueError, match="2D or 3D"):
            to_grayscale(np.array([1, 2, 3]))

    def test_output_is_uint8(self):
        wide = np.full((4, 4), 300, dtype=np.uint16)
        result = to_grayscale(wide)
        assert result.dtype == np.uint8
        assert np.all(result == 255)

    def test_unsupported_channels_raises(self):
        with pytest.raises(ValueError, match="Unsupported number of channels"):
            to_grayscale(np.zeros((4, 4, 2), dtype=np.uint8))


class TestResizeTo:

    def test_exact_size(self):
        img = np.zeros((100, 50, 3), dtype=np.uint8)
        assert resize_to(img, (30, 20)).shape == (20, 30, 3)

    def test_same_size_returns_copy(self):
        img = np.zeros((20, 30), dtype=np.uint8)
        result = resize_to(img, (30, 20))
        assert result is not img
        assert result.shape == img.shape

    def test_non_positive_size_raises(self):
        with pytest.raises(ValueError, match="positive"):
            resize_to(np.zeros((10, 10), dtype=np.uint8), (0, 10))


class TestCLAHEStep:

    def test_requires_grayscale(self):
        with pytest.raises(ValueError, match="grayscale"):
            CLAHEStep().apply(np.zeros((10, 10, 3), dtype=np.uint8))

    def test_preserves_shape_and_dtype(self):
        rng = np.random.default_rng(0)
        img = rng.integers(0, 256, size=(37, 53), dtype=np.uint8)
        out = CLAHEStep().apply(img)
        assert out.shape == img.shape
        assert out.dtype == np.uint8

    def test_spreads_low_contrast(self):
        img = np.tile(np.linspace(100, 120, 64, dtype=np.uint8), (64, 1))
        out = CLAHEStep(clip_limit=40.0).apply(img)
        assert int(out.max()) - int(out.min()) > int(img.max()) - int(img.min())

    def test_default_parameters(self):
        step = CLAHEStep()
        assert step.clip_limit == 40.0
        assert step.tile_size == (8, 8)


class TestPatchNormalizeConfig:

    def test_defaults_valid(self):
        PatchNormalizeConfig().validate()

    def test_non_positive_clip_limit(self):
        with pytest.raises(ValueError, match="clahe_clip_limit"):
            PatchNormalizeConfig(clahe_clip_limit=0).validate()

    def test_bad_tile_size(self):
        with pytest.raises(ValueError, match="clahe_tile_size"):
            PatchNormalizeConfig(clahe_tile_size=(8, 0)).validate()


class TestPipeline:

    def test_build_pipeline_default_steps(self):
        pipeline = build_pipeline(PatchNormalizeConfig())
        assert [type(step) for step in pipeline.steps] == [GrayscaleStep, CLAHEStep]

    def test_build_pipeline_without_clahe(self):
        pipeline = build_pipeline(PatchNormalizeConfig(clahe_enabled=False))
        assert [type(step) for step in pipeline.steps] == [GrayscaleStep]

    def test_steps_run_in_order(self):
        pipeline = Pipeline(steps=[GrayscaleStep(), CLAHEStep()])
        out = pipeline.run(np.zeros((16, 16, 3), dtype=np.uint8))
        assert out.ndim == 2

    def test_normalize_patch_returns_grayscale(self):
        patch = np.full((40, 40, 3), 255, dtype=np.uint8)
        out = normalize_patch(patch)
        assert out.shape == (40, 40)
        assert np.all(out == 255)

    def test_normalize_patch_does_not_mutate(self):
        rng = np.random.default_rng(1)
        patch = rng.integers(0, 256, size=(24, 24, 3), dtype=np.uint8)
        original = patch.copy()
        normalize_patch(patch)
        assert np.array_equal(patch, original)

    def test_normalize_patch_accepts_16bit(self):
        out = normalize_patch(np.full((16, 16), 1000, dtype=np.uint16))
        assert out.dtype == np.uint8

    def test_normalize_patch_validates_config(self):
        with pytest.raises(ValueError):
            normalize_patch(
                np.zeros((8, 8, 3), dtype=np.uint8),
                PatchNormalizeConfig(clahe_clip_limit=-1.0),
            )
