"""Tests for the preview module.

This module tests the preview/display and preview/export functionality including:
- Plain-text PPM serialization
- Tone mapping and gamma correction
- PNG export through Pillow
- RMSE computation
- The Matplotlib preview figure

Note: Preview tests run on the non-interactive Agg backend, so no window is
ever opened.
"""

import numpy as np
import pytest
from PIL import Image as PILImage

from rays2d.core.image import Image


def make_image(rows):
    """Build an Image from nested [row][column] RGB lists."""
    return Image.from_numpy(np.array(rows, dtype=np.float64))


class TestToPpm:
    """Test PPM serialization."""

    def test_header(self):
        """Test the P3 header layout."""
        from rays2d.preview.export import ppm_header

        assert ppm_header(4, 3) == "P3\n4 3\n255\n"

    def test_quantization_truncates(self):
        """Test that channels are scaled by 255 and truncated."""
        from rays2d.preview.export import to_ppm

        image = make_image([[[0.0, 1.0, 0.5]]])
        assert to_ppm(image) == "P3\n1 1\n255\n0 255 127\n"

    def test_row_major_from_top(self):
        """Test that pixels are written row by row starting at row 0."""
        from rays2d.preview.export import to_ppm

        image = make_image(
            [
                [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]],
                [[0.0, 0.0, 1.0], [1.0, 1.0, 1.0]],
            ]
        )
        lines = to_ppm(image).splitlines()

        assert lines[:3] == ["P3", "2 2", "255"]
        assert lines[3:] == ["255 0 0", "0 255 0", "0 0 255", "255 255 255"]

    def test_out_of_range_not_clamped(self):
        """Test that values outside [0, 1] pass through unclamped."""
        from rays2d.preview.export import to_ppm

        image = make_image([[[2.0, -0.1, 1.0]]])
        assert to_ppm(image).splitlines()[-1] == "510 -25 255"

    def test_pixel_count(self):
        """Test one pixel line per pixel."""
        from rays2d.preview.export import to_ppm

        image = Image(5, 4)
        assert len(to_ppm(image).splitlines()) == 3 + 5 * 4

    def test_save_ppm(self, tmp_path):
        """Test that save_ppm writes the serialized document."""
        from rays2d.preview.export import save_ppm, to_ppm

        image = make_image([[[0.25, 0.5, 0.75]]])
        path = save_ppm(image, tmp_path / "out.ppm")

        assert path.exists()
        assert path.read_text(encoding="ascii") == to_ppm(image)


class TestToneMapping:
    """Test tone mapping operators."""

    def test_reinhard_formula(self):
        """Test Reinhard formula: L / (1 + L)."""
        from rays2d.preview.display import tone_map_reinhard

        for val in [0.0, 0.25, 1.0, 3.0, 9.0]:
            image = np.full((2, 2, 3), val, dtype=np.float32)
            assert np.allclose(tone_map_reinhard(image), val / (1.0 + val), atol=1e-6)

    def test_reinhard_clamps_negative(self):
        """Test that Reinhard maps negative values to zero."""
        from rays2d.preview.display import tone_map_reinhard

        image = np.full((2, 2, 3), -2.0, dtype=np.float32)
        assert np.all(tone_map_reinhard(image) == 0.0)

    def test_exposure_formula(self):
        """Test exposure formula: 1 - exp(-c * exposure)."""
        from rays2d.preview.display import tone_map_exposure

        image = np.full((2, 2, 3), 0.5, dtype=np.float32)
        result = tone_map_exposure(image, exposure=3.0)
        assert np.allclose(result, 1.0 - np.exp(-1.5), atol=1e-6)

    def test_exposure_monotonic(self):
        """Test that higher exposure brightens the image."""
        from rays2d.preview.display import tone_map_exposure

        image = np.full((4, 4, 3), 0.3, dtype=np.float32)
        assert np.mean(tone_map_exposure(image, 4.0)) > np.mean(tone_map_exposure(image, 0.5))


class TestApplyGamma:
    """Test gamma correction."""

    def test_gamma_one_is_identity(self):
        """Test that gamma=1.0 leaves values unchanged, even out of range."""
        from rays2d.preview.display import apply_gamma

        image = np.array([[[0.2, 1.5, -0.5]]], dtype=np.float32)
        assert np.allclose(apply_gamma(image, gamma=1.0), image)

    def test_gamma_brightens_midtones(self):
        """Test that gamma 2.2 brightens midtones and keeps endpoints."""
        from rays2d.preview.display import apply_gamma

        result = apply_gamma(np.array([[[0.0, 0.5, 1.0]]], dtype=np.float32), gamma=2.2)

        assert np.isclose(result[0, 0, 0], 0.0)
        assert np.isclose(result[0, 0, 1], 0.5 ** (1.0 / 2.2), atol=1e-6)
        assert np.isclose(result[0, 0, 2], 1.0)

    def test_gamma_clamps_negative(self):
        """Test that negative values are clamped before the power."""
        from rays2d.preview.display import apply_gamma

        result = apply_gamma(np.full((2, 2, 3), -0.5, dtype=np.float32), gamma=2.2)
        assert np.all(result == 0.0)
        assert not np.any(np.isnan(result))


class TestProcessImageForDisplay:
    """Test the full display pipeline."""

    def test_output_always_in_range(self):
        """Test that every method produces finite values in [0, 1]."""
        from rays2d.preview.display import process_image_for_display

        rng = np.random.default_rng(0)
        image = rng.uniform(-1.0, 10.0, size=(6, 6, 3))
        for tone_map in ["none", "reinhard", "exposure"]:
            result = process_image_for_display(image, tone_map=tone_map, gamma=2.2)
            assert result.dtype == np.float32
            assert np.all((result >= 0.0) & (result <= 1.0))
            assert np.all(np.isfinite(result))

    def test_reinhard_then_linear(self):
        """Test Reinhard with gamma 1: radiance 1 maps to 0.5."""
        from rays2d.preview.display import process_image_for_display

        image = np.ones((3, 3, 3))
        assert np.allclose(process_image_for_display(image, tone_map="reinhard", gamma=1.0), 0.5)

    def test_invalid_tone_map_raises(self):
        """Test that an unknown method raises ValueError."""
        from rays2d.preview.display import process_image_for_display

        with pytest.raises(ValueError, match="Unknown tone mapping"):
            process_image_for_display(np.zeros((2, 2, 3)), tone_map="filmic")


class TestPngExport:
    """Test 8-bit conversion and PNG export."""

    def test_image_to_uint8_clamps(self):
        """Test that conversion clamps to 0-255."""
        from rays2d.preview.export import image_to_uint8

        image = np.array([[[0.0, 1.0, 4.0], [-1.0, 0.5, 1.0]]])
        result = image_to_uint8(image, gamma=1.0)

        assert result.dtype == np.uint8
        assert result[0, 0].tolist() == [0, 255, 255]
        assert result[0, 1].tolist() == [0, 127, 255]

    def test_save_png_dimensions(self, tmp_path):
        """Test that the PNG has the image's width and height."""
        from rays2d.preview.export import save_png

        image = Image(7, 3)
        image.data[:, :, 0] = np.linspace(0.0, 1.0, 7)
        path = save_png(image, tmp_path / "out.png")

        with PILImage.open(path) as png:
            assert png.size == (7, 3)
            assert png.mode == "RGB"

    def test_save_png_pixel_values(self, tmp_path):
        """Test that saved pixels match the processed buffer."""
        from rays2d.preview.export import image_to_uint8, save_png

        image = make_image([[[0.0, 0.5, 3.0], [1.0, 0.25, 0.0]]])
        path = save_png(image, tmp_path / "out.png", tone_map="reinhard", gamma=2.2)

        with PILImage.open(path) as png:
            loaded = np.asarray(png)
        expected = image_to_uint8(image.data, tone_map="reinhard", gamma=2.2)
        np.testing.assert_array_equal(loaded, expected)


class TestComputeRmse:
    """Test RMSE computation."""

    def test_identical_images(self):
        """Test RMSE of identical images is zero."""
        from rays2d.preview.export import compute_rmse

        image = np.random.default_rng(1).random((4, 4, 3))
        assert compute_rmse(image, image) == 0.0

    def test_known_difference(self):
        """Test RMSE of a constant offset equals the offset."""
        from rays2d.preview.export import compute_rmse

        assert np.isclose(compute_rmse(np.zeros((3, 3, 3)), np.full((3, 3, 3), 0.5)), 0.5)

    def test_shape_mismatch_raises(self):
        """Test that mismatched shapes raise ValueError."""
        from rays2d.preview.export import compute_rmse

        with pytest.raises(ValueError, match="shapes must match"):
            compute_rmse(np.zeros((2, 2, 3)), np.zeros((3, 2, 3)))


class TestPreviewFigure:
    """Test the Matplotlib preview on the Agg backend."""

    def test_title_reports_samples(self, agg_pyplot):
        """Test that the default title carries the size and sample count."""
        from rays2d.preview.display import preview_figure

        image = Image(4, 3)
        image.sample_count = 6
        fig = preview_figure(image, tone_map="reinhard")

        assert fig.axes[0].get_title() == "4x3, 6 spp, reinhard"

    def test_title_without_tone_map(self, agg_pyplot):
        """Test that no tone map suffix is added for "none"."""
        from rays2d.preview.display import preview_figure

        image = Image.from_numpy(np.zeros((2, 5, 3)), sample_count=9)
        assert preview_figure(image).axes[0].get_title() == "5x2, 9 spp"

    def test_custom_title(self, agg_pyplot):
        """Test that an explicit title replaces the default."""
        from rays2d.preview.display import preview_figure

        fig = preview_figure(Image(2, 2), title="walls")
        assert fig.axes[0].get_title() == "walls"

    def test_shows_processed_pixels(self, agg_pyplot):
        """Test that the axes hold the display-processed buffer."""
        from rays2d.preview.display import preview_figure, process_image_for_display

        image = make_image([[[0.0, 0.5, 2.0], [1.0, 0.25, 0.0]]])
        fig = preview_figure(image, tone_map="reinhard", gamma=2.2)

        shown = np.asarray(fig.axes[0].images[0].get_array())
        expected = process_image_for_display(image.data, tone_map="reinhard", gamma=2.2)
        assert shown.shape == (1, 2, 3)
        np.testing.assert_allclose(shown, expected)

    def test_show_preview_registers_figure(self, agg_pyplot):
        """Test that show_preview opens a pyplot figure with the sample count."""
        from rays2d.preview.display import show_preview

        image = Image(3, 3)
        image.sample_count = 12
        fig = show_preview(image, block=False)

        assert fig.number in agg_pyplot.get_fignums()
        assert "12 spp" in fig.axes[0].get_title()
