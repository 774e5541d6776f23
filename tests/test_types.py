"""Tests for core types."""
import numpy as np
import pytest

from pixedit.types import (
    DimensionMismatchError,
    EditSettings,
    InvalidBufferError,
    PixelBuffer,
    RasterSummary,
    ColorStat,
)


class TestPixelBuffer:
    """Test PixelBuffer construction and invariants."""

    def test_from_bytes_row_major(self):
        """Bytes are laid out row by row, four per pixel."""
        data = bytes(range(2 * 3 * 4))
        buffer = PixelBuffer.from_bytes(2, 3, data)

        assert buffer.pixels.shape == (3, 2, 4)
        assert buffer.pixels.size == 2 * 3 * 4
        assert tuple(buffer.pixels[0, 1]) == (4, 5, 6, 7)
        assert tuple(buffer.pixels[1, 0]) == (8, 9, 10, 11)
        assert buffer.to_bytes() == data

    def test_wrong_length_rejected(self):
        with pytest.raises(InvalidBufferError):
            PixelBuffer.from_bytes(2, 2, bytes(15))

    def test_negative_dimensions_rejected(self):
        with pytest.raises(InvalidBufferError):
            PixelBuffer(-1, 2, np.zeros((0,), dtype=np.uint8))

    def test_flat_data_is_reshaped(self):
        buffer = PixelBuffer(2, 3, np.arange(24, dtype=np.uint8))

        assert buffer.pixels.shape == (3, 2, 4)

    def test_transposed_shape_rejected(self):
        """A (2, 3, 4) array cannot back a 2 wide, 3 high buffer."""
        with pytest.raises(InvalidBufferError, match="shape"):
            PixelBuffer(2, 3, np.zeros((2, 3, 4), dtype=np.uint8))

    def test_from_array_rgb_gets_opaque_alpha(self):
        array = np.full((4, 5, 3), 80, dtype=np.uint8)
        buffer = PixelBuffer.from_array(array)

        assert (buffer.width, buffer.height) == (5, 4)
        assert np.all(buffer.alpha == 255)
        assert np.all(buffer.rgb == 80)

    def test_from_array_grayscale(self):
        array = np.arange(6, dtype=np.uint8).reshape(2, 3)
        buffer = PixelBuffer.from_array(array)

        np.testing.assert_array_equal(buffer.pixels[..., 0], array)
        np.testing.assert_array_equal(buffer.pixels[..., 2], array)

    def test_from_array_bad_channels(self):
        with pytest.raises(InvalidBufferError, match="3 or 4 channels"):
            PixelBuffer.from_array(np.zeros((2, 2, 2), dtype=np.uint8))

    def test_copy_is_independent(self, solid_buffer):
        original = solid_buffer(3, 3, (10, 20, 30, 255))
        clone = original.copy()
        clone.pixels[0, 0] = (1, 2, 3, 4)

        assert tuple(original.pixels[0, 0]) == (10, 20, 30, 255)

    def test_empty_buffer(self):
        buffer = PixelBuffer.blank(0, 0)

        assert buffer.is_empty
        assert buffer.total_pixels == 0

    def test_require_same_size(self, solid_buffer):
        a = solid_buffer(4, 4, (0, 0, 0, 255))
        b = solid_buffer(4, 5, (0, 0, 0, 255))

        a.require_same_size(a.copy())
        with pytest.raises(DimensionMismatchError):
            a.require_same_size(b)


class TestEditSettings:
    """Test EditSettings parsing and display."""

    def test_from_mapping_parses_strings(self):
        settings = EditSettings.from_mapping({
            "brightness": "110",
            "hue": "-10",
            "grayscale": True,
            "sepia": "false",
            "unknown": "42",
        })

        assert settings.brightness == 110.0
        assert settings.hue == -10.0
        assert settings.grayscale is True
        assert settings.sepia is False
        assert "unknown" not in settings.to_dict()

    def test_from_mapping_rejects_non_numeric(self):
        with pytest.raises(ValueError, match="brightness"):
            EditSettings.from_mapping({"brightness": "very"})

    def test_negative_blur_rejected(self):
        with pytest.raises(ValueError, match="blur"):
            EditSettings(blur=-1)

    def test_to_dict_only_present_keys(self):
        settings = EditSettings(contrast=120.0, sepia=True)

        assert settings.to_dict() == {"contrast": 120.0, "sepia": True}
        assert not settings.is_identity
        assert EditSettings().is_identity

    def test_empty_settings_are_truthy(self):
        settings = EditSettings()

        assert (settings or None) is settings

    def test_display_items_booleans_yes_no(self):
        settings = EditSettings(brightness=110.0, hue=-10.0, grayscale=True, sepia=False)

        assert settings.display_items() == {
            "brightness": "110",
            "hue": "-10",
            "grayscale": "Yes",
            "sepia": "No",
        }

    def test_display_items_keeps_fractions(self):
        assert EditSettings(sharpness=1.1).display_items() == {"sharpness": "1.1"}

    def test_display_items_large_values_not_exponent(self):
        assert EditSettings(brightness=1234567.0).display_items() == {"brightness": "1234567"}
        assert EditSettings(hue=12345.5).display_items() == {"hue": "12345.5"}


class TestRasterSummary:
    """Test RasterSummary serialisation."""

    def test_to_dict(self):
        summary = RasterSummary(
            width=2,
            height=1,
            total_pixels=2,
            dominant_colors=(ColorStat(1, 2, 3, count=2),),
            brightness=2.0,
            contrast=0.0,
        )

        assert summary.to_dict() == {
            "width": 2,
            "height": 1,
            "totalPixels": 2,
            "dominantColors": [[1, 2, 3]],
            "brightness": 2.0,
            "contrast": 0.0,
        }
