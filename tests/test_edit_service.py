"""Tests for the edit service."""
import numpy as np
import pytest

from pixedit.edit_service import EditService
from pixedit.filters import AdditiveBrightness, FilterPipeline
from pixedit.types import (
    DimensionMismatchError,
    EditorConfig,
    PixelBuffer,
    UnsafePromptError,
)


class TestEdit:
    """Test prompt-driven edits."""

    def test_fallback_without_advisor(self, solid_buffer):
        buffer = solid_buffer(4, 4, (200, 100, 50, 255))

        result = EditService().edit(buffer, "make it darker")

        assert result.fallback
        assert result.ai_analysis is None
        assert result.buffer is buffer
        assert tuple(buffer.pixels[0, 0]) == (180, 90, 45, 255)

    def test_summary_taken_before_edit(self, solid_buffer):
        buffer = solid_buffer(4, 4, (100, 100, 100, 255))

        result = EditService().edit(buffer, "dark")

        assert result.summary.brightness == pytest.approx(100.0)

    def test_advisor_text_enriches_settings(self, solid_buffer):
        buffer = solid_buffer(2, 2, (100, 150, 200, 255))
        calls = []

        def advisor(prompt, summary):
            calls.append((prompt, summary.total_pixels))
            return "Suggest converting to grayscale"

        result = EditService(advisor=advisor).edit(buffer, "improve")

        assert calls == [("improve", 4)]
        assert not result.fallback
        assert result.settings.grayscale is True
        assert np.all(buffer.rgb == 141)

    def test_advisor_failure_falls_back(self, solid_buffer):
        def advisor(prompt, summary):
            raise ConnectionError("service down")

        result = EditService(advisor=advisor).edit(solid_buffer(2, 2, (0, 0, 0, 255)), "bright")

        assert result.fallback
        assert result.settings.brightness == 110

    def test_advisor_none_falls_back(self, solid_buffer):
        result = EditService(advisor=lambda p, s: None).edit(
            solid_buffer(2, 2, (0, 0, 0, 255)), "bright"
        )

        assert result.fallback

    def test_blank_prompt(self, black_buffer):
        with pytest.raises(ValueError, match="Please enter an editing prompt"):
            EditService().edit(black_buffer, "   ")

    def test_unsafe_prompt(self, black_buffer):
        before = black_buffer.pixels.copy()

        with pytest.raises(UnsafePromptError):
            EditService().edit(black_buffer, "add a weapon")
        np.testing.assert_array_equal(black_buffer.pixels, before)

    def test_no_match_leaves_image_unchanged(self, noise_buffer):
        before = noise_buffer.pixels.copy()

        result = EditService().edit(noise_buffer, "hello there")

        assert result.applied_settings() == {}
        np.testing.assert_array_equal(noise_buffer.pixels, before)

    def test_applied_settings_display(self, black_buffer):
        result = EditService().edit(black_buffer, "vintage vibrant")

        assert result.applied_settings() == {
            "brightness": "110",
            "saturation": "80",
            "sepia": "Yes",
        }

    def test_masked_edit(self, solid_buffer):
        buffer = solid_buffer(4, 2, (100, 150, 200, 255))
        mask = PixelBuffer.blank(4, 2)
        mask.pixels[:, :2] = 255

        EditService().edit(buffer, "black and white", mask=mask)

        assert np.all(buffer.rgb[:, :2] == 141)
        assert np.all(buffer.rgb[:, 2:] == (100, 150, 200))

    def test_mask_size_mismatch(self, black_buffer):
        with pytest.raises(DimensionMismatchError):
            EditService().edit(black_buffer, "sepia", mask=PixelBuffer.blank(1, 1))

    def test_config_selects_strategy(self, solid_buffer):
        buffer = solid_buffer(2, 2, (100, 100, 100, 255))
        service = EditService(config=EditorConfig(brightness_strategy="additive"))

        service.edit(buffer, "bright")

        # additive: target mean 110
        assert np.all(buffer.rgb == 110)

    def test_custom_pipeline(self, solid_buffer):
        buffer = solid_buffer(2, 2, (50, 50, 50, 255))
        service = EditService(pipeline=FilterPipeline(AdditiveBrightness()))

        service.edit(buffer, "dim")

        assert np.all(buffer.rgb == 90)


class TestEditPixels:
    """Test the direct pixel path."""

    def test_brighter_adds_to_mean(self, solid_buffer):
        buffer = solid_buffer(4, 4, (100, 100, 100, 255))

        result = EditService().edit_pixels(buffer, "brighter")

        assert result.fallback
        assert result.settings.brightness == 130
        assert np.all(buffer.rgb == 130)

    def test_vietnamese_darker(self, solid_buffer):
        buffer = solid_buffer(4, 4, (100, 100, 100, 255))

        EditService().edit_pixels(buffer, "tối hơn")

        assert np.all(buffer.rgb == 70)

    def test_advisor_not_consulted(self, black_buffer):
        def advisor(prompt, summary):
            raise AssertionError("should not be called")

        EditService(advisor=advisor).edit_pixels(black_buffer, "contrast")

    def test_unsafe_prompt(self, black_buffer):
        with pytest.raises(UnsafePromptError):
            EditService().edit_pixels(black_buffer, "gore")
