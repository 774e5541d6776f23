"""Deterministic filter pipeline driven by EditSettings."""
from typing import Callable, List, Optional, Tuple
import logging

import numpy as np
from scipy.ndimage import gaussian_filter

from pixedit.analyzer import average_brightness
from pixedit.color_space import luma, rotate_hue
from pixedit.types import EditSettings, PixelBuffer

logger = logging.getLogger(__name__)

SEPIA_MATRIX = np.array([
    [0.393, 0.769, 0.189],
    [0.349, 0.686, 0.168],
    [0.272, 0.534, 0.131],
])


def _store(buffer: PixelBuffer, rgb: np.ndarray) -> None:
    """Write float RGB back into the buffer, rounding and clamping to 0-255."""
    buffer.pixels[..., :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)


def _channels(buffer: PixelBuffer) -> np.ndarray:
    return buffer.rgb.astype(np.float64)


class AdditiveBrightness:
    """
    Shift every channel by ``target - current mean brightness``.

    The setting value is the desired mean brightness on the 0-255 scale; the
    current mean is measured on the buffer as it is when the step runs.
    """

    name = "additive"

    def __call__(self, buffer: PixelBuffer, value: float) -> None:
        adjustment = value - average_brightness(buffer)
        logger.debug(f"Additive brightness: shifting channels by {adjustment:+.2f}")
        _store(buffer, _channels(buffer) + adjustment)


class PercentBrightness:
    """Scale every channel linearly by ``value / 100``."""

    name = "percent"

    def __call__(self, buffer: PixelBuffer, value: float) -> None:
        _store(buffer, _channels(buffer) * (value / 100.0))


BRIGHTNESS_STRATEGIES = {
    AdditiveBrightness.name: AdditiveBrightness,
    PercentBrightness.name: PercentBrightness,
}


def brightness_strategy(name: str):
    """Instantiate a brightness strategy by name ("percent" or "additive")."""
    try:
        return BRIGHTNESS_STRATEGIES[name]()
    except KeyError:
        raise ValueError(
            f"Unknown brightness strategy {name!r}, "
            f"expected one of {sorted(BRIGHTNESS_STRATEGIES)}"
        )


def contrast_factor(amount: float) -> float:
    """
    Classic contrast-stretch factor.

    ``amount`` is the contrast setting in percent; it is used as the fraction
    ``c = amount / 100`` in ``259 * (c*255 + 255) / (255 * (259 - c*255))``.
    Returns ``inf`` where the denominator vanishes.
    """
    c = amount / 100.0
    denominator = 255.0 * (259.0 - c * 255.0)
    if denominator == 0:
        return float("inf")
    return (259.0 * (c * 255.0 + 255.0)) / denominator


def adjust_contrast(buffer: PixelBuffer, amount: float) -> None:
    factor = contrast_factor(amount)
    rgb = _channels(buffer)
    if np.isinf(factor):
        # Limit of the stretch: hard threshold around mid-grey
        _store(buffer, np.where(rgb > 128, 255.0, np.where(rgb < 128, 0.0, 128.0)))
        return
    _store(buffer, factor * (rgb - 128.0) + 128.0)


def adjust_saturation(buffer: PixelBuffer, percent: float) -> None:
    rgb = _channels(buffer)
    y = luma(rgb)[..., np.newaxis]
    _store(buffer, y + (rgb - y) * (percent / 100.0))


def adjust_hue(buffer: PixelBuffer, degrees: float) -> None:
    if degrees % 360.0 == 0:
        return
    _store(buffer, rotate_hue(_channels(buffer), degrees))


def apply_blur(buffer: PixelBuffer, radius: float) -> None:
    """Gaussian blur of the colour channels with sigma = ``radius`` pixels."""
    if radius < 0:
        raise ValueError(f"Blur radius must be >= 0, got {radius}")
    if radius == 0:
        return
    blurred = gaussian_filter(_channels(buffer), sigma=(radius, radius, 0), mode="nearest")
    _store(buffer, blurred)


def apply_grayscale(buffer: PixelBuffer) -> None:
    gray = luma(_channels(buffer))
    _store(buffer, np.repeat(gray[..., np.newaxis], 3, axis=-1))


def apply_sepia(buffer: PixelBuffer) -> None:
    _store(buffer, np.dot(_channels(buffer), SEPIA_MATRIX.T))


def composite_masked(original: PixelBuffer, edited: PixelBuffer, mask: PixelBuffer) -> PixelBuffer:
    """
    Combine two buffers through a mask.

    Where the mask is opaque (alpha > 0) the edited pixel is used, elsewhere the
    original pixel is kept.

    Args:
        original: Unedited buffer
        edited: Buffer with the edit applied
        mask: Binary mask buffer

    Returns:
        New composited buffer

    Raises:
        DimensionMismatchError: If the three buffers differ in size
    """
    original.require_same_size(edited, "edited buffer")
    original.require_same_size(mask, "mask")
    selected = (mask.alpha > 0)[..., np.newaxis]
    return PixelBuffer(
        original.width,
        original.height,
        np.where(selected, edited.pixels, original.pixels),
    )


class FilterPipeline:
    """
    Applies EditSettings to a buffer in a fixed order.

    Order: brightness, contrast, saturation, hue, blur, grayscale, sepia.
    Each step runs on the output of the previous one and only when its
    setting is present. Alpha is never modified and ``sharpness`` is ignored.
    """

    def __init__(self, brightness: Optional[Callable[[PixelBuffer, float], None]] = None):
        """
        Initialize pipeline.

        Args:
            brightness: Brightness strategy instance. Uses PercentBrightness if None.
        """
        self.brightness = brightness or PercentBrightness()

    def steps(self, settings: EditSettings) -> List[Tuple[str, Callable[[PixelBuffer], None]]]:
        """Ordered (name, step) pairs for the settings that are present."""
        steps = []
        if settings.brightness is not None:
            steps.append(("brightness", lambda b: self.brightness(b, settings.brightness)))
        if settings.contrast is not None:
            steps.append(("contrast", lambda b: adjust_contrast(b, settings.contrast)))
        if settings.saturation is not None:
            steps.append(("saturation", lambda b: adjust_saturation(b, settings.saturation)))
        if settings.hue is not None:
            steps.append(("hue", lambda b: adjust_hue(b, settings.hue)))
        if settings.blur is not None:
            steps.append(("blur", lambda b: apply_blur(b, settings.blur)))
        if settings.grayscale:
            steps.append(("grayscale", apply_grayscale))
        if settings.sepia:
            steps.append(("sepia", apply_sepia))
        return steps

    def apply(
        self,
        buffer: PixelBuffer,
        settings: EditSettings,
        mask: Optional[PixelBuffer] = None,
    ) -> PixelBuffer:
        """
        Apply settings to ``buffer`` in place.

        The caller hands the buffer over for the duration of the call and gets
        the same object back. With a mask, the steps run on a copy and only
        masked pixels are written back into ``buffer``.

        Args:
            buffer: Buffer to edit
            settings: Edit settings
            mask: Optional binary mask limiting the edit

        Returns:
            ``buffer``, edited

        Raises:
            DimensionMismatchError: If the mask size differs from the buffer
        """
        if mask is not None:
            buffer.require_same_size(mask, "mask")

        steps = self.steps(settings)
        if not steps or buffer.is_empty:
            return buffer

        target = buffer.copy() if mask is not None else buffer
        for name, step in steps:
            step(target)
            logger.debug(f"Applied {name}")

        if mask is not None:
            buffer.pixels[...] = composite_masked(buffer, target, mask).pixels

        mode = getattr(self.brightness, "name", type(self.brightness).__name__)
        logger.info(f"Applied {', '.join(name for name, _ in steps)} ({mode} brightness)")
        return buffer

