"""Colour space helpers used by the filter pipeline."""
import numpy as np

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])


def luma(rgb: np.ndarray) -> np.ndarray:
    """
    Weighted brightness 0.299R + 0.587G + 0.114B.

    Args:
        rgb: (..., 3) array in any range

    Returns:
        (...) array in the same range
    """
    return np.dot(rgb, LUMA_WEIGHTS)


def rgb_to_hsl(rgb: np.ndarray) -> np.ndarray:
    """
    Convert RGB to HSL.

    Args:
        rgb: (..., 3) array with values in [0, 1]

    Returns:
        (..., 3) array of hue in degrees [0, 360), saturation and lightness in [0, 1]
    """
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    c_max = rgb.max(axis=-1)
    c_min = rgb.min(axis=-1)
    delta = c_max - c_min

    lightness = (c_max + c_min) / 2.0

    chromatic = delta > 0
    safe_delta = np.where(chromatic, delta, 1.0)

    denom = 1.0 - np.abs(2.0 * lightness - 1.0)
    saturation = np.where(chromatic & (denom > 0), delta / np.where(denom > 0, denom, 1.0), 0.0)

    hue = np.zeros_like(lightness)
    red_max = chromatic & (c_max == r)
    green_max = chromatic & (c_max == g) & ~red_max
    blue_max = chromatic & ~red_max & ~green_max
    hue = np.where(red_max, ((g - b) / safe_delta) % 6.0, hue)
    hue = np.where(green_max, (b - r) / safe_delta + 2.0, hue)
    hue = np.where(blue_max, (r - g) / safe_delta + 4.0, hue)
    hue = (hue * 60.0) % 360.0

    return np.stack([hue, np.clip(saturation, 0.0, 1.0), lightness], axis=-1)


def hsl_to_rgb(hsl: np.ndarray) -> np.ndarray:
    """
    Convert HSL back to RGB.

    Args:
        hsl: (..., 3) array as produced by ``rgb_to_hsl``

    Returns:
        (..., 3) RGB array with values in [0, 1]
    """
    hue = hsl[..., 0] % 360.0
    saturation = hsl[..., 1]
    lightness = hsl[..., 2]

    chroma = (1.0 - np.abs(2.0 * lightness - 1.0)) * saturation
    sector = hue / 60.0
    x = chroma * (1.0 - np.abs(sector % 2.0 - 1.0))
    zero = np.zeros_like(chroma)

    # Pick (r, g, b) per 60 degree sector
    index = np.floor(sector).astype(int) % 6
    r = np.choose(index, [chroma, x, zero, zero, x, chroma])
    g = np.choose(index, [x, chroma, chroma, x, zero, zero])
    b = np.choose(index, [zero, zero, x, chroma, chroma, x])

    m = lightness - chroma / 2.0
    return np.clip(np.stack([r + m, g + m, b + m], axis=-1), 0.0, 1.0)


def rotate_hue(rgb: np.ndarray, degrees: float) -> np.ndarray:
    """
    Rotate hue by signed degrees, keeping saturation and lightness.

    Args:
        rgb: (..., 3) array with values 0-255

    Returns:
        (..., 3) float array with values 0-255
    """
    hsl = rgb_to_hsl(rgb / 255.0)
    hsl[..., 0] = (hsl[..., 0] + degrees) % 360.0
    return hsl_to_rgb(hsl) * 255.0
