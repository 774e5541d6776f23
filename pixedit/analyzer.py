"""Raster statistics: brightness, contrast, dominant colours and edges."""
from typing import List
import logging

import numpy as np

from pixedit.types import ColorStat, PixelBuffer, RasterSummary

logger = logging.getLogger(__name__)

DOMINANT_COLOR_COUNT = 5
EDGE_THRESHOLD = 30


def pixel_brightness(buffer: PixelBuffer) -> np.ndarray:
    """Per-pixel (R + G + B) / 3 as a float64 (H, W) array."""
    return buffer.rgb.astype(np.float64).sum(axis=-1) / 3.0


def average_brightness(buffer: PixelBuffer) -> float:
    """
    Mean of the per-pixel channel average.

    A zero-area buffer has brightness 0.0 by convention.
    """
    if buffer.is_empty:
        return 0.0
    return float(pixel_brightness(buffer).mean())


def measure_contrast(buffer: PixelBuffer) -> float:
    """Spread between the brightest and darkest pixel, 0.0 for empty buffers."""
    if buffer.is_empty:
        return 0.0
    values = pixel_brightness(buffer)
    return float(values.max() - values.min())


def dominant_colors(buffer: PixelBuffer, n_colors: int = DOMINANT_COLOR_COUNT) -> List[ColorStat]:
    """
    Most frequent exact RGB triples, alpha ignored.

    Colours are grouped by a packed ``R << 16 | G << 8 | B`` key. The result is
    ordered by descending count; equal counts keep the order in which the
    colours first appear in a row-major scan.

    Args:
        buffer: Source buffer
        n_colors: Maximum number of colours to return

    Returns:
        Up to ``n_colors`` ColorStat values
    """
    if n_colors < 1:
        raise ValueError(f"n_colors must be >= 1, got {n_colors}")
    if buffer.is_empty:
        return []

    rgb = buffer.rgb.reshape(-1, 3).astype(np.uint32)
    keys = (rgb[:, 0] << 16) | (rgb[:, 1] << 8) | rgb[:, 2]

    unique_keys, first_index, counts = np.unique(keys, return_index=True, return_counts=True)

    # lexsort sorts by the last key first
    order = np.lexsort((first_index, -counts))[:n_colors]

    stats = []
    for idx in order:
        key = int(unique_keys[idx])
        stats.append(ColorStat(
            r=(key >> 16) & 0xFF,
            g=(key >> 8) & 0xFF,
            b=key & 0xFF,
            count=int(counts[idx]),
        ))
    return stats


def analyze(buffer: PixelBuffer, n_colors: int = DOMINANT_COLOR_COUNT) -> RasterSummary:
    """
    Summarise a buffer without modifying it.

    Args:
        buffer: Source buffer
        n_colors: Number of dominant colours to report

    Returns:
        RasterSummary with dimensions, dominant colours, brightness and contrast
    """
    summary = RasterSummary(
        width=buffer.width,
        height=buffer.height,
        total_pixels=buffer.total_pixels,
        dominant_colors=tuple(dominant_colors(buffer, n_colors)),
        brightness=average_brightness(buffer),
        contrast=measure_contrast(buffer),
    )
    logger.debug(
        f"Analyzed {buffer.width}x{buffer.height}: brightness={summary.brightness:.2f}, "
        f"contrast={summary.contrast:.2f}, {len(summary.dominant_colors)} dominant colors"
    )
    return summary


def detect_edges(buffer: PixelBuffer, threshold: int = EDGE_THRESHOLD) -> PixelBuffer:
    """
    Mark edges using red-channel differences to the upper-left neighbours.

    For each interior pixel the absolute red difference to the top-left, top
    and left neighbours is summed; a sum above ``threshold`` makes the pixel
    opaque white. Everything else, including the one-pixel border, stays
    fully transparent.

    Args:
        buffer: Source buffer
        threshold: Exclusive lower bound on the summed difference

    Returns:
        New buffer of identical dimensions
    """
    edges = PixelBuffer.blank(buffer.width, buffer.height)
    if buffer.width < 3 or buffer.height < 3:
        return edges

    red = buffer.pixels[..., 0].astype(np.int16)
    centre = red[1:-1, 1:-1]
    diff = (
        np.abs(centre - red[:-2, :-2])
        + np.abs(centre - red[:-2, 1:-1])
        + np.abs(centre - red[1:-1, :-2])
    )

    interior = edges.pixels[1:-1, 1:-1]
    interior[diff > threshold] = 255

    logger.debug(f"Edge map: {int(np.count_nonzero(diff > threshold))} edge pixels")
    return edges
