"""Freehand brush strokes rasterised into a binary edit mask."""
from enum import Enum, auto
from typing import List, Optional, Tuple
import logging

import numpy as np
from skimage.draw import disk

from pixedit.types import (
    EditorConfig,
    PixelBuffer,
    Stroke,
    UninitializedBufferError,
)

logger = logging.getLogger(__name__)

# Channels must all exceed this for a pixel to count as painted
MASK_THRESHOLD = 200

PAINT_COLOR = np.array([255, 255, 255, 255], dtype=np.uint8)

Point = Tuple[float, float]


class PainterState(Enum):
    """Pointer state of a mask session."""
    IDLE = auto()
    PAINTING = auto()
    CLEARED = auto()


class MaskPainter:
    """
    Accumulates brush strokes over a copy of an image and exports a mask.

    Incoming points are in display coordinates and are rescaled to the
    buffer's pixel grid using the display size, so strokes stay aligned when
    the image is shown at a different size than its backing buffer.
    """

    def __init__(
        self,
        source: Optional[PixelBuffer] = None,
        display_size: Optional[Tuple[float, float]] = None,
        config: Optional[EditorConfig] = None,
    ):
        """
        Initialize painter.

        Args:
            source: Image to paint over. A copy is taken.
            display_size: (width, height) the image is displayed at. Defaults
                to the buffer's own size (1:1).
            config: Editor configuration. Uses defaults if None.
        """
        self.config = config or EditorConfig()
        self._brush_radius = self.config.brush_radius
        self._original: Optional[PixelBuffer] = None
        self._working: Optional[PixelBuffer] = None
        self._display_size: Optional[Tuple[float, float]] = None
        self._strokes: List[Stroke] = []
        self.state = PainterState.IDLE

        if source is not None:
            self.load(source)
        if display_size is not None:
            self.set_display_size(*display_size)

    def load(self, source: PixelBuffer) -> None:
        """Start a new mask session over ``source``."""
        self._original = source.copy()
        self._working = source.copy()
        self._strokes = []
        self.state = PainterState.IDLE
        logger.debug(f"Mask session started on {source.width}x{source.height} image")

    def cancel(self) -> None:
        """Drop the session entirely."""
        self._original = None
        self._working = None
        self._strokes = []
        self.state = PainterState.IDLE

    @property
    def is_loaded(self) -> bool:
        return self._working is not None

    @property
    def working_buffer(self) -> PixelBuffer:
        return self._require_working()

    @property
    def strokes(self) -> Tuple[Stroke, ...]:
        return tuple(self._strokes)

    @property
    def is_painting(self) -> bool:
        return self.state is PainterState.PAINTING

    @property
    def brush_radius(self) -> float:
        return self._brush_radius

    @brush_radius.setter
    def brush_radius(self, radius: float) -> None:
        low, high = self.config.min_brush_radius, self.config.max_brush_radius
        if not low <= radius <= high:
            raise ValueError(f"Brush radius must be in [{low}, {high}], got {radius}")
        self._brush_radius = radius

    def set_display_size(self, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Display size must be positive, got {width}x{height}")
        self._display_size = (float(width), float(height))

    def scale(self) -> Tuple[float, float]:
        """(scale_x, scale_y) from display to buffer coordinates."""
        working = self._require_working()
        if self._display_size is None:
            return 1.0, 1.0
        display_width, display_height = self._display_size
        return working.width / display_width, working.height / display_height

    def to_image_space(self, point: Point) -> Point:
        scale_x, scale_y = self.scale()
        return point[0] * scale_x, point[1] * scale_y

    def begin_stroke(self, point: Point) -> Stroke:
        """Pointer down: start painting and lay the first dab."""
        self._require_working()
        self.state = PainterState.PAINTING
        return self.paint(point)

    def continue_stroke(self, point: Point) -> Optional[Stroke]:
        """Pointer move: add a dab while painting, otherwise ignore."""
        if self.state is not PainterState.PAINTING:
            return None
        return self.paint(point)

    def end_stroke(self) -> None:
        """Pointer up or leave."""
        if self.state is PainterState.PAINTING:
            self.state = PainterState.IDLE

    def paint(self, point: Point, radius: Optional[float] = None) -> Stroke:
        """
        Draw an opaque white disc at a display-space point.

        Covered pixels are replaced outright, colour and alpha.

        Args:
            point: (x, y) in display coordinates
            radius: Disc radius in buffer pixels. Uses the brush radius if None.

        Returns:
            The recorded Stroke in image space
        """
        working = self._require_working()
        radius = self._brush_radius if radius is None else radius
        if radius <= 0:
            raise ValueError(f"Radius must be positive, got {radius}")

        x, y = self.to_image_space(point)
        rows, cols = disk((y, x), radius, shape=(working.height, working.width))
        working.pixels[rows, cols] = PAINT_COLOR

        stroke = Stroke(x=x, y=y, radius=float(radius))
        self._strokes.append(stroke)
        return stroke

    def clear(self) -> None:
        """Remove all paint, revealing the original image again."""
        if self._original is None:
            raise UninitializedBufferError("No image loaded to clear")
        self._working = self._original.copy()
        self._strokes = []
        self.state = PainterState.CLEARED

    def export_mask(self) -> PixelBuffer:
        """
        Binarise the working buffer into a mask and end the session.

        A pixel becomes opaque white when R, G and B all exceed
        ``MASK_THRESHOLD`` and alpha is non-zero; every other pixel is fully
        transparent. Afterwards strokes are dropped and the working buffer is
        restored from the original.

        Returns:
            Newly allocated mask buffer of the working buffer's size

        Raises:
            UninitializedBufferError: If no image has been loaded
        """
        working = self._require_working()
        rgb = working.rgb
        painted = np.all(rgb > MASK_THRESHOLD, axis=-1) & (working.alpha > 0)

        mask = PixelBuffer.blank(working.width, working.height)
        mask.pixels[painted] = PAINT_COLOR

        logger.info(
            f"Exported mask from {len(self._strokes)} strokes: "
            f"{int(np.count_nonzero(painted))}/{working.total_pixels} pixels selected"
        )

        self._working = self._original.copy()
        self._strokes = []
        self.state = PainterState.IDLE
        return mask

    def _require_working(self) -> PixelBuffer:
        if self._working is None:
            raise UninitializedBufferError("No image loaded for masking")
        return self._working
