"""Core types for the pixel editing engine."""
from dataclasses import dataclass, fields
from typing import Dict, Mapping, Optional, Tuple, Union
import logging

import numpy as np

logger = logging.getLogger(__name__)

CHANNELS = 4


class PixEditError(Exception):
    """Base exception for pixel editing errors."""
    pass


class UninitializedBufferError(PixEditError):
    """Raised when an operation needs a pixel buffer that does not exist yet."""
    pass


class DimensionMismatchError(PixEditError):
    """Raised when two buffers must share width/height but do not."""
    pass


class InvalidBufferError(PixEditError):
    """Raised when raw pixel data does not match the declared dimensions."""
    pass


class UnsafePromptError(PixEditError):
    """Raised when a prompt is rejected by the safety filter."""
    pass


class ImageLoadError(PixEditError):
    """Raised when an image file cannot be decoded."""
    pass


@dataclass
class PixelBuffer:
    """
    Owned width x height RGBA raster.

    ``pixels`` has shape (height, width, 4) and dtype uint8, so its flattened
    length is always ``width * height * 4``. Buffers are mutated in place by
    the filter pipeline; take a ``copy()`` whenever two owners need to mutate
    independently.
    """
    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise InvalidBufferError(
                f"Dimensions must be non-negative, got {self.width}x{self.height}"
            )
        expected = (self.height, self.width, CHANNELS)
        if not isinstance(self.pixels, np.ndarray):
            raise InvalidBufferError("Pixels must be a numpy array")
        if self.pixels.size != self.width * self.height * CHANNELS:
            raise InvalidBufferError(
                f"Expected {self.width * self.height * CHANNELS} values for "
                f"{self.width}x{self.height} RGBA, got {self.pixels.size}"
            )
        if self.pixels.ndim == 1:
            self.pixels = self.pixels.reshape(expected)
        elif self.pixels.shape != expected:
            raise InvalidBufferError(
                f"Expected shape {expected} or flat data, got {self.pixels.shape}"
            )
        if self.pixels.dtype != np.uint8:
            self.pixels = np.clip(self.pixels, 0, 255).astype(np.uint8)

    @classmethod
    def blank(cls, width: int, height: int) -> "PixelBuffer":
        """Fully transparent black buffer."""
        return cls(width, height, np.zeros((height, width, CHANNELS), dtype=np.uint8))

    @classmethod
    def from_bytes(cls, width: int, height: int, data: Union[bytes, bytearray]) -> "PixelBuffer":
        """Build a buffer from row-major RGBA bytes."""
        array = np.frombuffer(bytes(data), dtype=np.uint8).copy()
        return cls(width, height, array)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """
        Build a buffer from an image array.

        Args:
            array: (H, W), (H, W, 3) or (H, W, 4) array with values 0-255

        Returns:
            PixelBuffer owning a copy of the data (RGB input gets opaque alpha)
        """
        if array.ndim == 2:
            # Grayscale - replicate into RGB
            array = np.stack([array] * 3, axis=-1)

        if array.ndim != 3:
            raise InvalidBufferError(f"Expected 2D or 3D array, got {array.ndim}D")

        height, width, channels = array.shape
        array = np.clip(array, 0, 255).astype(np.uint8)
        if channels == 3:
            alpha = np.full((height, width, 1), 255, dtype=np.uint8)
            array = np.concatenate([array, alpha], axis=-1)
        elif channels != CHANNELS:
            raise InvalidBufferError(f"Expected 3 or 4 channels, got {channels}")

        return cls(width, height, array)

    @property
    def rgb(self) -> np.ndarray:
        """View of the colour channels, shape (H, W, 3)."""
        return self.pixels[..., :3]

    @property
    def alpha(self) -> np.ndarray:
        """View of the alpha channel, shape (H, W)."""
        return self.pixels[..., 3]

    @property
    def total_pixels(self) -> int:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.total_pixels == 0

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, self.pixels.copy())

    def to_bytes(self) -> bytes:
        return self.pixels.tobytes()

    def same_size(self, other: "PixelBuffer") -> bool:
        return self.width == other.width and self.height == other.height

    def require_same_size(self, other: "PixelBuffer", what: str = "buffer") -> None:
        """Raise DimensionMismatchError unless ``other`` matches this buffer."""
        if not self.same_size(other):
            raise DimensionMismatchError(
                f"{what} is {other.width}x{other.height}, "
                f"expected {self.width}x{self.height}"
            )


@dataclass(frozen=True)
class ColorStat:
    """One of the most frequent exact colours in a buffer."""
    r: int
    g: int
    b: int
    count: int = 0

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)


@dataclass(frozen=True)
class RasterSummary:
    """Aggregate statistics of a buffer; holds no reference to the source."""
    width: int
    height: int
    total_pixels: int
    dominant_colors: Tuple[ColorStat, ...] = ()
    brightness: float = 0.0  # Mean per-pixel channel average, [0, 255]
    contrast: float = 0.0    # Max - min per-pixel brightness, [0, 255]

    def to_dict(self) -> Dict[str, object]:
        """Plain mapping, suitable for handing to an external advisor."""
        return {
            "width": self.width,
            "height": self.height,
            "totalPixels": self.total_pixels,
            "dominantColors": [list(c.as_tuple()) for c in self.dominant_colors],
            "brightness": self.brightness,
            "contrast": self.contrast,
        }


@dataclass(frozen=True)
class Stroke:
    """One brush dab in image pixel space."""
    x: float
    y: float
    radius: float


NUMERIC_SETTINGS = ("brightness", "contrast", "saturation", "hue", "blur", "sharpness")
FLAG_SETTINGS = ("grayscale", "sepia")


@dataclass(frozen=True)
class EditSettings:
    """
    Parameter set driving the filter pipeline.

    Every field is optional; ``None`` means the setting is absent and the
    matching transform is skipped. Units:

    *   brightness, saturation: percent (100 = unchanged). Under the additive
        brightness strategy ``brightness`` is instead the target mean
        brightness on the 0-255 scale.
    *   contrast: percent strength of the stretch, 0 = unchanged.
        100 gives a factor of 129.5.
    *   hue: signed degrees.
    *   blur: pixels, >= 0.
    *   sharpness: advisory only, never applied.
    """
    brightness: Optional[float] = None
    contrast: Optional[float] = None
    saturation: Optional[float] = None
    hue: Optional[float] = None
    blur: Optional[float] = None
    grayscale: Optional[bool] = None
    sepia: Optional[bool] = None
    sharpness: Optional[float] = None

    def __post_init__(self):
        if self.blur is not None and self.blur < 0:
            raise ValueError(f"blur must be >= 0, got {self.blur}")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object]) -> "EditSettings":
        """
        Parse a key -> value mapping as produced at the UI boundary.

        Numeric values may be numbers or numeric strings; flags may be bools
        or the strings "true"/"yes"/"1". Unknown keys are ignored.
        """
        values = {}
        for key, raw in mapping.items():
            if key in NUMERIC_SETTINGS:
                try:
                    values[key] = float(raw)
                except (TypeError, ValueError) as e:
                    raise ValueError(f"Setting {key!r} is not numeric: {raw!r}") from e
            elif key in FLAG_SETTINGS:
                if isinstance(raw, str):
                    values[key] = raw.strip().lower() in ("true", "yes", "1")
                else:
                    values[key] = bool(raw)
            else:
                logger.debug(f"Ignoring unknown setting {key!r}")
        return cls(**values)

    def to_dict(self) -> Dict[str, Union[float, bool]]:
        """Present settings only, in declaration order."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def display_items(self) -> Dict[str, str]:
        """Settings as shown under "Applied Settings": booleans become Yes/No."""
        shown = {}
        for key, value in self.to_dict().items():
            if isinstance(value, bool):
                shown[key] = "Yes" if value else "No"
            else:
                shown[key] = str(int(value)) if float(value).is_integer() else str(value)
        return shown

    @property
    def is_identity(self) -> bool:
        return not self.to_dict()


@dataclass
class EditorConfig:
    """Configuration for the editing engine."""
    # Brush
    brush_radius: float = 20.0
    min_brush_radius: float = 5.0
    max_brush_radius: float = 50.0

    # Analysis
    dominant_color_count: int = 5

    # Filters: "percent" or "additive"
    brightness_strategy: str = "percent"
