"""Pixel editing engine: analysis, brush masks and prompt-driven filters."""
from pixedit.types import (
    PixelBuffer,
    ColorStat,
    RasterSummary,
    Stroke,
    EditSettings,
    EditorConfig,
    PixEditError,
    UninitializedBufferError,
    DimensionMismatchError,
    InvalidBufferError,
    UnsafePromptError,
    ImageLoadError,
)
from pixedit.analyzer import analyze, detect_edges
from pixedit.mask_painter import MaskPainter, PainterState
from pixedit.prompt_interpreter import interpret, validate_prompt, suggest_pixel_changes
from pixedit.filters import (
    FilterPipeline,
    AdditiveBrightness,
    PercentBrightness,
    composite_masked,
)
from pixedit.edit_service import EditService, EditResult

__version__ = "0.1.0"

__all__ = [
    "PixelBuffer",
    "ColorStat",
    "RasterSummary",
    "Stroke",
    "EditSettings",
    "EditorConfig",
    "PixEditError",
    "UninitializedBufferError",
    "DimensionMismatchError",
    "InvalidBufferError",
    "UnsafePromptError",
    "ImageLoadError",
    "analyze",
    "detect_edges",
    "MaskPainter",
    "PainterState",
    "interpret",
    "validate_prompt",
    "suggest_pixel_changes",
    "FilterPipeline",
    "AdditiveBrightness",
    "PercentBrightness",
    "composite_masked",
    "EditService",
    "EditResult",
]
