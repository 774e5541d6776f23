"""Keyword heuristics turning edit prompts into EditSettings."""
from typing import Dict, Iterable, Optional, Sequence, Tuple
import logging

from pixedit.types import EditSettings, RasterSummary

logger = logging.getLogger(__name__)

# (keywords, settings) in priority order. Later rules overwrite earlier ones
# for the same key.
KEYWORD_RULES: Tuple[Tuple[Tuple[str, ...], Dict[str, object]], ...] = (
    (("bright", "vibrant"), {"brightness": 110.0}),
    (("dark", "dim"), {"brightness": 90.0}),
    (("contrast",), {"contrast": 120.0}),
    (("color", "saturation", "vibrant"), {"saturation": 130.0}),
    (("black and white", "grayscale"), {"grayscale": True}),
    (("vintage", "sepia"), {"sepia": True, "saturation": 80.0}),
    (("blur", "soft", "soft focus"), {"blur": 1.0}),
    (("warm",), {"hue": 10.0, "saturation": 110.0}),
    (("cool",), {"hue": -10.0, "saturation": 90.0}),
    (("professional",), {"contrast": 110.0, "sharpness": 1.1}),
    (("artistic",), {"saturation": 120.0, "contrast": 105.0}),
)

BLOCKED_TERMS = (
    "violent", "harmful", "illegal", "adult", "nude", "naked",
    "weapon", "blood", "gore", "explicit", "sexual",
)

PIXEL_BRIGHTNESS_STEP = 30.0
PIXEL_CONTRAST = 130.0
VINTAGE_DIMMING = 0.9


def _mentions(texts: Iterable[str], keywords: Sequence[str]) -> bool:
    return any(keyword in text for text in texts for keyword in keywords)


def interpret(prompt: str, ai_text: Optional[str] = "") -> EditSettings:
    """
    Map a free-text prompt to EditSettings.

    Matching is case-insensitive substring search; a keyword found in either
    the prompt or the advisor's analysis text triggers its rule. Rules run in
    ``KEYWORD_RULES`` order, last writer wins. No match gives empty settings.

    Args:
        prompt: User's edit request
        ai_text: Optional analysis text from an external advisor

    Returns:
        EditSettings (possibly empty)
    """
    texts = ((prompt or "").lower(), (ai_text or "").lower())

    values: Dict[str, object] = {}
    for keywords, effect in KEYWORD_RULES:
        if _mentions(texts, keywords):
            values.update(effect)

    settings = EditSettings(**values)
    logger.debug(f"Interpreted prompt {prompt!r} as {settings.to_dict()}")
    return settings


def validate_prompt(prompt: str, blocked_terms: Sequence[str] = BLOCKED_TERMS) -> bool:
    """True unless the prompt contains a blocked term."""
    lowered = (prompt or "").lower()
    for term in blocked_terms:
        if term in lowered:
            logger.info(f"Prompt rejected: contains {term!r}")
            return False
    return True


def suggest_pixel_changes(summary: RasterSummary, prompt: str) -> EditSettings:
    """
    Local fallback for the direct pixel path.

    Brightness values produced here are absolute target means (0-255) meant
    for the additive brightness strategy, derived from the measured summary.
    Vietnamese keywords are accepted alongside the English ones.

    Args:
        summary: Analysis of the buffer about to be edited
        prompt: User's edit request

    Returns:
        EditSettings for the pixel path
    """
    text = (prompt or "").lower()
    values: Dict[str, object] = {}

    if "bright" in text or "sáng" in text:
        values["brightness"] = min(255.0, summary.brightness + PIXEL_BRIGHTNESS_STEP)

    if "dark" in text or "tối" in text:
        values["brightness"] = max(0.0, summary.brightness - PIXEL_BRIGHTNESS_STEP)

    if "contrast" in text or "tương phản" in text:
        values["contrast"] = PIXEL_CONTRAST

    if "black and white" in text or "đen trắng" in text:
        values["grayscale"] = True

    if "vintage" in text or "cũ" in text:
        values["sepia"] = True
        values["brightness"] = summary.brightness * VINTAGE_DIMMING

    return EditSettings(**values)
