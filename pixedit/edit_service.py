"""Prompt-driven edit orchestration with an injected advisor."""
from dataclasses import dataclass
from typing import Callable, Dict, Optional
import logging

from pixedit.analyzer import analyze
from pixedit.filters import AdditiveBrightness, FilterPipeline, brightness_strategy
from pixedit.prompt_interpreter import interpret, suggest_pixel_changes, validate_prompt
from pixedit.types import (
    EditorConfig,
    EditSettings,
    PixelBuffer,
    RasterSummary,
    UnsafePromptError,
)

logger = logging.getLogger(__name__)

# Returns analysis text for a prompt, or None to request the local fallback
Advisor = Callable[[str, RasterSummary], Optional[str]]


@dataclass
class EditResult:
    """Outcome of a single edit request."""
    buffer: PixelBuffer
    settings: EditSettings
    prompt: str
    summary: RasterSummary
    ai_analysis: Optional[str] = None
    fallback: bool = False

    def applied_settings(self) -> Dict[str, str]:
        return self.settings.display_items()


class EditService:
    """
    Runs one edit request: safety check, analysis, advice, filters.

    The advisor stands in for a remote AI service. When it is missing,
    returns None, or raises, the settings come from local keyword heuristics
    alone and the result is flagged as a fallback.
    """

    def __init__(
        self,
        advisor: Optional[Advisor] = None,
        pipeline: Optional[FilterPipeline] = None,
        config: Optional[EditorConfig] = None,
    ):
        self.config = config or EditorConfig()
        self.advisor = advisor
        self.pipeline = pipeline or FilterPipeline(
            brightness_strategy(self.config.brightness_strategy)
        )
        self.pixel_pipeline = FilterPipeline(AdditiveBrightness())

    def edit(
        self,
        buffer: PixelBuffer,
        prompt: str,
        mask: Optional[PixelBuffer] = None,
    ) -> EditResult:
        """
        Edit ``buffer`` in place according to ``prompt``.

        Args:
            buffer: Buffer to edit; handed over for the duration of the call
            prompt: User's edit request
            mask: Optional binary mask limiting the edit

        Returns:
            EditResult wrapping the edited buffer and the settings used

        Raises:
            ValueError: If the prompt is blank
            UnsafePromptError: If the prompt is rejected by the safety filter
            DimensionMismatchError: If the mask size differs from the buffer
        """
        self._check_prompt(prompt)
        summary = analyze(buffer, self.config.dominant_color_count)

        ai_text = self._consult(prompt, summary)
        fallback = ai_text is None
        settings = interpret(prompt, ai_text or "")

        if fallback:
            logger.info(f"Using local prompt heuristics: {settings.to_dict()}")
        else:
            logger.info(f"Using advisor-enriched settings: {settings.to_dict()}")

        self.pipeline.apply(buffer, settings, mask=mask)
        return EditResult(
            buffer=buffer,
            settings=settings,
            prompt=prompt,
            summary=summary,
            ai_analysis=ai_text,
            fallback=fallback,
        )

    def edit_pixels(
        self,
        buffer: PixelBuffer,
        prompt: str,
        mask: Optional[PixelBuffer] = None,
    ) -> EditResult:
        """
        Direct pixel edit: brightness targets are derived from the measured mean.

        Same contract as ``edit`` but uses ``suggest_pixel_changes`` with the
        additive brightness strategy and never consults the advisor.
        """
        self._check_prompt(prompt)
        summary = analyze(buffer, self.config.dominant_color_count)
        settings = suggest_pixel_changes(summary, prompt)

        self.pixel_pipeline.apply(buffer, settings, mask=mask)
        return EditResult(
            buffer=buffer,
            settings=settings,
            prompt=prompt,
            summary=summary,
            fallback=True,
        )

    def _check_prompt(self, prompt: str) -> None:
        if not prompt or not prompt.strip():
            raise ValueError("Please enter an editing prompt")
        if not validate_prompt(prompt):
            raise UnsafePromptError("Prompt is not appropriate for image editing")

    def _consult(self, prompt: str, summary: RasterSummary) -> Optional[str]:
        if self.advisor is None:
            return None
        try:
            return self.advisor(prompt, summary)
        except Exception as e:
            logger.warning(f"Advisor failed, using fallback: {e}")
            return None
