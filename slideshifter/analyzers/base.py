"""
Base analyzer interface and the analysis parse boundary.
"""

import json
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import ValidationError

from slideshifter.errors import AnalysisError
from slideshifter.models import PageImage, SlideAnalysis


ANALYSIS_PROMPT = """Analyze this presentation slide image.
1. Extract the title and main text content.
2. Determine the layout style.
3. Detect any NON-TEXT visual elements such as charts, graphs, diagrams, screenshots, or photos.
   For each visual element, provide a bounding box as [ymin, xmin, ymax, xmax] on a scale of 0 to 100.
   (Top-left is 0,0; Bottom-right is 100,100).
   Do not include simple decorative lines or background shapes as figures.
4. Suggest colors.
5. Write a brief description of the slide content for speaker notes."""


def strip_code_fences(text: str) -> str:
    """Remove a markdown code fence wrapped around a JSON answer."""
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_analysis(response_text: Optional[str]) -> SlideAnalysis:
    """
    Parse and validate a raw analyzer response.

    Whatever schema the model was asked to follow, its answer is untrusted:
    anything that does not validate as a SlideAnalysis is rejected.

    Raises:
        AnalysisError: empty response, invalid JSON, or schema mismatch
    """
    if not response_text or not response_text.strip():
        raise AnalysisError("No response from analyzer.")

    try:
        data = json.loads(strip_code_fences(response_text))
    except json.JSONDecodeError as e:
        raise AnalysisError(f"Failed to parse analysis results: {e}", cause=e) from e

    if not isinstance(data, dict):
        raise AnalysisError(
            f"Analysis must be a JSON object, got {type(data).__name__}"
        )

    try:
        return SlideAnalysis.model_validate(data)
    except ValidationError as e:
        raise AnalysisError(
            f"Analysis does not match the expected structure: "
            f"{e.error_count()} error(s), first: {e.errors()[0]['msg']}",
            cause=e,
        ) from e


class BaseAnalyzer(ABC):
    """Abstract base class for vision analyzers."""

    def __init__(self, config: Optional[dict] = None):
        self.config = config or {}
        self.name = self.__class__.__name__.replace("Analyzer", "").lower()

    @abstractmethod
    def analyze(self, page: PageImage) -> SlideAnalysis:
        """
        Analyze one slide image.

        Args:
            page: Rasterized page

        Returns:
            Validated SlideAnalysis

        Raises:
            AnalysisError: the call failed or the answer was unusable
        """
        pass
