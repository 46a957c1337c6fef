"""
Slide analysis with Claude (Anthropic).

Claude has no response schema option, so the expected JSON shape is spelled
out in the system prompt and enforced by `parse_analysis`.
"""

import os
from typing import Optional

from anthropic import Anthropic, APIError

from slideshifter.analyzers.base import ANALYSIS_PROMPT, BaseAnalyzer, parse_analysis
from slideshifter.errors import AnalysisError
from slideshifter.models import PageImage, SlideAnalysis


class ClaudeAnalyzer(BaseAnalyzer):
    """Analyze slide images with a Claude vision model."""

    SYSTEM_PROMPT = """You analyze presentation slide images and describe their structure for rebuilding them as editable PowerPoint slides.

Priorities:
1) Do not invent text or numbers. Transcribe verbatim.
2) Only report real figures (charts, diagrams, screenshots, photos) as figures.

Output structure:
{
  "title": "slide title, empty string if none",
  "content": ["bullet or paragraph", "..."],
  "layoutType": "TITLE_ONLY|TITLE_AND_CONTENT|TWO_COLUMN|BLANK|SECTION_HEADER",
  "backgroundColor": "#RRGGBB",
  "textColor": "#RRGGBB",
  "notes": "brief description for speaker notes",
  "figures": [
    {"description": "...", "boundingBox": [ymin, xmin, ymax, xmax]}
  ]
}

Return valid JSON only. No extra text, no markdown code blocks, no explanations."""

    SUPPORTED_MEDIA_TYPES = ("image/png", "image/jpeg", "image/gif", "image/webp")

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: int = 4096,
    ):
        super().__init__()
        self.api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not self.api_key:
            raise ValueError(
                "Anthropic API key required. Set ANTHROPIC_API_KEY env var or pass api_key parameter."
            )

        self.client = Anthropic(api_key=self.api_key)
        self.model = model or "claude-3-5-sonnet-20241022"
        self.max_tokens = max_tokens

    def analyze(self, page: PageImage) -> SlideAnalysis:
        if page.mime_type not in self.SUPPORTED_MEDIA_TYPES:
            raise AnalysisError(f"Unsupported image type for Claude: {page.mime_type}")

        print(f"[Claude] Analyzing slide {page.page_index + 1} ({page.width}x{page.height}px)")

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=self.SYSTEM_PROMPT,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": page.mime_type,
                                    "data": page.to_base64(),
                                },
                            },
                            {"type": "text", "text": ANALYSIS_PROMPT},
                        ],
                    }
                ],
            )
        except APIError as e:
            raise AnalysisError(f"Claude request failed: {e}", cause=e) from e

        response_text = "".join(
            block.text for block in response.content if block.type == "text"
        )
        analysis = parse_analysis(response_text)
        print(
            f"[Claude] Slide {page.page_index + 1}: {analysis.layout_type.value}, "
            f"{len(analysis.content)} text blocks, {len(analysis.figures)} figures"
        )
        return analysis
