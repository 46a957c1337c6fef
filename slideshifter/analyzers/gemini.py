"""
Slide analysis with Google Gemini (google-genai).

Gemini is asked for structured JSON output through a response schema;
the answer still goes through `parse_analysis` before it is trusted.
"""

import os
from typing import Optional

from google import genai
from google.genai import types

from slideshifter.analyzers.base import ANALYSIS_PROMPT, BaseAnalyzer, parse_analysis
from slideshifter.errors import AnalysisError
from slideshifter.models import LayoutType, PageImage, SlideAnalysis


RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "title": types.Schema(
            type=types.Type.STRING,
            description="The main title of the slide. Empty if none.",
        ),
        "content": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(type=types.Type.STRING),
            description="List of bullet points or paragraphs found in the slide body.",
        ),
        "layoutType": types.Schema(
            type=types.Type.STRING,
            enum=[layout.value for layout in LayoutType],
            description="The closest PowerPoint layout matching this slide.",
        ),
        "backgroundColor": types.Schema(
            type=types.Type.STRING,
            description="Hex color code for the background (e.g. #FFFFFF).",
        ),
        "textColor": types.Schema(
            type=types.Type.STRING,
            description="Hex color code for the main text (e.g. #000000).",
        ),
        "notes": types.Schema(
            type=types.Type.STRING,
            description="Brief description of the slide content for speaker notes.",
        ),
        "figures": types.Schema(
            type=types.Type.ARRAY,
            description="Detected diagrams, charts, or images.",
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "description": types.Schema(type=types.Type.STRING),
                    "boundingBox": types.Schema(
                        type=types.Type.ARRAY,
                        items=types.Schema(type=types.Type.NUMBER),
                        description="[ymin, xmin, ymax, xmax] in percent (0-100).",
                    ),
                },
                required=["boundingBox", "description"],
            ),
        ),
    },
    required=["title", "content", "layoutType"],
)


class GeminiAnalyzer(BaseAnalyzer):
    """
    Analyze slide images with a Gemini vision model.

    Extracts title, body text, layout type, colors, speaker notes and
    figure bounding boxes in one call per slide.
    """

    DEFAULT_MODEL = "gemini-2.0-flash"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = 0.1,
    ):
        super().__init__()
        self.api_key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not self.api_key:
            raise ValueError(
                "Gemini API key required. Set GEMINI_API_KEY env var or pass api_key parameter."
            )

        self.client = genai.Client(api_key=self.api_key)
        self.model = model or self.DEFAULT_MODEL
        self.temperature = temperature

    def analyze(self, page: PageImage) -> SlideAnalysis:
        print(f"[Gemini] Analyzing slide {page.page_index + 1} ({page.width}x{page.height}px)")

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=[
                    types.Part.from_bytes(data=page.data, mime_type=page.mime_type),
                    ANALYSIS_PROMPT,
                ],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=RESPONSE_SCHEMA,
                    temperature=self.temperature,
                ),
            )
        except Exception as e:
            # API errors and httpx transport errors both end up here
            raise AnalysisError(f"Gemini request failed: {e}", cause=e) from e

        analysis = parse_analysis(response.text)
        print(
            f"[Gemini] Slide {page.page_index + 1}: {analysis.layout_type.value}, "
            f"{len(analysis.content)} text blocks, {len(analysis.figures)} figures"
        )
        return analysis
