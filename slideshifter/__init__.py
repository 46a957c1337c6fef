"""
SlideShifter: Convert PDF slide decks into PowerPoint files.

Two pipelines: a high-fidelity image copy of every page, or an AI-extract
mode that analyzes each page with a vision model and rebuilds editable
slides (text, colors, cropped figures, speaker notes).
"""

__version__ = "0.1.0"
__author__ = "SlideShifter Team"

from slideshifter.models import (
    BoundingBox,
    ConversionMode,
    LayoutType,
    PageImage,
    SlideAnalysis,
    SlideStatus,
)
from slideshifter.pipeline import CancellationToken, SlideShifterPipeline

__all__ = [
    "BoundingBox",
    "CancellationToken",
    "ConversionMode",
    "LayoutType",
    "PageImage",
    "SlideAnalysis",
    "SlideShifterPipeline",
    "SlideStatus",
]
