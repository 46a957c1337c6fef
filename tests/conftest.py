"""
Shared fixtures: synthetic page rasters, a scripted analyzer and a sink that
records what it is given.
"""

import io
from pathlib import Path
from typing import List, Sequence, Union

import pytest
from PIL import Image

from slideshifter.analyzers import BaseAnalyzer
from slideshifter.errors import AnalysisError
from slideshifter.models import DrawOperation, PageImage, SlideAnalysis, SlideSize
from slideshifter.renderers import BaseSink


def make_page(page_index: int = 0, width: int = 200, height: int = 100) -> PageImage:
    """
    A page split into four colored quadrants:
    red (top-left), green (top-right), blue (bottom-left), white (bottom-right).
    """
    img = Image.new("RGB", (width, height), "white")
    half_w, half_h = width // 2, height // 2
    img.paste((255, 0, 0), (0, 0, half_w, half_h))
    img.paste((0, 255, 0), (half_w, 0, width, half_h))
    img.paste((0, 0, 255), (0, half_h, half_w, height))
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return PageImage(
        page_index=page_index,
        data=buffer.getvalue(),
        mime_type="image/png",
        width=width,
        height=height,
    )


def make_analysis(**overrides) -> SlideAnalysis:
    data = {
        "title": "Intro",
        "content": ["First point", "Second point"],
        "layoutType": "TITLE_AND_CONTENT",
    }
    data.update(overrides)
    return SlideAnalysis.model_validate(data)


class ScriptedAnalyzer(BaseAnalyzer):
    """Returns (or raises) one scripted result per call, in order."""

    def __init__(self, results: Sequence[Union[SlideAnalysis, Exception]]):
        super().__init__()
        self.results = list(results)
        self.calls: List[int] = []

    def analyze(self, page: PageImage) -> SlideAnalysis:
        self.calls.append(page.page_index)
        result = self.results[len(self.calls) - 1]
        if isinstance(result, Exception):
            raise result
        return result


class RecordingSink(BaseSink):
    def __init__(self, slide_size: SlideSize, fail_on_finalize: bool = False):
        self.slide_size = slide_size
        self.slides: List[List[DrawOperation]] = []
        self.finalized_to = None
        self.fail_on_finalize = fail_on_finalize

    def add_slide(self, operations: Sequence[DrawOperation]) -> None:
        self.slides.append(list(operations))

    def finalize(self, output_path: Path) -> Path:
        if self.fail_on_finalize:
            raise OSError("disk full")
        self.finalized_to = output_path
        return output_path


class SinkRecorder:
    """Sink factory that keeps every sink it builds."""

    def __init__(self, fail_on_finalize: bool = False):
        self.sinks: List[RecordingSink] = []
        self.fail_on_finalize = fail_on_finalize

    def __call__(self, slide_size, mode) -> RecordingSink:
        sink = RecordingSink(slide_size, fail_on_finalize=self.fail_on_finalize)
        self.sinks.append(sink)
        return sink


@pytest.fixture
def page() -> PageImage:
    return make_page()


@pytest.fixture
def analysis_error() -> AnalysisError:
    return AnalysisError("model unavailable")


@pytest.fixture
def sink_recorder() -> SinkRecorder:
    return SinkRecorder()
