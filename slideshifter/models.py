"""
Core data models for SlideShifter.

Pydantic models for page rasters, the analyzer's SlideAnalysis, the
per-slide lifecycle (ProcessedSlide / Batch) and the draw operations
handed to the output sink.
"""

import base64
import binascii
import io
import math
import re
from enum import Enum
from pathlib import Path
from typing import Annotated, List, Optional, Literal, Union, Any

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from slideshifter.errors import ErrorKind, InvalidTransition


DATA_URL_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,")


class ConversionMode(str, Enum):
    """Which pipeline to run."""

    AI_EXTRACT = "AI_EXTRACT"
    IMAGE_ONLY = "IMAGE_ONLY"


class LayoutType(str, Enum):
    TITLE_ONLY = "TITLE_ONLY"
    TITLE_AND_CONTENT = "TITLE_AND_CONTENT"
    TWO_COLUMN = "TWO_COLUMN"
    BLANK = "BLANK"
    SECTION_HEADER = "SECTION_HEADER"


class SlideStatus(str, Enum):
    PENDING = "pending"
    ANALYZING = "analyzing"
    DONE = "done"
    ERROR = "error"


class BatchState(str, Enum):
    IDLE = "idle"
    PAGES_READY = "pages_ready"
    ANALYZING = "analyzing"
    FINALIZING = "finalizing"
    COMPLETED = "completed"
    FAILED = "failed"


# --- Page rasters ---


class PageImage(BaseModel):
    """One rasterized PDF page."""

    model_config = ConfigDict(frozen=True)

    page_index: int = Field(ge=0)
    data: bytes = Field(..., repr=False)
    mime_type: str = "image/png"
    width: int = Field(gt=0)
    height: int = Field(gt=0)

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @classmethod
    def from_bytes(
        cls, page_index: int, data: bytes, mime_type: Optional[str] = None
    ) -> "PageImage":
        """Build a PageImage from encoded bytes, reading the pixel size with Pillow."""
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
            if mime_type is None:
                mime_type = Image.MIME.get(img.format or "", "image/png")
        return cls(
            page_index=page_index,
            data=data,
            mime_type=mime_type,
            width=width,
            height=height,
        )

    @classmethod
    def from_base64(cls, page_index: int, encoded: str) -> "PageImage":
        """
        Build a PageImage from a base64 string.

        Accepts bare base64 as well as data URLs
        (``data:image/jpeg;base64,...``).
        """
        match = DATA_URL_PREFIX.match(encoded)
        mime_type = None
        if match:
            mime_type = match.group(0)[len("data:"):-len(";base64,")]
            encoded = encoded[match.end():]
        try:
            data = base64.b64decode(encoded, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 page image: {e}") from e
        return cls.from_bytes(page_index, data, mime_type=mime_type)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


# --- Analyzer output ---


class BoundingBox(BaseModel):
    """
    Percentage-space rectangle ``(y_min, x_min, y_max, x_max)``, 0-100 scale.

    Values come from an untrusted analyzer, so construction never checks
    ordering or range. Use `is_valid()` before cropping.
    """

    model_config = ConfigDict(frozen=True)

    y_min: float
    x_min: float
    y_max: float
    x_max: float

    @model_validator(mode="before")
    @classmethod
    def from_sequence(cls, value: Any) -> Any:
        # Analyzer order is [ymin, xmin, ymax, xmax]
        if isinstance(value, (list, tuple)):
            if len(value) != 4:
                raise ValueError(f"Bounding box needs 4 numbers, got {len(value)}")
            return {
                "y_min": value[0],
                "x_min": value[1],
                "y_max": value[2],
                "x_max": value[3],
            }
        return value

    @field_validator("y_min", "x_min", "y_max", "x_max", mode="before")
    @classmethod
    def reject_non_numeric(cls, v: Any) -> Any:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError(f"Bounding box values must be numbers, got {v!r}")
        # json.loads turns 1e999 into inf; huge ints overflow float
        try:
            finite = math.isfinite(v)
        except OverflowError:
            finite = False
        if not finite:
            raise ValueError(f"Bounding box values must be finite, got {v!r}")
        return v

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    def is_valid(self) -> bool:
        if not all(math.isfinite(v) for v in self.to_list()):
            return False
        return self.x_max > self.x_min and self.y_max > self.y_min

    def to_list(self) -> List[float]:
        return [self.y_min, self.x_min, self.y_max, self.x_max]


class SlideFigure(BaseModel):
    """A detected chart, diagram, screenshot or photo."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    bounding_box: BoundingBox = Field(..., alias="boundingBox")
    description: str


class SlideAnalysis(BaseModel):
    """
    Structural analysis of one slide image.

    Accepts the analyzer's camelCase keys (``layoutType``,
    ``backgroundColor``...) as well as the snake_case field names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    content: List[str]
    layout_type: LayoutType = Field(..., alias="layoutType")
    background_color: Optional[str] = Field(None, alias="backgroundColor")
    text_color: Optional[str] = Field(None, alias="textColor")
    notes: Optional[str] = None
    figures: List[SlideFigure] = Field(default_factory=list)

    @field_validator("figures", mode="before")
    @classmethod
    def none_means_no_figures(cls, v: Any) -> Any:
        return [] if v is None else v


# --- Slide lifecycle ---


class ProcessedSlide(BaseModel):
    """A page plus its analysis and lifecycle status."""

    page: PageImage
    analysis: Optional[SlideAnalysis] = None
    status: SlideStatus = SlideStatus.PENDING
    error: Optional[str] = None


# Allowed status moves. PENDING -> DONE is the image-copy shortcut.
ALLOWED_TRANSITIONS = {
    SlideStatus.PENDING: {SlideStatus.ANALYZING, SlideStatus.DONE},
    SlideStatus.ANALYZING: {SlideStatus.DONE, SlideStatus.ERROR},
    SlideStatus.DONE: set(),
    SlideStatus.ERROR: set(),
}


class Batch:
    """
    Ordered slides of one conversion run, in PDF page order.

    Owned by the pipeline. Status only ever moves forward along
    pending -> analyzing -> done|error; anything else raises
    InvalidTransition.
    """

    def __init__(self, slides: Optional[List[ProcessedSlide]] = None):
        self.slides: List[ProcessedSlide] = list(slides or [])

    @classmethod
    def from_pages(cls, pages: List[PageImage]) -> "Batch":
        """Start a batch with every slide pending and no analysis."""
        return cls([ProcessedSlide(page=page) for page in pages])

    def __len__(self) -> int:
        return len(self.slides)

    def __getitem__(self, index: int) -> ProcessedSlide:
        return self.slides[index]

    def __iter__(self):
        return iter(self.slides)

    def _transition(self, index: int, target: SlideStatus) -> ProcessedSlide:
        slide = self.slides[index]
        if target not in ALLOWED_TRANSITIONS[slide.status]:
            raise InvalidTransition(
                f"Slide {index + 1}: cannot move from {slide.status.value} to {target.value}"
            )
        slide.status = target
        return slide

    def mark_analyzing(self, index: int) -> None:
        """pending -> analyzing. Call right before the analyzer."""
        self._transition(index, SlideStatus.ANALYZING)

    def mark_done(self, index: int, analysis: Optional[SlideAnalysis] = None) -> None:
        """
        analyzing -> done with an analysis, or pending -> done without one
        (image-copy mode).
        """
        slide = self.slides[index]
        if analysis is None and slide.status != SlideStatus.PENDING:
            raise InvalidTransition(
                f"Slide {index + 1}: an analyzed slide must be completed with its analysis"
            )
        if analysis is not None and slide.status != SlideStatus.ANALYZING:
            raise InvalidTransition(
                f"Slide {index + 1}: analysis recorded without mark_analyzing()"
            )
        self._transition(index, SlideStatus.DONE)
        slide.analysis = analysis

    def mark_error(self, index: int, reason: str) -> None:
        """analyzing -> error, keeping the reason for reporting."""
        slide = self._transition(index, SlideStatus.ERROR)
        slide.error = reason

    def mark_all_done(self) -> None:
        for i in range(len(self.slides)):
            self.mark_done(i)

    def statuses(self) -> List[SlideStatus]:
        return [slide.status for slide in self.slides]

    def finished_count(self) -> int:
        return sum(
            1 for s in self.slides if s.status in (SlideStatus.DONE, SlideStatus.ERROR)
        )

    def analyzed_slides(self) -> List[ProcessedSlide]:
        """Slides that made it to done with an analysis, in page order."""
        return [
            s for s in self.slides
            if s.status == SlideStatus.DONE and s.analysis is not None
        ]


# --- Layout and draw operations ---


class SlideSize(BaseModel):
    """Output slide size in inches."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(default=10.0, gt=0)
    height: float = Field(default=5.625, gt=0)

    @classmethod
    def for_aspect_ratio(cls, aspect_ratio: float, height: float = 7.5) -> "SlideSize":
        return cls(width=height * aspect_ratio, height=height)


class Rect(BaseModel):
    """Position and size, either in inches or in percent of the slide."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float
    height: float
    unit: Literal["inch", "percent"] = "inch"


FULL_BLEED = Rect(x=0, y=0, width=100, height=100, unit="percent")


class TextPlacement(BaseModel):
    """A laid-out text box produced by the LayoutResolver."""

    model_config = ConfigDict(frozen=True)

    role: Literal["title", "body", "left_column", "right_column", "section"]
    paragraphs: List[str]
    rect: Rect
    font_size: int
    bold: bool = False
    color: str = "000000"
    align: Literal["left", "center", "right"] = "left"
    vertical_align: Literal["top", "middle", "bottom"] = "top"
    bullets: bool = False


class SetBackground(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["background"] = "background"
    color: str


class AddText(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    placement: TextPlacement


class AddImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["image"] = "image"
    data: bytes = Field(..., repr=False)
    rect: Rect
    description: Optional[str] = None


class SetNotes(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["notes"] = "notes"
    text: str


DrawOperation = Annotated[
    Union[SetBackground, AddText, AddImage, SetNotes],
    Field(discriminator="kind"),
]


# --- Run result ---


class ConversionResult(BaseModel):
    """Outcome of one pipeline run."""

    state: BatchState
    mode: ConversionMode
    output_path: Optional[Path] = None
    slides_total: int = 0
    slides_written: int = 0
    statuses: List[SlideStatus] = Field(default_factory=list)
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state == BatchState.COMPLETED
