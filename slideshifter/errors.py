"""
Tagged error kinds for SlideShifter.

Every failure the pipeline can produce carries a `kind` so callers can
branch on it instead of matching message strings, and a `scope` telling
how far it is allowed to travel:

- figure: caught by the SlideAssembler, the figure is skipped
- slide:  caught by the pipeline, the slide is marked as error
- batch:  ends the run
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    INVALID_BOUNDING_BOX = "invalid_bounding_box"
    DEGENERATE_CROP = "degenerate_crop"
    DECODE_TIMEOUT = "decode_timeout"
    DECODE_ERROR = "decode_error"
    ANALYSIS_ERROR = "analysis_error"
    NO_SLIDES_ANALYZED = "no_slides_analyzed"
    SINK_WRITE_ERROR = "sink_write_error"
    INPUT_READ_ERROR = "input_read_error"
    CANCELLED = "cancelled"
    INVALID_TRANSITION = "invalid_transition"


class ErrorScope(str, Enum):
    FIGURE = "figure"
    SLIDE = "slide"
    BATCH = "batch"


class SlideShifterError(Exception):
    """Base class for all SlideShifter errors."""

    kind: ErrorKind
    scope: ErrorScope

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


# --- Figure scope ---


class CropError(SlideShifterError):
    """A single figure could not be cropped."""

    scope = ErrorScope.FIGURE


class InvalidBoundingBox(CropError):
    kind = ErrorKind.INVALID_BOUNDING_BOX


class DegenerateCrop(CropError):
    kind = ErrorKind.DEGENERATE_CROP


class DecodeTimeout(CropError):
    kind = ErrorKind.DECODE_TIMEOUT


class DecodeError(CropError):
    kind = ErrorKind.DECODE_ERROR


# --- Slide scope ---


class AnalysisError(SlideShifterError):
    """The analyzer failed or returned something we cannot use."""

    kind = ErrorKind.ANALYSIS_ERROR
    scope = ErrorScope.SLIDE


# --- Batch scope ---


class BatchError(SlideShifterError):
    """Fatal for the whole conversion run."""

    scope = ErrorScope.BATCH
    user_message = "Conversion failed."


class NoSlidesAnalyzed(BatchError):
    kind = ErrorKind.NO_SLIDES_ANALYZED
    user_message = "No slides were successfully analyzed."


class SinkWriteError(BatchError):
    kind = ErrorKind.SINK_WRITE_ERROR
    user_message = "Failed to generate PowerPoint file."


class InputReadError(BatchError):
    kind = ErrorKind.INPUT_READ_ERROR
    user_message = "Failed to process PDF. Please try a simpler file."


class ConversionCancelled(BatchError):
    kind = ErrorKind.CANCELLED
    user_message = "Conversion cancelled."


class InvalidTransition(BatchError):
    """A slide status change that breaks pending -> analyzing -> done|error."""

    kind = ErrorKind.INVALID_TRANSITION
