"""
Main orchestration pipeline for SlideShifter.

Coordinates rasterization, per-slide analysis, slide assembly and PPTX
generation, and owns the status of every slide in the batch.
"""

import threading
import time
from pathlib import Path
from typing import Callable, List, Optional

from slideshifter.analyzers import BaseAnalyzer, create_analyzer
from slideshifter.assembler import SlideAssembler
from slideshifter.config import ConversionSettings
from slideshifter.errors import (
    AnalysisError,
    BatchError,
    ConversionCancelled,
    InputReadError,
    NoSlidesAnalyzed,
    SinkWriteError,
)
from slideshifter.imaging import FigureCropper
from slideshifter.layout import LayoutResolver
from slideshifter.models import (
    Batch,
    BatchState,
    ConversionMode,
    ConversionResult,
    DrawOperation,
    PageImage,
    SlideSize,
)
from slideshifter.rasterizers import BaseRasterizer, PyMuPDFRasterizer
from slideshifter.renderers import BaseSink, PPTXRenderer


ProgressCallback = Callable[[int, int, str], None]
SinkFactory = Callable[[SlideSize, ConversionMode], BaseSink]


class CancellationToken:
    """Flag checked between slides; set it from any thread to stop a run."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise ConversionCancelled("Conversion cancelled by caller")


def default_filename(mode: ConversionMode) -> str:
    stamp = int(time.time() * 1000)
    if mode == ConversionMode.IMAGE_ONLY:
        return f"Converted_Presentation_Img_{stamp}.pptx"
    return f"Converted_Presentation_{stamp}.pptx"


class SlideShifterPipeline:
    """
    End-to-end pipeline for converting PDF slide decks to PPTX.

    Pipeline stages:
    1. Rasterize: PDF pages -> PageImages (PyMuPDF)
    2. Analyze (AI_EXTRACT only): one analyzer call per slide, in page order
    3. Assemble: per-slide draw operations (text layout, figure crops)
    4. Render: replay operations into the output sink and write the file

    State moves IDLE -> PAGES_READY -> [ANALYZING ->] FINALIZING and ends in
    COMPLETED or FAILED. A failed analysis only marks that slide as error;
    batch errors (no readable input, nothing analyzed, write failure,
    cancellation) end the run.
    """

    def __init__(
        self,
        mode: ConversionMode = ConversionMode.AI_EXTRACT,
        analyzer: Optional[BaseAnalyzer] = None,
        rasterizer: Optional[BaseRasterizer] = None,
        sink_factory: Optional[SinkFactory] = None,
        cropper: Optional[FigureCropper] = None,
        slide_height_inches: float = 7.5,
        output_dir: Path = Path("output"),
    ):
        """
        Initialize pipeline.

        Args:
            mode: AI_EXTRACT (editable reconstruction) or IMAGE_ONLY (full-page images)
            analyzer: Vision analyzer; defaults to Gemini in AI_EXTRACT mode
            rasterizer: PDF rasterizer; defaults to PyMuPDF
            sink_factory: Builds the output sink once the slide size is known
            cropper: Figure cropper shared by every slide
            slide_height_inches: Output slide height; width follows the page aspect ratio
            output_dir: Directory for output files when no path is given
        """
        self.mode = ConversionMode(mode)
        if self.mode == ConversionMode.AI_EXTRACT and analyzer is None:
            analyzer = create_analyzer("gemini")
        self.analyzer = analyzer
        self.rasterizer = rasterizer or PyMuPDFRasterizer()
        self.sink_factory = sink_factory or self._default_sink
        self.cropper = cropper or FigureCropper()
        self.slide_height_inches = slide_height_inches
        self.output_dir = Path(output_dir)

        self.state = BatchState.IDLE
        self.batch: Optional[Batch] = None

    @classmethod
    def from_settings(cls, settings: ConversionSettings) -> "SlideShifterPipeline":
        analyzer = None
        if settings.mode == ConversionMode.AI_EXTRACT:
            analyzer = create_analyzer(settings.analyzer, model=settings.model)
        return cls(
            mode=settings.mode,
            analyzer=analyzer,
            rasterizer=PyMuPDFRasterizer(zoom=settings.zoom),
            cropper=FigureCropper(decode_timeout=settings.decode_timeout),
            slide_height_inches=settings.slide_height_inches,
            output_dir=settings.output_dir,
        )

    def run(
        self,
        pdf_path: Path,
        output_path: Optional[Path] = None,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ConversionResult:
        """
        Convert a PDF file.

        Batch errors do not raise here; they come back as a FAILED result
        carrying the error kind and a user-facing message.

        Args:
            pdf_path: Path to input PDF file
            output_path: PPTX path (default: <output_dir>/Converted_Presentation_<ms>.pptx)
            progress_callback: Called with (current, total, message) after each slide
            cancel_token: Checked before each slide

        Returns:
            ConversionResult
        """
        self.state = BatchState.IDLE
        self.batch = None
        pdf_path = Path(pdf_path)
        if output_path is None:
            output_path = self.output_dir / default_filename(self.mode)

        print(f"\n{'='*60}")
        print(f"SlideShifter Pipeline")
        print(f"{'='*60}")
        print(f"Input: {pdf_path}")
        print(f"Output: {output_path}")
        print(f"Mode: {self.mode.value}")
        print(f"{'='*60}\n")

        try:
            pages = self.rasterizer.render(pdf_path)
            written = self.convert_pages(
                pages,
                output_path,
                progress_callback=progress_callback,
                cancel_token=cancel_token,
            )
        except BatchError as e:
            self.state = BatchState.FAILED
            print(f"\n[Pipeline] ✗ Conversion FAILED ({e.kind.value}): {e.message}")
            return self._result(error=e)

        print(f"\n{'='*60}")
        print(f"✓ Pipeline Complete")
        print(f"{'='*60}")
        print(f"PPTX: {written}")
        print(f"{'='*60}\n")

        return self._result(output_path=written)

    def convert_pages(
        self,
        pages: List[PageImage],
        output_path: Path,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Path:
        """
        Convert already rasterized pages.

        Raises:
            InputReadError: no pages
            NoSlidesAnalyzed: AI_EXTRACT run where every analysis failed
            SinkWriteError: the output could not be written
            ConversionCancelled: the cancel token was set
        """
        self.batch = None
        try:
            if not pages:
                raise InputReadError("No pages to convert")

            self.batch = Batch.from_pages(pages)
            self.state = BatchState.PAGES_READY
            print(f"[Pipeline] {len(self.batch)} pages ready")

            if self.mode == ConversionMode.IMAGE_ONLY:
                self.batch.mark_all_done()
                total = len(self.batch)
                if progress_callback:
                    progress_callback(total, total, "Pages ready")
            else:
                self.state = BatchState.ANALYZING
                self.analyze_batch(self.batch, progress_callback, cancel_token)

            if cancel_token:
                cancel_token.raise_if_cancelled()

            self.state = BatchState.FINALIZING
            written = self.finalize(self.batch, output_path)
        except BatchError:
            self.state = BatchState.FAILED
            raise

        self.state = BatchState.COMPLETED
        return written

    def analyze_batch(
        self,
        batch: Batch,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> None:
        """
        Analyze every slide sequentially, in page order.

        Each slide goes pending -> analyzing -> done|error. An AnalysisError
        only affects its own slide.
        """
        total = len(batch)
        print(f"[Pipeline] Analyzing {total} slides with {self.analyzer.name}")

        for i in range(total):
            if cancel_token:
                cancel_token.raise_if_cancelled()

            print(f"  → Processing slide {i + 1}/{total}")
            batch.mark_analyzing(i)
            try:
                analysis = self.analyzer.analyze(batch[i].page)
            except AnalysisError as e:
                print(f"[Pipeline] Warning: Error analyzing slide {i + 1}: {e}")
                batch.mark_error(i, str(e))
            else:
                batch.mark_done(i, analysis)

            if progress_callback:
                finished = batch.finished_count()
                progress_callback(finished, total, f"Analyzed slide {finished}/{total}")

    def finalize(self, batch: Batch, output_path: Path) -> Path:
        """
        Assemble the retained slides and write them through the sink.

        In AI_EXTRACT mode only done slides with an analysis are kept. Every
        slide is assembled before the sink is touched, so a batch that fails
        here leaves no partial output behind.
        """
        if self.mode == ConversionMode.AI_EXTRACT:
            slides = batch.analyzed_slides()
            if not slides:
                raise NoSlidesAnalyzed("No slides were successfully analyzed.")
        else:
            slides = list(batch)

        print(f"[Pipeline] Assembling {len(slides)}/{len(batch)} slides")

        slide_size = SlideSize.for_aspect_ratio(
            slides[0].page.aspect_ratio, height=self.slide_height_inches
        )
        assembler = SlideAssembler(layout=LayoutResolver(slide_size), cropper=self.cropper)
        operations: List[List[DrawOperation]] = [
            assembler.assemble(slide.page, slide.analysis) for slide in slides
        ]

        try:
            sink = self.sink_factory(slide_size, self.mode)
            for slide_ops in operations:
                sink.add_slide(slide_ops)
            return sink.finalize(Path(output_path))
        except Exception as e:
            raise SinkWriteError(f"Failed to write presentation: {e}", cause=e) from e

    def _default_sink(self, slide_size: SlideSize, mode: ConversionMode) -> BaseSink:
        if mode == ConversionMode.IMAGE_ONLY:
            return PPTXRenderer(slide_size, title="Converted Presentation (Image Mode)")
        return PPTXRenderer(
            slide_size,
            title="Converted Presentation",
            comments=f"Made with {self.analyzer.name.title()}",
        )

    def _result(
        self, output_path: Optional[Path] = None, error: Optional[BatchError] = None
    ) -> ConversionResult:
        batch = self.batch
        written = 0
        if error is None and batch is not None:
            written = (
                len(batch.analyzed_slides())
                if self.mode == ConversionMode.AI_EXTRACT
                else len(batch)
            )
        return ConversionResult(
            state=self.state,
            mode=self.mode,
            output_path=output_path,
            slides_total=len(batch) if batch is not None else 0,
            slides_written=written,
            statuses=batch.statuses() if batch is not None else [],
            error_kind=error.kind if error is not None else None,
            message=error.user_message if error is not None else None,
        )
