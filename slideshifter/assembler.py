"""
Per-slide assembly of draw operations.

Turns a page raster plus an (optional) SlideAnalysis into the ordered list
of operations the output sink replays onto one slide.
"""

import re
from typing import List, Optional

from slideshifter.errors import CropError
from slideshifter.imaging import FigureCropper
from slideshifter.layout import LayoutResolver
from slideshifter.models import (
    FULL_BLEED,
    AddImage,
    AddText,
    BoundingBox,
    DrawOperation,
    PageImage,
    Rect,
    SetBackground,
    SetNotes,
    SlideAnalysis,
    SlideFigure,
)


HEX_COLOR = re.compile(r"^[0-9A-Fa-f]{6}$")
SHORT_HEX_COLOR = re.compile(r"^[0-9A-Fa-f]{3}$")

DEFAULT_BACKGROUND = "FFFFFF"
DEFAULT_TEXT_COLOR = "000000"


def normalize_hex_color(value: Optional[str], default: str) -> str:
    """
    Normalize a hex color to ``RRGGBB`` (no '#', upper case).

    Expands ``#abc`` shorthand. Missing or malformed values give `default`.
    """
    if not value:
        return default

    color = value.strip().lstrip("#")
    if SHORT_HEX_COLOR.match(color):
        color = "".join(c * 2 for c in color)
    if not HEX_COLOR.match(color):
        print(f"[Assemble] Warning: Ignoring malformed color {value!r}, using #{default}")
        return default
    return color.upper()


class SlideAssembler:
    """
    Build the draw operations for a single slide.

    Stateless per call. Figure failures are logged and skipped; nothing a
    single figure does can stop the rest of the slide from being emitted.
    """

    def __init__(
        self,
        layout: Optional[LayoutResolver] = None,
        cropper: Optional[FigureCropper] = None,
    ):
        self.layout = layout or LayoutResolver()
        self.cropper = cropper or FigureCropper()

    def assemble(
        self, page: PageImage, analysis: Optional[SlideAnalysis] = None
    ) -> List[DrawOperation]:
        """
        Assemble one slide.

        Args:
            page: Original page raster
            analysis: AI analysis, or None for image-copy mode

        Returns:
            Ordered draw operations for the sink
        """
        if analysis is None:
            return [AddImage(data=page.data, rect=FULL_BLEED)]

        background = normalize_hex_color(analysis.background_color, DEFAULT_BACKGROUND)
        text_color = normalize_hex_color(analysis.text_color, DEFAULT_TEXT_COLOR)

        operations: List[DrawOperation] = [SetBackground(color=background)]

        for placement in self.layout.resolve(
            analysis.layout_type, analysis.title, analysis.content, color=text_color
        ):
            operations.append(AddText(placement=placement))

        for number, figure in enumerate(analysis.figures, start=1):
            image = self._figure(page, figure, number)
            if image is not None:
                operations.append(image)

        if analysis.notes:
            operations.append(SetNotes(text=analysis.notes))

        return operations

    def _figure(
        self, page: PageImage, figure: SlideFigure, number: int
    ) -> Optional[AddImage]:
        """Crop one figure; None when it has to be skipped."""
        box = figure.bounding_box
        label = f"slide {page.page_index + 1}, figure {number}"

        if not box.is_valid():
            print(f"[Assemble] Warning: Skipping invalid figure bounding box ({label}): {box.to_list()}")
            return None

        try:
            data = self.cropper.crop(page, box)
            return AddImage(
                data=data,
                rect=self.figure_rect(box),
                description=figure.description or None,
            )
        except CropError as e:
            print(f"[Assemble] Warning: Failed to add figure ({label}): {e}")
        except Exception as e:
            # Any other failure still only costs this figure
            print(
                f"[Assemble] Warning: Failed to add figure ({label}): "
                f"{type(e).__name__}: {e}"
            )
        return None

    @staticmethod
    def figure_rect(box: BoundingBox) -> Rect:
        """
        Place the crop where it was found, in percent of the slide.

        Clamped the same way the cropper clamps pixels, so the rect always
        lies on the slide and matches the cropped region's size.
        """
        x = max(0.0, box.x_min)
        y = max(0.0, box.y_min)
        return Rect(
            x=x,
            y=y,
            width=min(100.0 - x, box.width),
            height=min(100.0 - y, box.height),
            unit="percent",
        )
