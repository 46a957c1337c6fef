"""
PPTX renderer using python-pptx.

Replays draw operations onto editable PowerPoint slides.
"""

import io
from pathlib import Path
from typing import Optional, Sequence, Tuple

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.text import MSO_ANCHOR, PP_PARAGRAPH_ALIGNMENT
from pptx.oxml.ns import qn
from pptx.util import Inches, Pt

from slideshifter.models import (
    AddImage,
    AddText,
    DrawOperation,
    Rect,
    SetBackground,
    SetNotes,
    SlideSize,
    TextPlacement,
)
from slideshifter.renderers.base import BaseSink


ALIGNMENT = {
    "left": PP_PARAGRAPH_ALIGNMENT.LEFT,
    "center": PP_PARAGRAPH_ALIGNMENT.CENTER,
    "right": PP_PARAGRAPH_ALIGNMENT.RIGHT,
}

VERTICAL_ANCHOR = {
    "top": MSO_ANCHOR.TOP,
    "middle": MSO_ANCHOR.MIDDLE,
    "bottom": MSO_ANCHOR.BOTTOM,
}

BULLET_CHAR = "•"
# Hanging indent for bullet paragraphs, in EMU (0.25")
BULLET_INDENT = 228600


class PPTXRenderer(BaseSink):
    """
    Render draw operations into a PowerPoint presentation using python-pptx.

    Features:
    - Solid slide backgrounds
    - Editable text boxes with bullets, alignment and colors
    - Images placed in inches or in percent of the slide
    - Speaker notes
    """

    # Blank layout in the default template
    BLANK_LAYOUT = 6

    def __init__(
        self,
        slide_size: SlideSize = SlideSize(),
        title: str = "Converted Presentation",
        author: str = "SlideShifter App",
        comments: Optional[str] = None,
    ):
        """
        Initialize renderer.

        Args:
            slide_size: Slide dimensions in inches
            title: Presentation title metadata
            author: Presentation author metadata
            comments: Optional comments metadata
        """
        self.slide_size = slide_size
        self.prs = Presentation()
        self.prs.slide_width = Inches(slide_size.width)
        self.prs.slide_height = Inches(slide_size.height)

        props = self.prs.core_properties
        props.title = title
        props.author = author
        if comments:
            props.comments = comments

        print(f"[PPTX] Slide dimensions: {slide_size.width:.2f}\" x {slide_size.height:.2f}\"")

    @property
    def slide_count(self) -> int:
        return len(self.prs.slides)

    def add_slide(self, operations: Sequence[DrawOperation]) -> None:
        slide = self.prs.slides.add_slide(self.prs.slide_layouts[self.BLANK_LAYOUT])

        for op in operations:
            if isinstance(op, SetBackground):
                self._render_background(slide, op.color)
            elif isinstance(op, AddText):
                self._render_textbox(slide, op.placement)
            elif isinstance(op, AddImage):
                self._render_image(slide, op)
            elif isinstance(op, SetNotes):
                slide.notes_slide.notes_text_frame.text = op.text
            else:
                raise TypeError(f"Unknown draw operation: {op!r}")

        print(f"[PPTX] Rendered slide {self.slide_count} ({len(operations)} operations)")

    def finalize(self, output_path: Path) -> Path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.prs.save(str(output_path))

        print(f"[PPTX] Saved presentation to {output_path}")
        return output_path

    def _render_background(self, slide, color: str) -> None:
        fill = slide.background.fill
        fill.solid()
        fill.fore_color.rgb = RGBColor.from_string(color)

    def _render_textbox(self, slide, placement: TextPlacement) -> None:
        left, top, width, height = self._rect_to_inches(placement.rect)
        textbox = slide.shapes.add_textbox(
            Inches(left), Inches(top), Inches(width), Inches(height)
        )
        text_frame = textbox.text_frame
        text_frame.word_wrap = True
        text_frame.vertical_anchor = VERTICAL_ANCHOR[placement.vertical_align]
        text_frame.clear()  # Leaves a single empty paragraph

        color = RGBColor.from_string(placement.color)
        for i, text in enumerate(placement.paragraphs):
            p = text_frame.paragraphs[0] if i == 0 else text_frame.add_paragraph()
            p.alignment = ALIGNMENT[placement.align]
            if placement.bullets:
                self._set_bullet(p)

            run = p.add_run()
            run.text = text
            run.font.size = Pt(placement.font_size)
            run.font.bold = placement.bold
            run.font.color.rgb = color

    @staticmethod
    def _set_bullet(paragraph) -> None:
        """Give a paragraph a round bullet with a hanging indent."""
        pPr = paragraph._p.get_or_add_pPr()
        pPr.set("marL", str(BULLET_INDENT))
        pPr.set("indent", str(-BULLET_INDENT))
        bullet = pPr.makeelement(qn("a:buChar"), {"char": BULLET_CHAR})
        pPr.append(bullet)

    def _render_image(self, slide, op: AddImage) -> None:
        left, top, width, height = self._rect_to_inches(op.rect)
        slide.shapes.add_picture(
            io.BytesIO(op.data),
            Inches(left),
            Inches(top),
            width=Inches(width),
            height=Inches(height),
        )

    def _rect_to_inches(self, rect: Rect) -> Tuple[float, float, float, float]:
        """
        Convert a Rect to (left, top, width, height) in inches.

        Percent rects are relative to the slide size.
        """
        if rect.unit == "inch":
            return rect.x, rect.y, rect.width, rect.height

        return (
            rect.x / 100 * self.slide_size.width,
            rect.y / 100 * self.slide_size.height,
            rect.width / 100 * self.slide_size.width,
            rect.height / 100 * self.slide_size.height,
        )
