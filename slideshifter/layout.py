"""
Text layout for reconstructed slides.

Maps a slide's layout type, title and content blocks onto concrete text box
placements. Pure and deterministic: no I/O, no failure modes.
"""

import math
from typing import List, Sequence, Union

from slideshifter.models import LayoutType, Rect, SlideSize, TextPlacement


class LayoutResolver:
    """
    Compute text box placements for a slide.

    Layouts:
    - TITLE_ONLY / TITLE_AND_CONTENT / BLANK: one bulleted body box
    - TWO_COLUMN: content split at ceil(n/2) into left and right columns
    - SECTION_HEADER: content joined into one centered block mid-slide

    The title, when present, always sits in the top band.
    """

    # Margins and bands in inches
    MARGIN = 0.5
    TITLE_TOP = 0.5
    TITLE_HEIGHT = 1.0
    BODY_TOP = 1.8
    BOTTOM_MARGIN = 0.4
    COLUMN_GUTTER = 0.3

    # Font sizes in points
    TITLE_FONT_SIZE = 32
    BODY_FONT_SIZE = 18
    SECTION_FONT_SIZE = 24

    def __init__(self, slide_size: SlideSize = SlideSize()):
        self.slide_size = slide_size

    def resolve(
        self,
        layout_type: Union[LayoutType, str],
        title: str,
        content: Sequence[str],
        color: str = "000000",
    ) -> List[TextPlacement]:
        """
        Lay out title and content.

        Args:
            layout_type: Classified layout. Unknown values use the default path.
            title: Slide title; empty means no title box
            content: Ordered text blocks
            color: Hex text color without '#'

        Returns:
            Placements in drawing order (title first)
        """
        placements: List[TextPlacement] = []
        content = list(content)

        if title:
            placements.append(self._title(title, color))

        layout = self._coerce(layout_type)
        if layout == LayoutType.TWO_COLUMN:
            placements.extend(self._two_column(content, color))
        elif layout == LayoutType.SECTION_HEADER:
            placements.extend(self._section(content, color))
        else:
            placements.extend(self._body(content, color))

        return placements

    @staticmethod
    def _coerce(layout_type: Union[LayoutType, str]) -> LayoutType:
        try:
            return LayoutType(layout_type)
        except ValueError:
            return LayoutType.TITLE_AND_CONTENT

    @staticmethod
    def split_columns(content: Sequence[str]):
        """Split content for TWO_COLUMN: the left column takes the extra block."""
        mid = math.ceil(len(content) / 2)
        return list(content[:mid]), list(content[mid:])

    @property
    def _content_width(self) -> float:
        return self.slide_size.width - 2 * self.MARGIN

    @property
    def _body_height(self) -> float:
        return max(self.slide_size.height - self.BODY_TOP - self.BOTTOM_MARGIN, 0.5)

    def _title(self, title: str, color: str) -> TextPlacement:
        return TextPlacement(
            role="title",
            paragraphs=[title],
            rect=Rect(
                x=self.MARGIN,
                y=self.TITLE_TOP,
                width=self._content_width,
                height=self.TITLE_HEIGHT,
            ),
            font_size=self.TITLE_FONT_SIZE,
            bold=True,
            color=color,
            align="center",
            vertical_align="middle",
        )

    def _body(self, content: List[str], color: str) -> List[TextPlacement]:
        if not content:
            return []
        return [
            TextPlacement(
                role="body",
                paragraphs=content,
                rect=Rect(
                    x=self.MARGIN,
                    y=self.BODY_TOP,
                    width=self._content_width,
                    height=self._body_height,
                ),
                font_size=self.BODY_FONT_SIZE,
                color=color,
                align="left",
                vertical_align="top",
                bullets=True,
            )
        ]

    def _two_column(self, content: List[str], color: str) -> List[TextPlacement]:
        left, right = self.split_columns(content)
        column_width = (self._content_width - self.COLUMN_GUTTER) / 2

        placements = []
        for role, blocks, x in (
            ("left_column", left, self.MARGIN),
            ("right_column", right, self.MARGIN + column_width + self.COLUMN_GUTTER),
        ):
            if not blocks:
                continue
            placements.append(
                TextPlacement(
                    role=role,
                    paragraphs=blocks,
                    rect=Rect(
                        x=x,
                        y=self.BODY_TOP,
                        width=column_width,
                        height=self._body_height,
                    ),
                    font_size=self.BODY_FONT_SIZE,
                    color=color,
                    align="left",
                    vertical_align="top",
                    bullets=True,
                )
            )
        return placements

    def _section(self, content: List[str], color: str) -> List[TextPlacement]:
        if not content:
            return []
        width = self.slide_size.width * 0.8
        height = self.slide_size.height * 0.35
        return [
            TextPlacement(
                role="section",
                paragraphs=["\n".join(content)],
                rect=Rect(
                    x=(self.slide_size.width - width) / 2,
                    y=(self.slide_size.height - height) / 2,
                    width=width,
                    height=height,
                ),
                font_size=self.SECTION_FONT_SIZE,
                color=color,
                align="center",
                vertical_align="middle",
            )
        ]
