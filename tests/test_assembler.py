"""
Tests for per-slide assembly.
"""

import pytest

from slideshifter.assembler import SlideAssembler, normalize_hex_color
from slideshifter.errors import DecodeTimeout
from slideshifter.imaging import FigureCropper
from slideshifter.models import (
    FULL_BLEED,
    AddImage,
    AddText,
    BoundingBox,
    SetBackground,
    SetNotes,
)

from conftest import make_analysis


def kinds(operations):
    return [op.kind for op in operations]


def test_image_copy_mode_is_one_full_bleed_image(page):
    """Without an analysis the page is copied as one image."""
    operations = SlideAssembler().assemble(page, None)

    assert len(operations) == 1
    image = operations[0]
    assert isinstance(image, AddImage)
    assert image.rect == FULL_BLEED
    assert image.data == page.data


def test_ai_slide_operation_order(page):
    """Background, text, figures, then notes."""
    analysis = make_analysis(
        backgroundColor="#1E1E1E",
        textColor="#fafafa",
        notes="Say hello",
        figures=[{"boundingBox": [50, 0, 100, 50], "description": "photo"}],
    )
    operations = SlideAssembler().assemble(page, analysis)

    assert kinds(operations) == ["background", "text", "text", "image", "notes"]
    assert operations[0].color == "1E1E1E"
    assert operations[1].placement.role == "title"
    assert operations[1].placement.color == "FAFAFA"
    assert operations[2].placement.paragraphs == ["First point", "Second point"]
    assert operations[4].text == "Say hello"


def test_default_colors(page):
    """Test white background and black text defaults."""
    operations = SlideAssembler().assemble(page, make_analysis())

    assert operations[0] == SetBackground(color="FFFFFF")
    assert all(
        op.placement.color == "000000" for op in operations if isinstance(op, AddText)
    )


def test_no_title_no_content_only_background(page):
    """Test an empty analysis."""
    operations = SlideAssembler().assemble(page, make_analysis(title="", content=[]))
    assert kinds(operations) == ["background"]


def test_figure_is_placed_at_its_percent_box(page):
    """Test figure placement."""
    analysis = make_analysis(
        figures=[{"boundingBox": [10, 20, 60, 90], "description": "chart"}]
    )
    image = [op for op in SlideAssembler().assemble(page, analysis) if isinstance(op, AddImage)][0]

    assert image.rect.unit == "percent"
    assert (image.rect.x, image.rect.y) == (20, 10)
    assert image.rect.width == pytest.approx(70)
    assert image.rect.height == pytest.approx(50)
    assert image.description == "chart"


def test_figure_rect_is_clamped_to_the_slide():
    """Boxes running off the page are placed on the visible part only."""
    overhang = SlideAssembler.figure_rect(BoundingBox.model_validate([50, 50, 150, 150]))
    assert (overhang.x, overhang.y, overhang.width, overhang.height) == (50, 50, 50, 50)

    huge = SlideAssembler.figure_rect(BoundingBox.model_validate([0, -1e300, 50, 50]))
    assert (huge.x, huge.y) == (0, 0)
    assert huge.width == 100
    assert huge.height == 50


def test_bad_figure_is_skipped_others_kept(page, capsys):
    """An inverted box is skipped; figures before and after it are kept."""
    analysis = make_analysis(
        figures=[
            {"boundingBox": [0, 0, 50, 50], "description": "one"},
            {"boundingBox": [0, 80, 50, 20], "description": "two (inverted)"},
            {"boundingBox": [50, 50, 100, 100], "description": "three"},
        ]
    )
    operations = SlideAssembler().assemble(page, analysis)

    images = [op for op in operations if isinstance(op, AddImage)]
    assert [img.description for img in images] == ["one", "three"]
    assert "Skipping invalid figure bounding box" in capsys.readouterr().out


def test_crop_failure_does_not_abort_slide(page):
    """Crop errors skip only their own figure."""
    class FlakyCropper(FigureCropper):
        def __init__(self):
            super().__init__()
            self.calls = 0

        def crop(self, page, box):
            self.calls += 1
            if self.calls == 1:
                raise DecodeTimeout("slow decode")
            return super().crop(page, box)

    analysis = make_analysis(
        notes="n",
        figures=[
            {"boundingBox": [0, 0, 50, 50], "description": "times out"},
            {"boundingBox": [0, 50, 50, 100], "description": "fine"},
            {"boundingBox": [0, 150, 50, 190], "description": "off the page"},
        ],
    )
    operations = SlideAssembler(cropper=FlakyCropper()).assemble(page, analysis)

    images = [op for op in operations if isinstance(op, AddImage)]
    assert [img.description for img in images] == ["fine"]
    assert isinstance(operations[0], SetBackground)
    assert isinstance(operations[-1], SetNotes)


def test_unexpected_cropper_error_skips_only_that_figure(page, capsys):
    """Errors outside the crop error family are contained per figure too."""

    class BrokenCropper(FigureCropper):
        def crop(self, page, box):
            if box.x_min == 0:
                raise RuntimeError("raster backend crashed")
            return super().crop(page, box)

    analysis = make_analysis(
        figures=[
            {"boundingBox": [0, 0, 50, 50], "description": "crashes"},
            {"boundingBox": [0, 50, 50, 100], "description": "fine"},
        ],
    )
    operations = SlideAssembler(cropper=BrokenCropper()).assemble(page, analysis)

    images = [op for op in operations if isinstance(op, AddImage)]
    assert [img.description for img in images] == ["fine"]
    assert "RuntimeError: raster backend crashed" in capsys.readouterr().out


def test_assembly_is_idempotent(page):
    """Same input, same operations."""
    analysis = make_analysis(
        layoutType="TWO_COLUMN",
        content=["a", "b", "c"],
        notes="notes",
        figures=[{"boundingBox": [10, 10, 40, 40], "description": "fig"}],
    )
    assembler = SlideAssembler()

    first = assembler.assemble(page, analysis)
    second = assembler.assemble(page, analysis)

    assert first == second


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, "ABCDEF"),
        ("", "ABCDEF"),
        ("#ff0000", "FF0000"),
        ("00ff00", "00FF00"),
        ("#abc", "AABBCC"),
        ("  #123456 ", "123456"),
        ("red", "ABCDEF"),
        ("#12345", "ABCDEF"),
    ],
)
def test_normalize_hex_color(value, expected):
    """Test hex color normalization."""
    assert normalize_hex_color(value, "ABCDEF") == expected
