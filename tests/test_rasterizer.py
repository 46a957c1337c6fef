"""
Tests for PDF rasterization.
"""

import fitz
import pytest

from slideshifter.errors import ErrorKind, InputReadError
from slideshifter.rasterizers import PyMuPDFRasterizer


def write_pdf(path, pages=2, width=400, height=300):
    doc = fitz.open()
    for i in range(pages):
        page = doc.new_page(width=width, height=height)
        page.insert_text((40, 60), f"Slide {i + 1}", fontsize=24)
    doc.save(str(path))
    doc.close()
    return path


def test_render_pages_in_order(tmp_path):
    """Test rendering a PDF."""
    pdf = write_pdf(tmp_path / "deck.pdf", pages=3)
    pages = PyMuPDFRasterizer(zoom=1.0).render(pdf)

    assert [p.page_index for p in pages] == [0, 1, 2]
    assert all(p.mime_type == "image/png" for p in pages)
    assert all(p.data.startswith(b"\x89PNG") for p in pages)
    assert (pages[0].width, pages[0].height) == (400, 300)


def test_zoom_scales_pixels(tmp_path):
    """Test the zoom factor."""
    pdf = write_pdf(tmp_path / "deck.pdf", pages=1)
    page = PyMuPDFRasterizer(zoom=2.0).render(pdf)[0]

    assert (page.width, page.height) == (800, 600)
    assert page.aspect_ratio == pytest.approx(4 / 3)


def test_default_dpi():
    """Test the default DPI."""
    assert PyMuPDFRasterizer().dpi == 180


def test_missing_file(tmp_path):
    """Test a nonexistent PDF."""
    with pytest.raises(InputReadError) as exc_info:
        PyMuPDFRasterizer().render(tmp_path / "missing.pdf")
    assert exc_info.value.kind == ErrorKind.INPUT_READ_ERROR


def test_corrupt_file(tmp_path):
    """Test a broken PDF."""
    bad = tmp_path / "bad.pdf"
    bad.write_bytes(b"%PDF-1.4 this is not really a pdf")

    with pytest.raises(InputReadError):
        PyMuPDFRasterizer().render(bad)


def test_zoom_must_be_positive():
    """Test zoom validation."""
    with pytest.raises(ValueError):
        PyMuPDFRasterizer(zoom=0)
