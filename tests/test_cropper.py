"""
Tests for figure cropping.
"""

import io
import time

import pytest
from PIL import Image

from slideshifter.errors import (
    DecodeError,
    DecodeTimeout,
    DegenerateCrop,
    ErrorKind,
    ErrorScope,
    InvalidBoundingBox,
)
from slideshifter.imaging import FigureCropper
from slideshifter.models import BoundingBox, PageImage

from conftest import make_page


def box(ymin, xmin, ymax, xmax) -> BoundingBox:
    return BoundingBox.model_validate([ymin, xmin, ymax, xmax])


def open_png(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    assert img.format == "PNG"
    return img


@pytest.mark.parametrize(
    "bbox",
    [
        (0, 0, 100, 100),
        (10, 20, 60, 70),
        (25, 25, 75, 75),
        (0, 50, 50, 100),
        (33.3, 12.5, 66.6, 87.5),
    ],
)
def test_crop_size_matches_percent_extent(page, bbox):
    """Crop size follows the box extent."""
    ymin, xmin, ymax, xmax = bbox
    data = FigureCropper().crop(page, box(*bbox))

    img = open_png(data)
    assert img.width == pytest.approx((xmax - xmin) / 100 * page.width, abs=1)
    assert img.height == pytest.approx((ymax - ymin) / 100 * page.height, abs=1)


def test_crop_takes_the_right_region(page):
    """Test which pixels end up in the crop."""
    # Top-left quadrant is red, top-right green
    red = open_png(FigureCropper().crop(page, box(0, 0, 50, 50))).convert("RGB")
    green = open_png(FigureCropper().crop(page, box(0, 50, 50, 100))).convert("RGB")

    assert red.getpixel((10, 10)) == (255, 0, 0)
    assert green.getpixel((10, 10)) == (0, 255, 0)


def test_crop_does_not_touch_source(page):
    """Test that the page raster is left alone."""
    before = page.data
    FigureCropper().crop(page, box(10, 10, 90, 90))
    assert page.data == before


@pytest.mark.parametrize(
    "bbox",
    [
        (10, 60, 50, 20),  # xmax < xmin
        (60, 10, 20, 50),  # ymax < ymin
        (10, 30, 50, 30),  # zero width
        (40, 10, 40, 50),  # zero height
    ],
)
def test_invalid_boxes_fail(page, bbox):
    """Inverted and zero-area boxes are rejected."""
    with pytest.raises(InvalidBoundingBox) as exc_info:
        FigureCropper().crop(page, box(*bbox))

    assert exc_info.value.kind == ErrorKind.INVALID_BOUNDING_BOX
    assert exc_info.value.scope == ErrorScope.FIGURE


@pytest.mark.parametrize(
    "bbox",
    [
        (0, 100, 50, 120),  # starts at the right edge
        (100, 0, 130, 50),  # starts at the bottom edge
        (10, 150, 50, 180),  # entirely to the right
        (-50, 10, -10, 50),  # entirely above
    ],
)
def test_boxes_outside_image_are_degenerate(page, bbox):
    """Boxes with nothing on the page are degenerate."""
    with pytest.raises(DegenerateCrop):
        FigureCropper().crop(page, box(*bbox))


def test_overhanging_box_is_clamped(page):
    """Test clamping at the right and bottom edges."""
    # Starts inside, runs past the right and bottom edges
    img = open_png(FigureCropper().crop(page, box(50, 50, 150, 150)))
    assert img.size == (page.width // 2, page.height // 2)


def test_negative_origin_is_clamped_to_zero(page):
    """Test clamping at the left and top edges."""
    # Origin clamps to 0 while the extent stays the box's own width
    rect = FigureCropper.pixel_rect(box(-10, -10, 40, 40), page.width, page.height)
    assert rect.x == 0
    assert rect.y == 0
    assert rect.width == pytest.approx(0.5 * page.width)
    assert rect.height == pytest.approx(0.5 * page.height)


def test_far_off_page_origin_is_clamped_to_the_page(page):
    """A huge negative origin clamps to the page instead of cancelling out."""
    img = open_png(FigureCropper().crop(page, box(0, -1e300, 50, 50)))
    assert img.size == (page.width, page.height // 2)


def test_sub_pixel_crop_is_degenerate():
    """Test a box smaller than one pixel."""
    tiny = make_page(width=10, height=10)
    with pytest.raises(DegenerateCrop):
        FigureCropper().crop(tiny, box(10, 10, 12, 12))


def test_decode_timeout(page, monkeypatch):
    """Test a page raster that decodes too slowly."""
    cropper = FigureCropper(decode_timeout=0.05)

    def slow_decode(data):
        time.sleep(0.5)
        return Image.open(io.BytesIO(data))

    monkeypatch.setattr(cropper, "_decode", slow_decode)

    with pytest.raises(DecodeTimeout) as exc_info:
        cropper.crop(page, box(0, 0, 50, 50))
    assert exc_info.value.kind == ErrorKind.DECODE_TIMEOUT


def test_corrupt_page_fails_to_decode():
    """Test undecodable page data."""
    broken = PageImage(page_index=0, data=b"not an image", width=10, height=10)
    with pytest.raises(DecodeError):
        FigureCropper().crop(broken, box(0, 0, 50, 50))
