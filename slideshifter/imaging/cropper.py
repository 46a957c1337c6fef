"""
Figure cropping from page rasters.

Converts the analyzer's percentage-space bounding boxes into clamped pixel
rectangles and cuts them out of the original page image.
"""

import io
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import NamedTuple, Tuple

from PIL import Image

from slideshifter.errors import DecodeError, DecodeTimeout, DegenerateCrop, InvalidBoundingBox
from slideshifter.models import BoundingBox, PageImage


class PixelRect(NamedTuple):
    """Crop rectangle in source pixels (floats, before rounding)."""

    x: float
    y: float
    width: float
    height: float

    def to_box(self) -> Tuple[int, int, int, int]:
        """(left, upper, right, lower) as Pillow expects."""
        left = int(round(self.x))
        top = int(round(self.y))
        return (
            left,
            top,
            int(round(self.x + self.width)),
            int(round(self.y + self.height)),
        )


class FigureCropper:
    """
    Crop figures out of a page raster.

    Provides:
    - Bounding box validation (zero-area and inverted boxes are rejected)
    - Percent -> pixel conversion against the decoded image's real size
    - Clamping so the crop never reads outside the source
    - A bounded wait on image decoding
    """

    def __init__(self, decode_timeout: float = 10.0):
        """
        Args:
            decode_timeout: Seconds to wait for the page raster to decode
        """
        self.decode_timeout = decode_timeout

    def crop(self, page: PageImage, box: BoundingBox) -> bytes:
        """
        Crop `box` out of `page`.

        Args:
            page: Source page raster
            box: Percentage-space bounding box

        Returns:
            PNG-encoded bytes of the cropped region

        Raises:
            InvalidBoundingBox: box has zero area or is inverted
            DegenerateCrop: nothing left after clamping to the image
            DecodeTimeout: the page raster did not decode in time
            DecodeError: the page raster could not be decoded
        """
        self.validate(box)

        img = self.decode(page)
        try:
            rect = self.pixel_rect(box, img.width, img.height)
            left, top, right, bottom = rect.to_box()
            if right <= left or bottom <= top:
                raise DegenerateCrop(
                    f"Crop rounds to an empty pixel area: {rect.width:.2f}x{rect.height:.2f}"
                )

            cropped = img.crop((left, top, right, bottom))
            if cropped.mode not in ("RGB", "RGBA", "L", "LA", "P"):
                cropped = cropped.convert("RGB")

            buffer = io.BytesIO()
            cropped.save(buffer, format="PNG")
            return buffer.getvalue()
        finally:
            img.close()

    @staticmethod
    def validate(box: BoundingBox) -> None:
        if not box.is_valid():
            raise InvalidBoundingBox(f"Invalid bounding box: {box.to_list()}")

    @staticmethod
    def pixel_rect(box: BoundingBox, width: int, height: int) -> PixelRect:
        """
        Convert a percentage box to a clamped pixel rectangle.

        The origin is clamped to the image, then the extent is cut so it
        never runs past the right or bottom edge.
        """
        crop_x = (box.x_min / 100) * width
        crop_y = (box.y_min / 100) * height
        crop_w = (box.width / 100) * width
        crop_h = (box.height / 100) * height

        # Far edges from the box itself; crop_x + crop_w cancels out for huge values
        if box.x_max <= 0 or box.y_max <= 0:
            raise DegenerateCrop(f"Bounding box lies outside the image: {box.to_list()}")

        safe_x = max(0.0, crop_x)
        safe_y = max(0.0, crop_y)
        safe_w = min(width - safe_x, crop_w)
        safe_h = min(height - safe_y, crop_h)

        if safe_w <= 0 or safe_h <= 0:
            raise DegenerateCrop(
                f"Invalid calculated crop dimensions: {safe_w:.2f}x{safe_h:.2f}"
            )

        return PixelRect(safe_x, safe_y, safe_w, safe_h)

    def decode(self, page: PageImage) -> Image.Image:
        """Decode the page raster, giving up after `decode_timeout` seconds."""
        executor = ThreadPoolExecutor(max_workers=1)
        future = executor.submit(self._decode, page.data)
        try:
            return future.result(timeout=self.decode_timeout)
        except FutureTimeout as e:
            raise DecodeTimeout(
                f"Image decode timed out after {self.decode_timeout}s "
                f"(page {page.page_index + 1})",
                cause=e,
            ) from e
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise DecodeError(
                f"Failed to decode page {page.page_index + 1}: {e}", cause=e
            ) from e
        finally:
            executor.shutdown(wait=False)

    @staticmethod
    def _decode(data: bytes) -> Image.Image:
        img = Image.open(io.BytesIO(data))
        img.load()
        return img
