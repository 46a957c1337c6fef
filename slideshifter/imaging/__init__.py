"""
Image utilities for figure extraction.

Uses Pillow for:
- Decoding page rasters (with a bounded wait)
- Cropping percentage-space bounding boxes to pixel rectangles
- Re-encoding crops as PNG
"""

from slideshifter.imaging.cropper import FigureCropper, PixelRect

__all__ = ["FigureCropper", "PixelRect"]
