"""
PDF rasterizers producing one PageImage per page.

Supports PyMuPDF for dependency-free rendering (no Poppler needed).
"""

from slideshifter.rasterizers.base import BaseRasterizer
from slideshifter.rasterizers.pymupdf_rasterizer import PyMuPDFRasterizer

__all__ = ["BaseRasterizer", "PyMuPDFRasterizer"]
