"""
PDF rasterization with PyMuPDF (fitz).
"""

from pathlib import Path
from typing import List

import fitz  # PyMuPDF

from slideshifter.errors import InputReadError
from slideshifter.models import PageImage
from slideshifter.rasterizers.base import BaseRasterizer


class PyMuPDFRasterizer(BaseRasterizer):
    """
    Render PDF pages to PNG with PyMuPDF.

    A zoom of 2.5 (180 DPI) gives high-density output while keeping
    memory use reasonable for long decks.
    """

    def __init__(self, zoom: float = 2.5):
        super().__init__()
        if zoom <= 0:
            raise ValueError(f"zoom must be positive, got {zoom}")
        self.zoom = zoom

    @property
    def dpi(self) -> int:
        # 72 is PDF base DPI
        return int(round(self.zoom * 72))

    def render(self, pdf_path: Path) -> List[PageImage]:
        pdf_path = Path(pdf_path)
        if not pdf_path.exists():
            raise InputReadError(f"PDF not found: {pdf_path}")

        print(f"[PDF] Rendering {pdf_path.name} at {self.dpi} DPI")

        try:
            with fitz.open(str(pdf_path)) as doc:
                matrix = fitz.Matrix(self.zoom, self.zoom)
                pages = []
                for i, page in enumerate(doc):
                    pix = page.get_pixmap(matrix=matrix, alpha=False)
                    pages.append(
                        PageImage(
                            page_index=i,
                            data=pix.tobytes("png"),
                            mime_type="image/png",
                            width=pix.width,
                            height=pix.height,
                        )
                    )
        except (RuntimeError, ValueError, OSError) as e:
            # fitz raises FileDataError (a RuntimeError) for broken documents
            raise InputReadError(f"Could not read PDF {pdf_path.name}: {e}", cause=e) from e

        if not pages:
            raise InputReadError(f"PDF has no pages: {pdf_path.name}")

        print(f"[PDF] Rendered {len(pages)} pages")
        return pages
