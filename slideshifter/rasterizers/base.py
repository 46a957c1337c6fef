"""
Base rasterizer interface.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from slideshifter.models import PageImage


class BaseRasterizer(ABC):
    """Abstract base class for all PDF rasterizers."""

    def __init__(self, config: Optional[dict] = None):
        self.config = config or {}
        self.name = self.__class__.__name__.replace("Rasterizer", "").lower()

    @abstractmethod
    def render(self, pdf_path: Path) -> List[PageImage]:
        """
        Render every page of a PDF.

        Args:
            pdf_path: Path to the input PDF file

        Returns:
            PageImages in page order

        Raises:
            InputReadError: the document could not be read or has no pages
        """
        pass
