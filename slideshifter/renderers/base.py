"""
Base output sink interface.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

from slideshifter.models import DrawOperation


class BaseSink(ABC):
    """
    Receives one operation list per slide, in slide order, then writes the
    presentation in `finalize`.
    """

    @abstractmethod
    def add_slide(self, operations: Sequence[DrawOperation]) -> None:
        """Append a slide built from `operations`."""
        pass

    @abstractmethod
    def finalize(self, output_path: Path) -> Path:
        """
        Serialize and persist the presentation.

        Returns:
            Path of the written file
        """
        pass
