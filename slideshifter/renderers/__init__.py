"""
Output sinks for reconstructed slides.

Supports python-pptx for deterministic generation.
"""

from slideshifter.renderers.base import BaseSink
from slideshifter.renderers.pptx_renderer import PPTXRenderer

__all__ = ["BaseSink", "PPTXRenderer"]
