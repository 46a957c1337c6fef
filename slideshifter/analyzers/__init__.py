"""
Vision analyzers turning a slide image into a SlideAnalysis.

Supports multiple backends:
- Gemini (primary, google-genai structured output)
- Claude (Anthropic)
"""

from slideshifter.analyzers.base import BaseAnalyzer, parse_analysis

__all__ = ["BaseAnalyzer", "parse_analysis", "create_analyzer"]


def create_analyzer(name: str, model=None) -> BaseAnalyzer:
    """Build an analyzer by name ("gemini" or "claude")."""
    if name == "gemini":
        from slideshifter.analyzers.gemini import GeminiAnalyzer

        return GeminiAnalyzer(model=model)
    if name == "claude":
        from slideshifter.analyzers.claude import ClaudeAnalyzer

        return ClaudeAnalyzer(model=model)
    raise ValueError(f"Unknown analyzer: {name}")
