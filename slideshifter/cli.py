"""
Command-line interface for SlideShifter.
"""

import sys
import argparse
from pathlib import Path

from dotenv import load_dotenv

from slideshifter import __version__
from slideshifter.config import ConversionSettings, normalize_mode
from slideshifter.pipeline import SlideShifterPipeline


def print_progress(current: int, total: int, message: str) -> None:
    print(f"[Progress] {current}/{total} {message}")


def main(argv=None) -> int:
    """Main CLI entry point."""
    load_dotenv()  # Load .env file if present

    parser = argparse.ArgumentParser(
        description="SlideShifter: Convert PDF slide decks into PowerPoint files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Editable slides with Gemini analysis
  slideshifter deck.pdf

  # Full-page images only (no analysis, no API key needed)
  slideshifter deck.pdf --mode image

  # Analyze with Claude instead of Gemini
  slideshifter deck.pdf --analyzer claude

  # Specify custom output directory
  slideshifter deck.pdf --output ./my_output

Environment Variables:
  GEMINI_API_KEY      API key for Gemini analysis
  ANTHROPIC_API_KEY   API key for Claude analysis
  SLIDESHIFTER_MODE   Default mode (ai or image)
  OUTPUT_DIR          Default output directory
        """,
    )

    parser.add_argument("input", nargs="?", type=Path, help="Input PDF file")

    parser.add_argument(
        "--version",
        action="version",
        version=f"SlideShifter {__version__}",
    )

    parser.add_argument(
        "--mode",
        choices=["ai", "image"],
        help="ai: rebuild editable slides, image: copy pages as images (default: ai)",
    )

    parser.add_argument(
        "--analyzer",
        choices=["gemini", "claude"],
        help="Vision analyzer for ai mode (default: gemini)",
    )

    parser.add_argument("--model", help="Override the analyzer model name")

    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Output directory (default: ./output)",
    )

    parser.add_argument(
        "--zoom",
        type=float,
        help="PDF render zoom factor (default: 2.5)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print tracebacks on failure",
    )

    args = parser.parse_args(argv)

    # Validate input
    if not args.input:
        parser.print_help()
        return 1

    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    try:
        settings = ConversionSettings.from_env(
            mode=normalize_mode(args.mode) if args.mode else None,
            analyzer=args.analyzer,
            model=args.model,
            output_dir=args.output,
            zoom=args.zoom,
        )
        pipeline = SlideShifterPipeline.from_settings(settings)
        result = pipeline.run(args.input, progress_callback=print_progress)

    except KeyboardInterrupt:
        print("\n\nInterrupted by user", file=sys.stderr)
        return 130

    except ValueError as e:
        print(f"\nError: {e}", file=sys.stderr)
        if args.debug:
            import traceback
            traceback.print_exc()
        return 1

    if not result.ok:
        print(f"\nError: {result.message}", file=sys.stderr)
        return 1

    print(f"✓ Wrote {result.slides_written}/{result.slides_total} slides to {result.output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
