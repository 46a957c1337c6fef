"""
Basic usage example for SlideShifter.

Converts a PDF deck twice: once as editable slides rebuilt by Gemini and
once as full-page images.
"""

from pathlib import Path

from dotenv import load_dotenv

from slideshifter import CancellationToken, SlideShifterPipeline
from slideshifter.models import ConversionMode


def on_progress(current: int, total: int, message: str) -> None:
    print(f"  {current}/{total}: {message}")


def main():
    load_dotenv()  # GEMINI_API_KEY

    pdf_path = Path("examples/sample_deck.pdf")
    output_dir = Path("output/sample_deck")

    # Editable slides (requires GEMINI_API_KEY)
    pipeline = SlideShifterPipeline(mode=ConversionMode.AI_EXTRACT, output_dir=output_dir)
    result = pipeline.run(
        pdf_path,
        progress_callback=on_progress,
        cancel_token=CancellationToken(),
    )

    if result.ok:
        print("\n✓ Conversion complete!")
        print(f"  PPTX: {result.output_path}")
        print(f"  Slides: {result.slides_written}/{result.slides_total}")
        failed = [i + 1 for i, s in enumerate(result.statuses) if s.value == "error"]
        if failed:
            print(f"  Skipped slides: {failed}")
    else:
        print(f"\n✗ {result.message} ({result.error_kind.value})")

    # Page images only, no API key needed
    image_result = SlideShifterPipeline(
        mode=ConversionMode.IMAGE_ONLY, output_dir=output_dir
    ).run(pdf_path)
    print(f"  Image copy: {image_result.output_path}")


if __name__ == "__main__":
    main()
