#!/usr/bin/env python3
"""
Render a saved resume document to print-ready pages.

Reads an exported document (JSON), paginates it at native A4 size and writes
a multi-page PDF or one PNG per page.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Literal

from config import PAGE_WIDTH
from document_model import Document, DocumentFormatError
from page_renderer import FontFamily, PageRenderer
from pagination import paginate_document
from persistence import import_from_file
from scaling import compute_scale

logger = logging.getLogger(__name__)

OutputFormat = Literal["pdf", "png"]


def render_resume(
    document: Document,
    output_path: Path,
    font_family: FontFamily,
    output_format: OutputFormat = "pdf",
    available_width: float | None = None,
) -> dict:
    """
    Paginate a document and write it out.

    Args:
        document: Document to render
        output_path: PDF file, or directory for PNG pages
        font_family: Fonts used for both measuring and drawing
        output_format: 'pdf' for one file, 'png' for one image per page
        available_width: Viewing width used to report the preview scale

    Returns:
        Dict with rendering statistics
    """
    renderer = PageRenderer(font_family)
    result = paginate_document(document, renderer)

    if output_format == "png":
        written = renderer.save_png(result.pages, output_path)
    else:
        written = [renderer.save_pdf(result.pages, output_path)]

    width = PAGE_WIDTH if available_width is None else available_width
    return {
        "pages": result.total_pages,
        "label": result.label,
        "overflowing": [page.number for page in result.pages if page.overflow],
        "scale": compute_scale(PAGE_WIDTH, width),
        "files": written,
    }


def main():
    parser = argparse.ArgumentParser(
        description="Render a resume document to print-ready pages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s resume-data.json resume.pdf
  %(prog)s resume-data.json pages/ --format png --font fonts/Inter.ttf
  %(prog)s resume-data.json resume.pdf --font fonts/Inter.ttf \\
      --font-bold "fonts/Inter Bold.ttf" --available-width 600
""",
    )

    parser.add_argument("input", type=Path, help="Exported resume document (JSON)")
    parser.add_argument("output", type=Path, help="Output PDF file or PNG directory")

    parser.add_argument(
        "--format",
        "-f",
        choices=["pdf", "png"],
        default="pdf",
        help="Output format: pdf (single file, default) or png (one image per page)",
    )

    # Font options
    parser.add_argument(
        "--font",
        type=Path,
        help="Regular font file (TTF/OTF); defaults to the built-in font",
    )
    parser.add_argument(
        "--font-bold",
        type=Path,
        help="Bold font variant (optional, falls back to regular)",
    )
    parser.add_argument(
        "--font-italic",
        type=Path,
        help="Italic font variant (optional, falls back to regular)",
    )
    parser.add_argument(
        "--font-bold-italic",
        type=Path,
        help="Bold-Italic font variant (optional)",
    )

    parser.add_argument(
        "--available-width",
        type=float,
        help="Viewing width in pixels used to report the preview scale",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log pagination decisions",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.input.is_file():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    if args.font and not args.font.exists():
        print(f"Error: Font file not found: {args.font}", file=sys.stderr)
        sys.exit(1)

    font_family = FontFamily(
        regular=args.font,
        bold=args.font_bold if args.font_bold and args.font_bold.exists() else None,
        italic=args.font_italic if args.font_italic and args.font_italic.exists() else None,
        bold_italic=args.font_bold_italic if args.font_bold_italic and args.font_bold_italic.exists() else None,
    )

    try:
        document = import_from_file(args.input)
    except DocumentFormatError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Rendering: {args.input.name}")
    stats = render_resume(
        document,
        args.output,
        font_family=font_family,
        output_format=args.format,
        available_width=args.available_width,
    )

    print(f"  -> {args.output}")
    print(f"     {stats['label']}, preview scale {stats['scale']:.2f}")
    if stats["overflowing"]:
        pages = ", ".join(str(n) for n in stats["overflowing"])
        print(f"     Warning: content overflows page(s) {pages}", file=sys.stderr)


if __name__ == "__main__":
    main()
