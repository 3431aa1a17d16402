#!/usr/bin/env python3
"""
Sign a local PDF with a signature image, without going through the API.

Useful for checking placement values against a real document.

Usage:
    cd backend
    python scripts/sign_pdf.py contract.pdf signature.png --name "Jeanne Martin"

    # Custom placement (percent of the page, y measured from the top)
    python scripts/sign_pdf.py contract.pdf signature.png --name "Jeanne Martin" \
        --x 10 --y 70 --width 30 --page 2 --date 2024-03-05
"""

import argparse
import sys
import os
from datetime import date
from pathlib import Path

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from dotenv import load_dotenv
load_dotenv()

from docsign.services.coordinate_mapper import PlacementSpec
from docsign.services.header_renderer import verify_rendering_backend
from docsign.services.signing_pipeline import compose_signed_document
from docsign.utils.exceptions import DocSignError


def main():
    parser = argparse.ArgumentParser(
        description="Overlay a signature image (with name/date header) onto a PDF"
    )
    parser.add_argument("pdf", type=Path, help="PDF to sign")
    parser.add_argument("signature", type=Path, help="Signature image (PNG, transparent or white background)")
    parser.add_argument("--name", required=True, help="Signer display name")
    parser.add_argument(
        "--date",
        default=date.today().isoformat(),
        help="Signature date, ISO-8601 (default: today)"
    )
    parser.add_argument("--x", type=float, default=None, help="Left edge, percent of page width")
    parser.add_argument("--y", type=float, default=None, help="Top edge, percent of page height from the top")
    parser.add_argument("--width", type=float, default=None, help="Width, percent of page width")
    parser.add_argument("--page", type=int, default=None, help="1-based page (default: last page)")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output path (default: <pdf>-signed.pdf)"
    )

    args = parser.parse_args()

    verify_rendering_backend()

    placement = None
    if any(v is not None for v in (args.x, args.y, args.width, args.page)):
        default = PlacementSpec.default()
        placement = PlacementSpec(
            x=default.x if args.x is None else args.x,
            y=default.y if args.y is None else args.y,
            width_percent=default.width_percent if args.width is None else args.width,
            target_page=args.page,
        )

    try:
        result = compose_signed_document(
            args.pdf.read_bytes(),
            args.signature.read_bytes(),
            args.name,
            args.date,
            placement=placement,
            document_name=args.pdf.name,
        )
    except DocSignError as e:
        print(f"✗ {e.code}: {e.message}")
        sys.exit(1)

    output = args.output or args.pdf.with_name(f"{args.pdf.stem}-signed.pdf")
    output.write_bytes(result.pdf_bytes)
    print(f"✓ Signed page(s) {', '.join(map(str, result.signed_pages))} of {result.page_count}")
    print(f"  Saved to {output}")


if __name__ == "__main__":
    main()
