"""
PDF Page Editor: draws signature images (and optional text lines) onto pages
of an existing PDF.

Each target page gets one overlay page built with ReportLab, merged onto it
with pypdf. The input bytes are never modified; a new document is returned.
"""

import io
import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from pypdf import PdfReader, PdfWriter
from pypdf.errors import DependencyError, PdfReadError
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from docsign.services.coordinate_mapper import PlacementRect, PlacementSpec, map_placement
from docsign.services.raster import RasterImage
from docsign.utils.exceptions import (
    CompositionError,
    ImageProcessingError,
    InputValidationError,
    MalformedDocumentError,
)

logger = logging.getLogger(__name__)

STAMP_FONT_NAME = "Helvetica"
STAMP_FONT_SIZE = 10


@dataclass(frozen=True)
class Stamp:
    """One overlay: a PNG image and/or a text line at a placement."""
    placement: PlacementSpec
    image_png: Optional[bytes] = None
    text: Optional[str] = None

    def __post_init__(self):
        if not self.image_png and not (self.text or "").strip():
            raise InputValidationError("A stamp needs an image or a text", field="stamps")


def load_document(document_bytes: bytes) -> PdfReader:
    """Parse PDF bytes; any failure, or a document with no pages, is a MalformedDocumentError."""
    if not document_bytes:
        raise MalformedDocumentError("document is empty")

    try:
        reader = PdfReader(io.BytesIO(document_bytes))
        if reader.is_encrypted and not reader.decrypt(""):
            raise MalformedDocumentError("document is password protected")
        page_count = len(reader.pages)
    except MalformedDocumentError:
        raise
    except (PdfReadError, DependencyError, ValueError, KeyError, IndexError, TypeError) as e:
        raise MalformedDocumentError(str(e)) from e

    if page_count == 0:
        raise MalformedDocumentError("document has no pages")
    return reader


def count_pages(document_bytes: bytes) -> int:
    return len(load_document(document_bytes).pages)


def _check_geometry(rect: PlacementRect, page_number: int) -> None:
    values = (rect.left, rect.bottom, rect.width, rect.height)
    if not all(math.isfinite(v) for v in values):
        raise CompositionError("placement is not a finite rectangle", details={"page": page_number})
    if rect.width <= 0 or rect.height <= 0:
        raise CompositionError(
            f"computed signature size {rect.width:.2f}x{rect.height:.2f} is empty",
            details={"page": page_number, "width": rect.width, "height": rect.height},
        )


class PdfPageEditor:
    """Embeds stamps into a PDF and returns the new document bytes."""

    def __init__(self, font_name: str = STAMP_FONT_NAME, font_size: int = STAMP_FONT_SIZE):
        self.font_name = font_name
        self.font_size = font_size

    def _make_overlay(self, page_box, stamps: Sequence[Stamp], page_number: int) -> bytes:
        """Overlay page the size of the target page with every stamp drawn on it."""
        page_left, page_bottom = float(page_box.left), float(page_box.bottom)
        page_width, page_height = float(page_box.width), float(page_box.height)

        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=(page_left + page_width, page_bottom + page_height))

        for stamp in stamps:
            rect = map_placement(page_width, page_height, stamp.placement)
            x = page_left + rect.left
            y = page_bottom + rect.bottom

            if stamp.image_png:
                _check_geometry(rect, page_number)
                try:
                    image = RasterImage.from_bytes(stamp.image_png)
                except ImageProcessingError as e:
                    raise CompositionError(f"signature image cannot be embedded: {e.message}") from e
                pdf.drawImage(ImageReader(image.pixels), x, y, width=rect.width, height=rect.height, mask="auto")
                logger.debug(
                    f"Page {page_number}: image at ({x:.1f}, {y:.1f}) size {rect.width:.1f}x{rect.height:.1f}"
                )

            if stamp.text:
                pdf.setFillColorRGB(0, 0, 0)
                pdf.setFont(self.font_name, self.font_size)
                pdf.drawString(x, y, stamp.text)

        pdf.save()
        return buffer.getvalue()

    def embed(self, document_bytes: bytes, stamps: Sequence[Stamp]) -> bytes:
        """
        Draw every stamp on its target page and serialize the whole document.

        Stamps whose target page is missing or out of range go on the last
        page. Raises MalformedDocumentError for unreadable input and
        CompositionError when a stamp cannot be placed; nothing is returned
        on failure.
        """
        if not stamps:
            raise InputValidationError("At least one stamp is required", field="stamps")
        return self.embed_into(load_document(document_bytes), stamps)

    def embed_into(self, reader: PdfReader, stamps: Sequence[Stamp]) -> bytes:
        """embed() for a document already parsed with load_document()."""
        if not stamps:
            raise InputValidationError("At least one stamp is required", field="stamps")

        page_count = len(reader.pages)

        stamps_by_page: Dict[int, List[Stamp]] = defaultdict(list)
        for stamp in stamps:
            stamps_by_page[stamp.placement.resolve_page_index(page_count)].append(stamp)

        try:
            writer = PdfWriter(clone_from=reader)
            for i, page in enumerate(writer.pages):
                if i in stamps_by_page:
                    overlay_pdf = self._make_overlay(page.mediabox, stamps_by_page[i], i + 1)
                    overlay_page = PdfReader(io.BytesIO(overlay_pdf)).pages[0]
                    page.merge_page(overlay_page)

            output = io.BytesIO()
            writer.write(output)
        except (CompositionError, InputValidationError):
            raise
        except (PdfReadError, ValueError, KeyError, TypeError, OSError) as e:
            raise CompositionError(str(e)) from e

        signed_pages = sorted(p + 1 for p in stamps_by_page)
        logger.debug(f"Embedded {len(stamps)} stamp(s) on page(s) {signed_pages} of {page_count}")
        return output.getvalue()
