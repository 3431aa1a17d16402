"""
Signing Pipeline: turns a base PDF, a captured signature and signer metadata
into a visually signed PDF.

Stages run strictly in order: header render -> composite -> place/embed ->
serialize. Nothing is cached between calls, so concurrent signings of the same
document are independent.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from fastapi.concurrency import run_in_threadpool

from docsign.config import settings
from docsign.services.coordinate_mapper import PlacementSpec
from docsign.services.header_renderer import HeaderRenderer
from docsign.services.pdf_page_editor import PdfPageEditor, Stamp, load_document
from docsign.services.raster import RasterImage
from docsign.services.signature_compositor import compose_signature
from docsign.utils.exceptions import ImageProcessingError, InputValidationError
from docsign.utils.filenames import suggest_file_name
from docsign.utils.timezone import DateLike

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_NAME = "document.pdf"


@dataclass(frozen=True)
class SignerInput:
    """Everything needed to place one signer's signature."""
    signature_bytes: bytes
    display_name: str
    signed_date: DateLike
    placement: Optional[PlacementSpec] = None


@dataclass(frozen=True)
class SignedDocumentResult:
    pdf_bytes: bytes
    suggested_file_name: str
    page_count: int
    signed_pages: Tuple[int, ...]


def _validate_document(document_bytes: bytes) -> None:
    if not document_bytes:
        raise InputValidationError("Document content is required", field="document")


def _validate_signer(signer: SignerInput) -> None:
    if not signer.signature_bytes:
        raise ImageProcessingError("decode", "signature image buffer is empty")
    if not (signer.display_name or "").strip():
        raise InputValidationError("Signer display name is required", field="display_name")
    if signer.signed_date is None or signer.signed_date == "":
        raise InputValidationError("Signed date is required", field="signed_date")


class SigningPipeline:
    """Sequences the header renderer, compositor and PDF editor."""

    def __init__(
        self,
        header_renderer: Optional[HeaderRenderer] = None,
        page_editor: Optional[PdfPageEditor] = None,
    ):
        self.header_renderer = header_renderer or HeaderRenderer()
        self.page_editor = page_editor or PdfPageEditor()

    def build_signature_image(self, signer: SignerInput) -> RasterImage:
        """Header render + composite for one signer."""
        _validate_signer(signer)
        raw_signature = RasterImage.from_bytes(signer.signature_bytes, max_pixels=settings.max_signature_pixels)
        header = self.header_renderer.render(signer.display_name, signer.signed_date)
        return compose_signature(header, raw_signature)

    def build_stamp(self, signer: SignerInput) -> Stamp:
        image = self.build_signature_image(signer)
        return Stamp(placement=signer.placement or PlacementSpec.default(), image_png=image.to_png())

    def embed_stamps(
        self,
        document_bytes: bytes,
        stamps: Sequence[Stamp],
        document_name: str = DEFAULT_DOCUMENT_NAME,
    ) -> SignedDocumentResult:
        _validate_document(document_bytes)
        reader = load_document(document_bytes)
        page_count = len(reader.pages)
        pdf_bytes = self.page_editor.embed_into(reader, stamps)
        signed_pages = tuple(sorted({s.placement.resolve_page_index(page_count) + 1 for s in stamps}))

        result = SignedDocumentResult(
            pdf_bytes=pdf_bytes,
            suggested_file_name=suggest_file_name(document_name),
            page_count=page_count,
            signed_pages=signed_pages,
        )
        logger.info(
            f"Signed document {document_name!r}: {len(stamps)} signature(s) on page(s) "
            f"{list(signed_pages)} of {page_count}"
        )
        return result

    def compose_multi(
        self,
        document_bytes: bytes,
        signers: Sequence[SignerInput],
        document_name: str = DEFAULT_DOCUMENT_NAME,
    ) -> SignedDocumentResult:
        _validate_document(document_bytes)
        if not signers:
            raise InputValidationError("At least one signer is required", field="signers")
        stamps = [self.build_stamp(signer) for signer in signers]
        return self.embed_stamps(document_bytes, stamps, document_name)

    def compose(
        self,
        document_bytes: bytes,
        signature_bytes: bytes,
        signer_display_name: str,
        signed_date: DateLike,
        placement: Optional[PlacementSpec] = None,
        document_name: str = DEFAULT_DOCUMENT_NAME,
    ) -> SignedDocumentResult:
        signer = SignerInput(
            signature_bytes=signature_bytes,
            display_name=signer_display_name,
            signed_date=signed_date,
            placement=placement,
        )
        return self.compose_multi(document_bytes, [signer], document_name)

    async def compose_async(
        self,
        document_bytes: bytes,
        signature_bytes: bytes,
        signer_display_name: str,
        signed_date: DateLike,
        placement: Optional[PlacementSpec] = None,
        document_name: str = DEFAULT_DOCUMENT_NAME,
    ) -> SignedDocumentResult:
        """
        Same as compose, with each CPU-bound stage run in the thread pool.

        Every await is a cancellation point, so an aborted request stops
        between stages without leaving anything behind.
        """
        _validate_document(document_bytes)
        signer = SignerInput(
            signature_bytes=signature_bytes,
            display_name=signer_display_name,
            signed_date=signed_date,
            placement=placement,
        )
        _validate_signer(signer)

        raw_signature = await run_in_threadpool(
            RasterImage.from_bytes, signature_bytes, settings.max_signature_pixels
        )
        header = await run_in_threadpool(self.header_renderer.render, signer_display_name, signed_date)
        composite = await run_in_threadpool(compose_signature, header, raw_signature)
        stamp = Stamp(placement=placement or PlacementSpec.default(), image_png=composite.to_png())
        return await run_in_threadpool(self.embed_stamps, document_bytes, [stamp], document_name)


# Singleton instance
signing_pipeline = SigningPipeline()


def compose_signed_document(
    document_bytes: bytes,
    signature_bytes: bytes,
    signer_display_name: str,
    signed_date: DateLike,
    placement: Optional[PlacementSpec] = None,
    document_name: str = DEFAULT_DOCUMENT_NAME,
) -> SignedDocumentResult:
    return signing_pipeline.compose(
        document_bytes, signature_bytes, signer_display_name, signed_date, placement, document_name
    )


async def compose_signed_document_async(
    document_bytes: bytes,
    signature_bytes: bytes,
    signer_display_name: str,
    signed_date: DateLike,
    placement: Optional[PlacementSpec] = None,
    document_name: str = DEFAULT_DOCUMENT_NAME,
) -> SignedDocumentResult:
    return await signing_pipeline.compose_async(
        document_bytes, signature_bytes, signer_display_name, signed_date, placement, document_name
    )


def compose_multi_signed_document(
    document_bytes: bytes,
    signers: List[SignerInput],
    document_name: str = DEFAULT_DOCUMENT_NAME,
) -> SignedDocumentResult:
    return signing_pipeline.compose_multi(document_bytes, signers, document_name)
