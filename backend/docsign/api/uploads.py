"""Helpers shared by routes that accept multipart uploads or return PDFs."""

from datetime import date
from typing import Optional

from fastapi import UploadFile
from fastapi.responses import Response

from docsign.config import settings
from docsign.services.coordinate_mapper import PlacementSpec
from docsign.services.signing_pipeline import SignedDocumentResult
from docsign.utils.exceptions import InputValidationError


async def read_upload(upload: UploadFile, field: str) -> bytes:
    """Read an uploaded file, enforcing the configured size limit."""
    limit = settings.max_upload_bytes()
    data = await upload.read(limit + 1)
    if len(data) > limit:
        raise InputValidationError(
            f"Uploaded file exceeds {settings.max_upload_mb} MB",
            field=field,
            details={"max_upload_mb": settings.max_upload_mb}
        )
    return data


def parse_version_date(value: Optional[str], field: str = "date") -> Optional[date]:
    if value is None or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError as e:
        raise InputValidationError(f"Invalid date: {value}", field=field) from e


def placement_from_form(
    x: Optional[float],
    y: Optional[float],
    width_percent: Optional[float],
    target_page: Optional[int],
) -> Optional[PlacementSpec]:
    """PlacementSpec from optional form fields; None when nothing was sent."""
    if x is None and y is None and width_percent is None and target_page is None:
        return None
    return PlacementSpec(
        x=settings.default_signature_x if x is None else x,
        y=settings.default_signature_y if y is None else y,
        width_percent=settings.default_signature_width_percent if width_percent is None else width_percent,
        target_page=target_page,
    )


def pdf_response(result: SignedDocumentResult) -> Response:
    return Response(
        content=result.pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"inline; filename={result.suggested_file_name}",
            "X-Page-Count": str(result.page_count),
            "X-Signed-Pages": ",".join(str(p) for p in result.signed_pages),
        }
    )
