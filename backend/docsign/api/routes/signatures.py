from fastapi import APIRouter, Depends, File, Form, UploadFile
from typing import Optional
import logging

from docsign.api.dependencies import get_signing_pipeline
from docsign.api.uploads import pdf_response, placement_from_form, read_upload
from docsign.services.signing_pipeline import SigningPipeline

router = APIRouter(prefix="/signatures", tags=["signatures"])

logger = logging.getLogger(__name__)


@router.post("/compose")
async def compose_signature(
    document: UploadFile = File(...),
    signature: UploadFile = File(...),
    display_name: str = Form(...),
    signed_date: str = Form(...),
    x: Optional[float] = Form(None),
    y: Optional[float] = Form(None),
    width_percent: Optional[float] = Form(None),
    target_page: Optional[int] = Form(None),
    pipeline: SigningPipeline = Depends(get_signing_pipeline)
):
    """Overlay an uploaded signature onto an uploaded PDF and return the signed PDF"""
    document_bytes = await read_upload(document, "document")
    signature_bytes = await read_upload(signature, "signature")
    placement = placement_from_form(x, y, width_percent, target_page)

    result = await pipeline.compose_async(
        document_bytes,
        signature_bytes,
        display_name,
        signed_date,
        placement=placement,
        document_name=document.filename or "document.pdf"
    )
    return pdf_response(result)
