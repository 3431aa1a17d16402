from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import Response
from typing import Optional, List
import logging

from docsign.api.dependencies import get_document_store, get_signing_pipeline
from docsign.api.uploads import parse_version_date, pdf_response, placement_from_form, read_upload
from docsign.schemas.document import DocumentListResponse, DocumentRename, DocumentVersionResponse
from docsign.services.document_store import DocumentStore, DocumentVersion
from docsign.services.signing_pipeline import SigningPipeline
from docsign.utils.exceptions import InputValidationError
from docsign.utils.filenames import suggest_file_name

router = APIRouter(prefix="/documents", tags=["documents"])

logger = logging.getLogger(__name__)


def _version_response(version: DocumentVersion) -> DocumentVersionResponse:
    return DocumentVersionResponse(
        title=version.title,
        version_date=version.version_date,
        file_name=version.path.name,
        size=version.size
    )


@router.get("", response_model=DocumentListResponse)
def list_documents(store: DocumentStore = Depends(get_document_store)):
    """List stored document titles"""
    return DocumentListResponse(titles=store.list_titles())


@router.post("", response_model=DocumentVersionResponse, status_code=201)
async def upload_document(
    title: str = Form(...),
    date: str = Form(...),
    file: UploadFile = File(...),
    store: DocumentStore = Depends(get_document_store)
):
    """Store an uploaded PDF as a new version of a document"""
    version_date = parse_version_date(date)
    if version_date is None:
        raise InputValidationError("Document date is required", field="date")

    data = await read_upload(file, "file")
    store.save(title, version_date, data)
    return _version_response(store.get_version(title, version_date))


@router.get("/{title}/versions", response_model=List[DocumentVersionResponse])
def list_versions(title: str, store: DocumentStore = Depends(get_document_store)):
    """List stored versions of a document, oldest first"""
    return [_version_response(v) for v in store.list_versions(title)]


@router.get("/{title}/pdf")
def get_pdf(
    title: str,
    date: Optional[str] = Query(None),
    store: DocumentStore = Depends(get_document_store)
):
    """Download a stored version (newest unless a date is given)"""
    data, file_name = store.load(title, parse_version_date(date))
    return Response(
        content=data,
        media_type="application/pdf",
        headers={"Content-Disposition": f"inline; filename={suggest_file_name(file_name)}"}
    )


@router.patch("/{title}", response_model=List[DocumentVersionResponse])
def rename_document(
    title: str,
    request: DocumentRename,
    store: DocumentStore = Depends(get_document_store)
):
    """Rename a document and all of its versions"""
    store.rename(title, request.title)
    return [_version_response(v) for v in store.list_versions(request.title)]


@router.delete("/{title}", status_code=204)
def delete_document(title: str, store: DocumentStore = Depends(get_document_store)):
    """Delete a document and every stored version"""
    store.delete(title)
    return Response(status_code=204)


@router.post("/{title}/sign")
async def sign_document(
    title: str,
    signature: UploadFile = File(...),
    display_name: str = Form(...),
    signed_date: str = Form(...),
    date: Optional[str] = Form(None),
    x: Optional[float] = Form(None),
    y: Optional[float] = Form(None),
    width_percent: Optional[float] = Form(None),
    target_page: Optional[int] = Form(None),
    store: DocumentStore = Depends(get_document_store),
    pipeline: SigningPipeline = Depends(get_signing_pipeline)
):
    """Return a stored document with the signature applied (the signed copy is not stored)"""
    document_bytes, file_name = store.load(title, parse_version_date(date))
    signature_bytes = await read_upload(signature, "signature")
    placement = placement_from_form(x, y, width_percent, target_page)

    result = await pipeline.compose_async(
        document_bytes,
        signature_bytes,
        display_name,
        signed_date,
        placement=placement,
        document_name=file_name
    )
    logger.info(f"Signed stored document {title!r} for {display_name.strip()!r}")
    return pdf_response(result)
