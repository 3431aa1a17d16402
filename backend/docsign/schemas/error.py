from pydantic import BaseModel
from typing import Optional, Dict, Any


class ErrorDetail(BaseModel):
    code: str  # e.g. MALFORMED_DOCUMENT, IMAGE_PROCESSING_ERROR
    message: str
    field: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """Body returned for every failed request."""
    error: ErrorDetail
    request_id: Optional[str] = None
