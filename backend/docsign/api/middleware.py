from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from docsign.schemas.error import ErrorResponse
from docsign.utils.exceptions import DocSignError
import logging
import uuid

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, request_id=str(uuid.uuid4())).model_dump()
    )


async def error_handler_middleware(request: Request, call_next):
    """Global error handler middleware that converts exceptions to structured error responses."""
    try:
        return await call_next(request)
    except DocSignError as e:
        logger.warning(f"{request.method} {request.url.path} failed: {e.code} - {e.message}")
        return _error_response(e.status_code, {
            "code": e.code,
            "message": e.message,
            "field": e.field,
            "details": e.details
        })
    except HTTPException as e:
        logger.warning(f"HTTP Exception: {e.status_code} - {e.detail}")
        return _error_response(e.status_code, {
            "code": "HTTP_EXCEPTION",
            "message": str(e.detail),
            "details": {"status_code": e.status_code}
        })
    except Exception as e:
        # Catch-all for unexpected errors
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        return _error_response(500, {
            "code": "INTERNAL_SERVER_ERROR",
            "message": "An unexpected error occurred",
            "details": {"error_type": type(e).__name__}
        })
