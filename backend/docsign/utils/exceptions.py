class DocSignError(Exception):
    """Base exception for document signing errors"""
    def __init__(self, code: str, message: str, status_code: int = 400, field: str = None, details: dict = None):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.field = field
        self.details = details or {}
        super().__init__(self.message)


class InputValidationError(DocSignError):
    """Missing or empty required input; the caller must fix the request."""
    def __init__(self, message: str, field: str = None, details: dict = None):
        super().__init__("VALIDATION_ERROR", message, 400, field, details)


class NotFoundError(DocSignError):
    def __init__(self, resource: str, resource_id: str = None):
        message = f"{resource} not found"
        if resource_id:
            message += f": {resource_id}"
        super().__init__("NOT_FOUND", message, 404, details={"resource": resource, "resource_id": resource_id})


class MalformedDocumentError(DocSignError):
    """Source PDF cannot be parsed."""
    def __init__(self, reason: str = None, details: dict = None):
        message = "Document is not a readable PDF"
        if reason:
            message += f": {reason}"
        super().__init__("MALFORMED_DOCUMENT", message, 422, "document", details)


class ImageProcessingError(DocSignError):
    """Signature image cannot be decoded, trimmed or composited."""
    def __init__(self, operation: str, reason: str = None, details: dict = None):
        message = f"Image {operation} failed"
        if reason:
            message += f": {reason}"
        details = {"operation": operation, **(details or {})}
        super().__init__("IMAGE_PROCESSING_ERROR", message, 422, "signature", details)


class CompositionError(DocSignError):
    """Embedding produced invalid geometry or could not be written to the page."""
    def __init__(self, reason: str, details: dict = None):
        super().__init__("COMPOSITION_ERROR", f"Signature composition failed: {reason}", 422, details=details)


class FileOperationError(DocSignError):
    def __init__(self, operation: str, file_path: str, reason: str = None):
        message = f"File {operation} failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__("FILE_OPERATION_ERROR", message, 500, details={"operation": operation, "file_path": file_path})
