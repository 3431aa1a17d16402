from docsign.services.document_store import DocumentStore, document_store
from docsign.services.signing_pipeline import SigningPipeline, signing_pipeline


def get_document_store() -> DocumentStore:
    """Dependency for the document store (overridden in tests)"""
    return document_store


def get_signing_pipeline() -> SigningPipeline:
    return signing_pipeline
