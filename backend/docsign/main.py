from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from docsign.config import settings
from docsign.api.middleware import error_handler_middleware
from docsign.api.routes import documents, signatures
from docsign.services.header_renderer import verify_rendering_backend
import logging

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: fail fast if header fonts cannot be rendered
    try:
        verify_rendering_backend()
        logger.info("Application started")
    except Exception as e:
        logger.error(f"Error during startup: {e}")
        raise
    yield
    logger.info("Application shutdown")


app = FastAPI(
    title="Document Signing API",
    description="Upload documents and overlay drawn signatures onto their PDFs",
    version="1.0.0",
    lifespan=lifespan
)

app.middleware("http")(error_handler_middleware)

# CORS middleware (outermost, wraps error responses too)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(documents.router, prefix="/api")
app.include_router(signatures.router, prefix="/api")


@app.get("/")
def root():
    return {"message": "Document Signing API", "version": "1.0.0"}


@app.get("/health")
def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("docsign.main:app", host="0.0.0.0", port=8000, reload=settings.is_dev())
