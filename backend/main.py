"""Main entry point for BookSmart AI client."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, File, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse

from config import LOG_FORMAT, LOG_LEVEL, PORT
from logger import setup_logging
from services.api_client import BookSmartClient
from services.lifecycle import DocumentLifecycle
from services.renderer import render_page

logger = logging.getLogger(__name__)

router = APIRouter()


def _lifecycle(request: Request) -> DocumentLifecycle:
    return request.app.state.lifecycle


def _back_to_index() -> RedirectResponse:
    # 303 so the browser follows a POST with a GET
    return RedirectResponse(url="/", status_code=303)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the document listing at startup; cancel deferred work at shutdown."""
    if LOG_FORMAT == "json":
        setup_logging(LOG_LEVEL)

    if app.state.lifecycle is None:
        app.state.lifecycle = DocumentLifecycle(BookSmartClient())

    logger.info("Starting BookSmart AI client...")
    await app.state.lifecycle.start()
    yield
    logger.info("Shutting down BookSmart AI client...")
    await app.state.lifecycle.shutdown()


@router.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    """Render the active view."""
    lifecycle = _lifecycle(request)
    coordinator = lifecycle.coordinator
    return HTMLResponse(render_page(
        view=coordinator.current_view,
        documents=lifecycle.store.list(),
        current_document=coordinator.current_document(lifecycle.store),
        uploading=lifecycle.uploading,
        alert=lifecycle.take_alert()
    ))


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "booksmart-client",
        "version": "1.0.0"
    }


@router.get("/api/documents")
async def list_documents(request: Request) -> dict:
    """JSON snapshot of the client-side document store."""
    lifecycle = _lifecycle(request)
    return {
        "view": lifecycle.coordinator.current_view.value,
        "current_document_id": lifecycle.coordinator.current_document_id,
        "uploading": lifecycle.uploading,
        "documents": [
            {
                "id": d.id,
                "filename": d.filename,
                "date": d.date,
                "status": d.status.value,
                "bookmarks": [
                    {"page": b.page, "label": b.label, "category": b.category}
                    for b in d.bookmarks
                ],
                "error": d.error,
            }
            for d in lifecycle.store.list()
        ],
    }


@router.post("/nav/{view}")
async def navigate(view: str, request: Request) -> RedirectResponse:
    """Navigation bar click."""
    _lifecycle(request).coordinator.navigate(view)
    return _back_to_index()


# Ids are opaque and arrive percent-decoded, so "/" inside an id must match too
@router.post("/documents/{document_id:path}/details")
async def view_details(document_id: str, request: Request) -> RedirectResponse:
    lifecycle = _lifecycle(request)
    lifecycle.coordinator.open_detail(document_id, lifecycle.store)
    return _back_to_index()


@router.post("/back")
async def back(request: Request) -> RedirectResponse:
    _lifecycle(request).coordinator.back()
    return _back_to_index()


@router.post("/upload")
async def upload(request: Request, file: Optional[UploadFile] = File(None)) -> RedirectResponse:
    """
    Upload the selected file.

    The request is held until the backend answers; the deferred processing call
    is scheduled in the background after that.
    """
    if file is None or not file.filename:
        logger.info("Upload submitted without a file; ignoring")
        return _back_to_index()

    content = await file.read()
    await _lifecycle(request).upload(
        filename=file.filename,
        content=content,
        content_type=file.content_type or "application/pdf"
    )
    return _back_to_index()


@router.post("/documents/{document_id:path}/download")
async def download(document_id: str, request: Request) -> RedirectResponse:
    """Redirect to the processed PDF; the form opens this in a new browsing context."""
    url = await _lifecycle(request).download_url(document_id)
    if url is None:
        return _back_to_index()
    return RedirectResponse(url=url, status_code=303)


@router.post("/documents/{document_id:path}/retry")
async def retry(document_id: str, request: Request) -> RedirectResponse:
    await _lifecycle(request).retry(document_id)
    return _back_to_index()


@router.post("/reload")
async def reload(request: Request) -> RedirectResponse:
    await _lifecycle(request).reload()
    return _back_to_index()


def create_application(lifecycle: Optional[DocumentLifecycle] = None) -> FastAPI:
    """
    Factory for the FastAPI app.

    Args:
        lifecycle: Pre-built lifecycle (tests pass one wired to mocks); built from
            configuration at startup when omitted
    """
    app = FastAPI(
        title="BookSmart AI",
        description="Upload PDFs and review AI-generated bookmarks",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.lifecycle = lifecycle
    app.include_router(router)
    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting BookSmart AI client on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
