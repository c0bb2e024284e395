"""HTTP client for the remote BookSmart backend."""
import time
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from config import API_BASE_URL, REQUEST_TIMEOUT
from models.document import Bookmark, Document, DocumentStatus

logger = logging.getLogger(__name__)


@dataclass
class ApiError:
    """Structured error response from backend operations."""
    code: str
    message: str
    details: Dict[str, Any]


class ApiClientError(Exception):
    """Custom exception for backend client errors with structured error information."""

    def __init__(self, error: ApiError):
        self.error = error
        super().__init__(error.message)


def _invalid_response(message: str, payload: Any) -> ApiClientError:
    return ApiClientError(ApiError(
        code="INVALID_RESPONSE",
        message=message,
        details={"payload": repr(payload)[:200]}
    ))


def parse_bookmark(payload: Dict[str, Any]) -> Bookmark:
    """
    Build a Bookmark from a backend payload.

    Unknown categories are kept verbatim; display code maps them to "other".

    Raises:
        ApiClientError: INVALID_RESPONSE if page is missing or not a positive integer
    """
    try:
        page = int(payload["page"])
        if page < 1:
            raise ValueError(f"page must be positive, got {page}")
        return Bookmark(
            page=page,
            label=str(payload.get("label", "")),
            category=str(payload.get("category", "other"))
        )
    except (KeyError, TypeError, ValueError) as e:
        raise _invalid_response(f"Malformed bookmark: {e}", payload)


def parse_document(payload: Dict[str, Any]) -> Document:
    """
    Build a Document from a backend payload.

    Ids are normalised to strings so numeric and string ids compare equal.

    Raises:
        ApiClientError: INVALID_RESPONSE if id or filename is missing
    """
    if not isinstance(payload, dict):
        raise _invalid_response("Document payload is not an object", payload)
    try:
        raw_status = payload.get("status")
        if raw_status == DocumentStatus.COMPLETED.value:
            status = DocumentStatus.COMPLETED
        elif raw_status == DocumentStatus.FAILED.value:
            status = DocumentStatus.FAILED
        else:
            status = DocumentStatus.PROCESSING

        return Document(
            id=str(payload["id"]),
            filename=str(payload["filename"]),
            date=str(payload.get("date", "")),
            status=status,
            bookmarks=[parse_bookmark(b) for b in payload.get("bookmarks") or []],
            stored_filename=payload.get("storedFilename")
        )
    except KeyError as e:
        raise _invalid_response(f"Document payload missing field {e}", payload)


class BookSmartClient:
    """Thin async wrapper around the four BookSmart backend endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the backend client.

        Args:
            base_url: Backend base URL (defaults to BOOKSMART_API_URL from environment)
            timeout: Request timeout in seconds (defaults to REQUEST_TIMEOUT)
            transport: Optional httpx transport, used by tests to stub the backend
        """
        self.base_url = (base_url or API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else REQUEST_TIMEOUT
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport
        )
        logger.info(f"BookSmartClient initialized for {self.base_url}")

    async def upload_file(
        self,
        filename: str,
        content: bytes,
        content_type: str = "application/pdf"
    ) -> Document:
        """
        Upload a file to the backend.

        Returns:
            Document descriptor assigned by the backend (no bookmarks yet)

        Raises:
            ApiClientError: On transport, HTTP or payload errors
        """
        data = await self._request(
            "POST",
            "/upload",
            files={"file": (filename, content, content_type)}
        )
        if not isinstance(data, dict) or "document" not in data:
            raise _invalid_response("Upload response has no document", data)
        return parse_document(data["document"])

    async def process_document(self, document_id: str) -> List[Bookmark]:
        """
        Ask the backend to process a document and return its bookmarks.

        Raises:
            ApiClientError: On transport, HTTP or payload errors
        """
        data = await self._request("POST", f"/process/{quote(document_id, safe='')}")
        if not isinstance(data, dict) or not isinstance(data.get("bookmarks"), list):
            raise _invalid_response("Process response has no bookmarks list", data)
        return [parse_bookmark(b) for b in data["bookmarks"]]

    async def get_all_documents(self) -> List[Document]:
        """
        Fetch the full document listing.

        Raises:
            ApiClientError: On transport, HTTP or payload errors
        """
        data = await self._request("GET", "/documents")
        if not isinstance(data, list):
            raise _invalid_response("Document listing is not a list", data)
        return [parse_document(d) for d in data]

    async def get_download_url(self, document_id: str) -> str:
        """
        Fetch a download link for the processed PDF.

        Raises:
            ApiClientError: On transport, HTTP or payload errors
        """
        data = await self._request("GET", f"/download/{quote(document_id, safe='')}")
        if not isinstance(data, dict) or not data.get("downloadUrl"):
            raise _invalid_response("Download response has no downloadUrl", data)
        return str(data["downloadUrl"])

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        """
        Issue one request and decode its JSON body.

        Raises:
            ApiClientError: Structured error with code, message, and details
        """
        start_time = time.time()

        try:
            logger.debug(f"{method} {path}")
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            latency_ms = int((time.time() - start_time) * 1000)
            error = ApiError(
                code="TIMEOUT_ERROR",
                message="Request timed out. Please try again.",
                details={
                    "path": path,
                    "latency_ms": latency_ms,
                    "original_error": str(e)
                }
            )
            logger.error(
                f"Timeout error: {method} {path}, latency={latency_ms}ms",
                extra={"error_code": error.code}
            )
            raise ApiClientError(error)
        except httpx.RequestError as e:
            latency_ms = int((time.time() - start_time) * 1000)
            error = ApiError(
                code="NETWORK_ERROR",
                message=f"Network error: {str(e)}",
                details={
                    "path": path,
                    "latency_ms": latency_ms,
                    "original_error": str(e),
                    "error_type": type(e).__name__
                }
            )
            logger.error(
                f"Network error: {method} {path}, latency={latency_ms}ms, error={e}",
                extra={"error_code": error.code}
            )
            raise ApiClientError(error)

        latency_ms = int((time.time() - start_time) * 1000)

        if response.status_code >= 400:
            error = ApiError(
                code="HTTP_ERROR",
                message=f"Backend returned status {response.status_code}",
                details={
                    "path": path,
                    "status_code": response.status_code,
                    "latency_ms": latency_ms,
                    "body": response.text[:500]
                }
            )
            logger.error(
                f"HTTP error: {method} {path} -> {response.status_code}, latency={latency_ms}ms",
                extra={"error_code": error.code}
            )
            raise ApiClientError(error)

        try:
            data = response.json()
        except ValueError:
            raise _invalid_response("Response body is not JSON", response.text[:200])

        logger.info(f"{method} {path} -> {response.status_code} in {latency_ms}ms")
        return data
