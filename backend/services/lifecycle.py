"""
Document lifecycle orchestration.

Ties together the backend client, the document store, the view coordinator
and the task scheduler:

1. start():  load the full document listing once
2. upload(): upload a file, append a PROCESSING record, return to the list
             and schedule a single deferred processing call
3. the deferred call moves the document to COMPLETED with its bookmarks,
   or to FAILED when failure surfacing is enabled

Every backend failure is caught here and turned into either a one-shot alert
for the user (upload, download) or a log entry (listing, processing, reload).
"""
import logging
from typing import Optional

from config import PROCESS_DELAY_SECONDS, SURFACE_PROCESSING_FAILURES
from models.document import Document, DocumentStatus
from services.api_client import ApiClientError, BookSmartClient
from services.document_store import DocumentStore
from services.scheduler import ScheduledTask, TaskScheduler
from services.view_coordinator import ViewCoordinator

logger = logging.getLogger(__name__)


class DocumentLifecycle:
    """Client-side state container plus the upload-and-process choreography."""

    UPLOAD_FAILED_MESSAGE = "Failed to upload file. Please try again."
    DOWNLOAD_FAILED_MESSAGE = "Failed to download PDF"

    def __init__(
        self,
        client: BookSmartClient,
        store: Optional[DocumentStore] = None,
        coordinator: Optional[ViewCoordinator] = None,
        scheduler: Optional[TaskScheduler] = None,
        process_delay: float = PROCESS_DELAY_SECONDS,
        surface_failures: bool = SURFACE_PROCESSING_FAILURES
    ):
        """
        Initialize the lifecycle.

        Args:
            client: Backend client
            store: Document store (a fresh one by default)
            coordinator: View coordinator (a fresh one by default)
            scheduler: Scheduler for deferred processing calls
            process_delay: Seconds between a successful upload and the processing call
            surface_failures: Mark documents FAILED when processing fails instead of
                leaving them PROCESSING
        """
        self.client = client
        self.store = store or DocumentStore()
        self.coordinator = coordinator or ViewCoordinator()
        self.scheduler = scheduler or TaskScheduler()
        self.process_delay = process_delay
        self.surface_failures = surface_failures
        self.uploading = False
        self.alert: Optional[str] = None

    async def start(self) -> None:
        """Load all documents from the backend. A failure leaves the store empty."""
        try:
            documents = await self.client.get_all_documents()
        except ApiClientError as e:
            logger.error(
                f"Failed to load documents: {e.error.message}",
                extra={"error_code": e.error.code}
            )
            return
        self.store.load_all(documents)

    async def upload(
        self,
        filename: str,
        content: bytes,
        content_type: str = "application/pdf"
    ) -> Optional[Document]:
        """
        Upload a file and schedule its processing.

        Returns:
            The new Document, or None if the upload failed or another one is in flight
        """
        if self.uploading:
            logger.warning(f"Upload of {filename} ignored: another upload is in progress")
            return None

        self.uploading = True
        try:
            descriptor = await self.client.upload_file(filename, content, content_type)
        except ApiClientError as e:
            logger.error(
                f"Upload failed for {filename}: {e.error.message}",
                extra={"error_code": e.error.code}
            )
            self.alert = self.UPLOAD_FAILED_MESSAGE
            return None
        finally:
            self.uploading = False

        document = Document(
            id=descriptor.id,
            filename=descriptor.filename,
            date=descriptor.date,
            status=DocumentStatus.PROCESSING,
            bookmarks=[],
            stored_filename=descriptor.stored_filename
        )
        self.store.append(document)
        self.coordinator.upload_finished()
        logger.info(f"Uploaded {document.filename} as document {document.id}")

        self._schedule_processing(document.id)
        return document

    async def retry(self, document_id: str) -> bool:
        """
        Re-run processing for a FAILED document.

        Returns:
            True if processing was scheduled again
        """
        document = self.store.get(document_id)
        if document is None or document.status != DocumentStatus.FAILED:
            logger.warning(f"Retry ignored for document {document_id}: not in failed state")
            return False

        self.store.update_status(document_id, DocumentStatus.PROCESSING)
        self._schedule_processing(document_id)
        logger.info(f"Retrying processing of document {document_id}")
        return True

    async def download_url(self, document_id: str) -> Optional[str]:
        """Look up the download link of a document; alerts the user on failure."""
        try:
            return await self.client.get_download_url(document_id)
        except ApiClientError as e:
            logger.error(
                f"Download failed for document {document_id}: {e.error.message}",
                extra={"error_code": e.error.code}
            )
            self.alert = self.DOWNLOAD_FAILED_MESSAGE
            return None

    async def reload(self) -> None:
        """Re-fetch the listing and merge it into the store. A failure keeps the store as is."""
        try:
            documents = await self.client.get_all_documents()
        except ApiClientError as e:
            logger.error(
                f"Failed to reload documents: {e.error.message}",
                extra={"error_code": e.error.code}
            )
            return
        self.store.merge(documents)

    def take_alert(self) -> Optional[str]:
        """Return the pending alert once and clear it."""
        alert, self.alert = self.alert, None
        return alert

    async def shutdown(self) -> None:
        """Cancel pending processing calls and close the backend client."""
        await self.scheduler.shutdown()
        await self.client.aclose()

    def _schedule_processing(self, document_id: str) -> ScheduledTask:
        return self.scheduler.schedule(
            self.process_delay,
            self._process,
            document_id,
            name=f"process:{document_id}"
        )

    async def _process(self, document_id: str) -> None:
        # Results only apply to a document still PROCESSING; a reload may have
        # brought in the completed copy meanwhile.
        try:
            bookmarks = await self.client.process_document(document_id)
        except ApiClientError as e:
            logger.error(
                f"Processing failed for document {document_id}: {e.error.message}",
                extra={"error_code": e.error.code}
            )
            if self.surface_failures:
                self.store.update_status(
                    document_id,
                    DocumentStatus.FAILED,
                    error=e.error.message,
                    expected_status=DocumentStatus.PROCESSING
                )
            return

        if self.store.update_status(
            document_id,
            DocumentStatus.COMPLETED,
            bookmarks,
            expected_status=DocumentStatus.PROCESSING
        ):
            logger.info(f"Document {document_id} completed with {len(bookmarks)} bookmarks")
