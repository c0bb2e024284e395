"""In-memory document store backing the views."""
import logging
import threading
from typing import Dict, List, Optional, Sequence

from models.document import Bookmark, Document, DocumentStatus

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    Ordered collection of Document records.

    Append-only plus in-place status/bookmark updates; nothing is ever deleted
    except by a full replace from the remote listing. All mutations take a lock
    because FastAPI may run sync handlers in a threadpool next to the event loop.
    """

    def __init__(self):
        self._documents: List[Document] = []
        self._lock = threading.RLock()

    def load_all(self, documents: Sequence[Document]) -> None:
        """Replace the whole store with a remote listing."""
        with self._lock:
            self._documents = list(documents)
        logger.info(f"Loaded {len(documents)} documents into store")

    def append(self, document: Document) -> None:
        """Add a document at the end. The backend is trusted to hand out fresh ids."""
        with self._lock:
            self._documents.append(document)
        logger.debug(f"Appended document {document.id} ({document.filename})")

    def update_status(
        self,
        document_id: str,
        status: DocumentStatus,
        bookmarks: Optional[Sequence[Bookmark]] = None,
        error: Optional[str] = None,
        expected_status: Optional[DocumentStatus] = None
    ) -> bool:
        """
        Update status and bookmarks of one document in place.

        Bookmarks are only kept for COMPLETED documents. Unknown ids are a silent no-op.

        Args:
            expected_status: Only update when the document currently has this status

        Returns:
            True if a document was updated
        """
        with self._lock:
            for document in self._documents:
                if document.id == document_id:
                    if expected_status is not None and document.status != expected_status:
                        logger.info(
                            f"update_status to {status.value} skipped for document {document_id}: "
                            f"status is {document.status.value}, expected {expected_status.value}"
                        )
                        return False
                    document.status = status
                    document.bookmarks = list(bookmarks or []) if status == DocumentStatus.COMPLETED else []
                    document.error = error
                    return True
        logger.debug(f"update_status ignored for unknown document {document_id}")
        return False

    def merge(self, documents: Sequence[Document]) -> None:
        """
        Replace the store with a fresh listing without reverting completed documents.

        A document the client already holds as COMPLETED is kept when the remote
        copy still reports it as PROCESSING, so a late listing cannot undo a
        background processing result.
        """
        with self._lock:
            known: Dict[str, Document] = {d.id: d for d in self._documents}
            merged = []
            for remote in documents:
                local = known.get(remote.id)
                if (
                    local is not None
                    and local.status == DocumentStatus.COMPLETED
                    and remote.status == DocumentStatus.PROCESSING
                ):
                    logger.info(f"Keeping completed local copy of document {remote.id}")
                    merged.append(local)
                else:
                    merged.append(remote)
            self._documents = merged
        logger.info(f"Merged listing of {len(documents)} documents into store")

    def get(self, document_id: str) -> Optional[Document]:
        with self._lock:
            return next((d for d in self._documents if d.id == document_id), None)

    def list(self) -> List[Document]:
        """Snapshot of all documents in display order."""
        with self._lock:
            return list(self._documents)

    def __len__(self) -> int:
        return len(self._documents)
