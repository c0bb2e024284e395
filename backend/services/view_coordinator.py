"""View coordinator: which screen is visible and which document is current."""
import logging
from typing import Optional, Union

from models.document import Document, DocumentStatus
from models.view import View
from services.document_store import DocumentStore

logger = logging.getLogger(__name__)


class ViewCoordinator:
    """
    Small state machine over the documents, upload and detail views.

    Transitions:
        documents -> upload      nav click
        upload -> documents      nav click, or a successful upload
        documents -> detail      View Details on a completed document
        detail -> documents      Back, or nav click
    Invalid requests leave the state unchanged.
    """

    # Views reachable from the navigation bar
    NAV_TARGETS = (View.DOCUMENTS, View.UPLOAD)

    def __init__(self):
        self.current_view: View = View.DOCUMENTS
        self.current_document_id: Optional[str] = None

    def navigate(self, target: Union[View, str]) -> bool:
        """
        Handle a navigation bar click.

        Returns:
            True if the view changed to the target
        """
        try:
            view = View(target)
        except ValueError:
            logger.warning(f"Ignoring navigation to unknown view: {target!r}")
            return False

        if view not in self.NAV_TARGETS:
            logger.warning(f"Ignoring navigation to {view.value}: not a nav target")
            return False

        self.current_view = view
        return True

    def open_detail(self, document_id: str, store: DocumentStore) -> bool:
        """
        Show the detail view for a completed document.

        Returns:
            True if the detail view was opened
        """
        document = store.get(document_id)
        if document is None or document.status != DocumentStatus.COMPLETED:
            logger.warning(f"Detail view not available for document {document_id}")
            return False

        self.current_document_id = document_id
        self.current_view = View.DETAIL
        return True

    def back(self) -> None:
        """Return from the detail view to the document list."""
        if self.current_view == View.DETAIL:
            self.current_view = View.DOCUMENTS

    def upload_finished(self) -> None:
        """Return to the document list after a successful upload."""
        self.current_view = View.DOCUMENTS

    def current_document(self, store: DocumentStore) -> Optional[Document]:
        """The document to show in the detail view, or None if there is nothing to show."""
        if self.current_view != View.DETAIL or self.current_document_id is None:
            return None
        document = store.get(self.current_document_id)
        if document is None or document.status != DocumentStatus.COMPLETED:
            return None
        return document
