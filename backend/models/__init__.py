"""Data models for BookSmart AI client."""
from .document import Document, Bookmark, DocumentStatus, BookmarkCategory
from .view import View

__all__ = [
    "Document",
    "Bookmark",
    "DocumentStatus",
    "BookmarkCategory",
    "View",
]
