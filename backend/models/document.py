"""Document and bookmark data models."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class DocumentStatus(str, Enum):
    """Lifecycle states of a document as seen by the client."""

    PROCESSING = "processing"  # Uploaded, bookmarks not yet received
    COMPLETED = "completed"  # Bookmarks received
    FAILED = "failed"  # Processing call failed; can be retried


class BookmarkCategory(str, Enum):
    """Closed set of bookmark categories produced by the backend."""

    MEDICAL_RADIOLOGY = "medical_radiology"
    PHOTOS = "photos"
    ESTIMATE = "estimate"
    OTHER = "other"

    @classmethod
    def resolve(cls, value: str) -> "BookmarkCategory":
        """Map a raw category string to a known category, falling back to OTHER."""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Bookmark:
    """One detected point of interest within a processed document."""
    page: int
    label: str
    category: str  # Raw value from the backend; see BookmarkCategory.resolve

    @property
    def display_category(self) -> BookmarkCategory:
        return BookmarkCategory.resolve(self.category)


@dataclass
class Document:
    """Client-side record of one uploaded file and its processing outcome."""
    id: str
    filename: str
    date: str
    status: DocumentStatus = DocumentStatus.PROCESSING
    bookmarks: List[Bookmark] = field(default_factory=list)
    stored_filename: Optional[str] = None
    error: Optional[str] = None  # Set when status is FAILED
