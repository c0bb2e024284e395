"""View state models."""
from enum import Enum


class View(str, Enum):
    """Screens the client can show."""

    DOCUMENTS = "documents"
    UPLOAD = "upload"
    DETAIL = "detail"
