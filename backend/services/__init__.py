"""Services for BookSmart AI client."""
from .api_client import BookSmartClient, ApiError, ApiClientError
from .document_store import DocumentStore
from .view_coordinator import ViewCoordinator
from .scheduler import TaskScheduler, ScheduledTask
from .lifecycle import DocumentLifecycle

__all__ = ['BookSmartClient', 'ApiError', 'ApiClientError', 'DocumentStore', 'ViewCoordinator', 'TaskScheduler', 'ScheduledTask', 'DocumentLifecycle']
