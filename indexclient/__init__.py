from indexclient.version import __version__

from indexclient.client import Client
from indexclient.config import Config
from indexclient.errors import (
    IndexClientError,
    ServiceError,
    TaskTimeoutError,
    TransportError,
    ValidationError,
)
from indexclient.index import Index
from indexclient.models import IndexInfo, Query, SearchResult
from indexclient.task import Task, wait_all, wait_for_task
from indexclient.testing import temporary_index

__all__ = [
    "__version__",
    "Client",
    "Config",
    "Index",
    "IndexClientError",
    "IndexInfo",
    "Query",
    "SearchResult",
    "ServiceError",
    "Task",
    "TaskTimeoutError",
    "TransportError",
    "ValidationError",
    "temporary_index",
    "wait_all",
    "wait_for_task",
]
