class IndexClientError(Exception):
    """Base class for every error raised by indexclient."""


class TransportError(IndexClientError):
    """No host could be reached, or the connection failed below HTTP."""


class ServiceError(IndexClientError):
    def __init__(self, status, message, body=None):
        super().__init__(f"HTTP {status}: {message}")
        self.status = status
        self.message = message
        self.body = body


class TaskTimeoutError(IndexClientError, TimeoutError):
    def __init__(self, index_name, task_id, timeout):
        super().__init__(
            f"Task {task_id} on '{index_name}' was not published within {timeout}s"
        )
        self.index_name = index_name
        self.task_id = task_id
        self.timeout = timeout


class ValidationError(IndexClientError, ValueError):
    """Local input was rejected before any request was sent."""
