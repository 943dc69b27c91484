import logging

from indexclient.config import Config
from indexclient.errors import ServiceError, ValidationError
from indexclient.index import Index
from indexclient.models import IndexInfo
from indexclient.task import Task
from indexclient.transport import API_VERSION, Transport, index_path

logger = logging.getLogger(__name__)


def _error_message(body):
    if isinstance(body, dict) and body.get("message"):
        return body["message"]
    return str(body) if body else "no response body"


class Client:
    """Account-level operations and the factory for Index handles.

    Every write returns a :class:`~indexclient.task.Task`; call ``wait()`` on
    it before relying on the change::

        client = Client("APP_ID", "API_KEY")
        index = client.get_index("products")
        index.add_object({"objectID": "1", "city": "San Francisco"}).wait()
        client.copy_index("products", "products_backup").wait()
    """

    def __init__(self, app_id=None, api_key=None, config=None, transport=None, **overrides):
        if config is None:
            config = Config(app_id=app_id, api_key=api_key, **overrides)
        self.config = config
        self.transport = transport or Transport(config)

    @classmethod
    def from_config(cls, config, transport=None):
        return cls(config=config, transport=transport)

    @classmethod
    def from_env(cls, **overrides):
        return cls(config=Config.from_env(**overrides))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        self.transport.close()

    def _send(self, method, path, body=None, read=False, timeout=None):
        status, payload = self.transport.request(
            method, path, body, read=read, timeout=timeout
        )
        if 200 <= status < 300:
            return status, payload
        raise ServiceError(status, _error_message(payload), payload)

    def _call(self, method, path, body=None, read=False, timeout=None):
        status, payload = self._send(method, path, body, read=read, timeout=timeout)
        if not isinstance(payload, dict):
            raise ServiceError(status, "unexpected response body", payload)
        return payload

    def _write(self, index, method, path, body=None):
        """Send a write and return the Task the service queued for it."""
        status, payload = self._send(method, path, body)
        if not isinstance(payload, dict):
            raise ServiceError(status, "unexpected response body", payload)
        if payload.get("taskID") is None:
            raise ServiceError(status, "response has no taskID", payload)
        return Task(index, payload["taskID"], payload)

    def get_index(self, name) -> Index:
        return Index(self, name)

    def list_indexes(self):
        """Return every index visible to these credentials, in no particular order."""
        body = self._call("GET", f"/{API_VERSION}/indexes", read=True)
        return [IndexInfo.from_item(item) for item in body.get("items", [])]

    def delete_index(self, name) -> Task:
        """Delete ``name``. A missing index counts as already deleted."""
        index = self.get_index(name)
        try:
            return self._write(index, "DELETE", index_path(name))
        except ServiceError as exc:
            if exc.status != 404:
                raise
        logger.debug("index '%s' does not exist, nothing to delete", name)
        return Task(index, None, {})

    def _operation(self, operation, src, dst):
        if not src or not dst:
            raise ValidationError(f"{operation} needs both a source and a destination index")
        # The task belongs to the source index, which issued it.
        return self._write(
            self.get_index(src),
            "POST",
            index_path(src, "operation"),
            {"operation": operation, "destination": dst},
        )

    def move_index(self, src, dst) -> Task:
        """Rename ``src`` to ``dst``, replacing whatever ``dst`` held."""
        return self._operation("move", src, dst)

    def copy_index(self, src, dst) -> Task:
        """Copy ``src`` into ``dst``, replacing whatever ``dst`` held."""
        return self._operation("copy", src, dst)

    def wait_task(self, index_name, task_id, timeout=None):
        return self.get_index(index_name).wait_task(task_id, timeout=timeout)
