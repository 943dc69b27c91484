from collections.abc import Mapping

from indexclient.errors import ValidationError
from indexclient.models import Query, SearchResult
from indexclient.task import Task, wait_for_task
from indexclient.transport import encode, index_path


def _require_object_id(record):
    if not isinstance(record, Mapping):
        raise ValidationError(f"record must be a mapping, got {type(record).__name__}")
    object_id = record.get("objectID")
    if object_id is None or object_id == "":
        raise ValidationError("record is missing objectID")
    return object_id


def _as_query(query, params):
    if query is None or isinstance(query, str):
        return Query(query, **params)
    if isinstance(query, Mapping):
        merged = Query(**query)
        merged.update(params)
        return merged
    raise ValidationError(f"query must be a string or a mapping, got {type(query).__name__}")


class Index:
    """Handle on one named index. Creating it does not touch the network."""

    def __init__(self, client, name):
        self.client = client
        self.name = name

    def __repr__(self):
        return f"Index({self.name!r})"

    def _path(self, *parts):
        return index_path(self.name, *parts)

    def add_object(self, record) -> Task:
        if not isinstance(record, Mapping):
            raise ValidationError(f"record must be a mapping, got {type(record).__name__}")
        return self.client._write(self, "POST", self._path(), dict(record))

    def add_objects(self, records) -> Task:
        operations = []
        for record in records:
            if not isinstance(record, Mapping):
                raise ValidationError(
                    f"record must be a mapping, got {type(record).__name__}"
                )
            operations.append({"action": "addObject", "body": dict(record)})
        if not operations:
            raise ValidationError("add_objects needs at least one record")
        return self.client._write(self, "POST", self._path("batch"), {"requests": operations})

    def save_object(self, record) -> Task:
        object_id = _require_object_id(record)
        return self.client._write(self, "PUT", self._path(encode(object_id)), dict(record))

    def partial_update_object(self, record) -> Task:
        object_id = _require_object_id(record)
        return self.client._write(
            self, "POST", self._path(encode(object_id), "partial"), dict(record)
        )

    def get_object(self, object_id, attributes=None):
        if object_id is None or object_id == "":
            raise ValidationError("object_id is required")
        path = self._path(encode(object_id))
        if attributes:
            path += "?attributes=" + encode(",".join(attributes))
        return self.client._call("GET", path, read=True)

    def delete_object(self, object_id) -> Task:
        if object_id is None or object_id == "":
            raise ValidationError("object_id is required")
        return self.client._write(self, "DELETE", self._path(encode(object_id)))

    def search(self, query=None, **params) -> SearchResult:
        """Run a search; ``None`` or an empty string matches every record."""
        built = _as_query(query, params)
        body = self.client._call(
            "POST",
            self._path("query"),
            {"params": built.build()},
            read=True,
            timeout=self.client.config.search_timeout,
        )
        return SearchResult.from_response(body)

    def clear_index(self) -> Task:
        return self.client._write(self, "POST", self._path("clear"))

    def get_settings(self):
        return self.client._call("GET", self._path("settings"), read=True)

    def set_settings(self, settings) -> Task:
        if not isinstance(settings, Mapping):
            raise ValidationError("settings must be a mapping")
        return self.client._write(self, "PUT", self._path("settings"), dict(settings))

    def get_task_status(self, task_id):
        return self.client._call("GET", self._path("task", task_id), read=True)

    def wait_task(self, task_id, timeout=None):
        return wait_for_task(self, task_id, timeout=timeout)
