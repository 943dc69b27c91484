import copy
import itertools
from urllib.parse import parse_qs, unquote

import pytest

from indexclient import Client


class FakeService:
    """In-memory stand-in for the search service, plugged in as a Transport.

    Writes are queued as tasks and only applied once their task is polled
    ``polls_to_publish`` times, so reads before ``wait()`` see the old state.
    """

    def __init__(self, polls_to_publish=2):
        self.polls_to_publish = polls_to_publish
        self.indexes = {}
        self.tasks = {}
        self.calls = []
        self.failures = []
        self.closed = False
        self._task_ids = itertools.count(100)
        self._object_ids = itertools.count(1)

    def fail_next(self, status, message="injected failure"):
        self.respond_next(status, {"message": message, "status": status})

    def respond_next(self, status, body):
        self.failures.append((status, body))

    def close(self):
        self.closed = True

    # -- transport interface

    def request(self, method, path, body=None, read=False, timeout=None):
        self.calls.append((method, path, copy.deepcopy(body)))
        if self.failures:
            return self.failures.pop(0)

        path, _, query_string = path.partition("?")
        segments = [unquote(segment) for segment in path.strip("/").split("/")]
        assert segments[:2] == ["1", "indexes"], path
        segments = segments[2:]

        if not segments:
            return 200, self._list()
        name, rest = segments[0], segments[1:]
        handler = getattr(self, "_" + self._route(method, rest))
        return handler(name, rest, body, parse_qs(query_string))

    @staticmethod
    def _route(method, rest):
        if not rest:
            return {"POST": "add", "DELETE": "delete_index"}[method]
        head = rest[0]
        if head == "task" and method == "GET":
            return "task_status"
        if head in ("query", "batch", "clear", "operation") and method == "POST":
            return head
        if head == "settings":
            return {"GET": "get_settings", "PUT": "set_settings"}[method]
        if len(rest) == 2 and rest[1] == "partial":
            return "partial"
        return {"GET": "get_object", "PUT": "save", "DELETE": "delete_object"}[method]

    # -- helpers

    def _enqueue(self, name, apply, **extra):
        task_id = next(self._task_ids)
        self.tasks[task_id] = {"index": name, "polls": 0, "apply": apply, "done": False}
        return 200, dict(taskID=task_id, **extra)

    def _records(self, name):
        return self.indexes.setdefault(name, {"records": {}, "settings": {}})["records"]

    def _missing(self, name):
        return 404, {"message": f"Index {name} does not exist", "status": 404}

    # -- handlers

    def _list(self):
        items = [
            {"name": name, "entries": len(data["records"]), "dataSize": 0}
            for name, data in self.indexes.items()
        ]
        return {"items": items, "nbPages": 1}

    def _task_status(self, name, rest, body, params):
        task = self.tasks.get(int(rest[1]))
        if task is None or task["index"] != name:
            return 404, {"message": "Task does not exist", "status": 404}
        task["polls"] += 1
        if not task["done"] and task["polls"] >= self.polls_to_publish:
            task["apply"]()
            task["done"] = True
        return 200, {"status": "published" if task["done"] else "notPublished", "pendingTask": not task["done"]}

    def _add(self, name, rest, body, params):
        record = dict(body)
        record.setdefault("objectID", f"auto-{next(self._object_ids)}")

        def apply():
            self._records(name)[record["objectID"]] = record

        return self._enqueue(name, apply, objectID=record["objectID"], createdAt="now")

    def _batch(self, name, rest, body, params):
        records = []
        for request in body["requests"]:
            record = dict(request["body"])
            record.setdefault("objectID", f"auto-{next(self._object_ids)}")
            records.append(record)

        def apply():
            for record in records:
                self._records(name)[record["objectID"]] = record

        return self._enqueue(name, apply, objectIDs=[r["objectID"] for r in records])

    def _save(self, name, rest, body, params):
        record = dict(body)

        def apply():
            self._records(name)[rest[0]] = record

        return self._enqueue(name, apply, objectID=rest[0], updatedAt="now")

    def _partial(self, name, rest, body, params):
        def apply():
            self._records(name).setdefault(rest[0], {"objectID": rest[0]}).update(body)

        return self._enqueue(name, apply, objectID=rest[0], updatedAt="now")

    def _get_object(self, name, rest, body, params):
        record = self.indexes.get(name, {}).get("records", {}).get(rest[0])
        if record is None:
            return 404, {"message": "ObjectID does not exist", "status": 404}
        if "attributes" in params:
            wanted = params["attributes"][0].split(",")
            record = {k: v for k, v in record.items() if k in wanted or k == "objectID"}
        return 200, record

    def _delete_object(self, name, rest, body, params):
        def apply():
            self._records(name).pop(rest[0], None)

        return self._enqueue(name, apply, deletedAt="now")

    def _delete_index(self, name, rest, body, params):
        if name not in self.indexes:
            return self._missing(name)

        def apply():
            self.indexes.pop(name, None)

        return self._enqueue(name, apply, deletedAt="now")

    def _query(self, name, rest, body, params):
        if name not in self.indexes:
            return self._missing(name)
        search = parse_qs(body["params"])
        text = search.get("query", [""])[0].lower()
        hits = [
            record
            for record in self.indexes[name]["records"].values()
            if not text
            or any(text in str(value).lower() for value in record.values())
        ]
        return 200, {"hits": hits, "nbHits": len(hits), "params": body["params"]}

    def _clear(self, name, rest, body, params):
        def apply():
            self._records(name).clear()

        return self._enqueue(name, apply, updatedAt="now")

    def _get_settings(self, name, rest, body, params):
        if name not in self.indexes:
            return self._missing(name)
        return 200, dict(self.indexes[name]["settings"])

    def _set_settings(self, name, rest, body, params):
        def apply():
            self._records(name)
            self.indexes[name]["settings"].update(body)

        return self._enqueue(name, apply, updatedAt="now")

    def _operation(self, name, rest, body, params):
        if name not in self.indexes:
            return self._missing(name)
        destination = body["destination"]

        def apply():
            if body["operation"] == "move":
                self.indexes[destination] = self.indexes.pop(name)
            else:
                self.indexes[destination] = copy.deepcopy(self.indexes[name])

        return self._enqueue(name, apply, updatedAt="now")


@pytest.fixture
def service():
    return FakeService()


@pytest.fixture
def client(service):
    return Client(
        "test-app",
        "test-key",
        transport=service,
        poll_interval=0.001,
        max_poll_interval=0.004,
        wait_timeout=2.0,
    )


@pytest.fixture
def index(client):
    return client.get_index("algol?à-python")
