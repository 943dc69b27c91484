import json
from dataclasses import dataclass, field
from typing import Any, Dict, List
from urllib.parse import urlencode

PUBLISHED = "published"
NOT_PUBLISHED = "notPublished"


def _param_value(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


class Query(dict):
    """Search parameters. An empty Query matches every record."""

    def __init__(self, query=None, **params):
        super().__init__(params)
        if query is not None:
            self["query"] = query

    def build(self) -> str:
        return urlencode(
            [(key, _param_value(value)) for key, value in self.items() if value is not None]
        )


@dataclass
class SearchResult:
    nb_hits: int
    hits: List[Dict[str, Any]]
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_response(cls, body):
        return cls(nb_hits=body.get("nbHits", 0), hits=body.get("hits", []), raw=body)


@dataclass
class IndexInfo:
    name: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_item(cls, item):
        metadata = {key: value for key, value in item.items() if key != "name"}
        return cls(name=item["name"], metadata=metadata)
