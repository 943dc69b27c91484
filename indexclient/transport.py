"""HTTP transport for the search service.

Sends JSON requests with the application credentials attached and returns
``(status_code, parsed_body)``. Connectivity failures and 5xx answers move on
to the next host; once every host failed a ``TransportError`` is raised (or
the last 5xx response is returned).
"""

import json
import logging
from urllib.parse import quote

import requests

from indexclient.errors import TransportError
from indexclient.version import __version__

logger = logging.getLogger(__name__)

API_VERSION = "1"


def encode(segment) -> str:
    """Percent-encode one path segment, including ``/``, ``?`` and non-ASCII."""
    return quote(str(segment), safe="")


def index_path(index_name, *parts) -> str:
    segments = [encode(index_name)] + [str(part) for part in parts]
    return f"/{API_VERSION}/indexes/" + "/".join(segments)


def default_hosts(app_id, read):
    primary = f"https://{app_id}-dsn.algolia.net" if read else f"https://{app_id}.algolia.net"
    return [primary] + [f"https://{app_id}-{i}.algolianet.com" for i in (1, 2, 3)]


class Transport:
    def __init__(self, config, session=None):
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "X-Algolia-Application-Id": config.app_id,
                "X-Algolia-API-Key": config.api_key,
                "Content-Type": "application/json; charset=utf-8",
                "User-Agent": f"indexclient/{__version__}",
            }
        )
        if config.base_url:
            base = config.base_url.rstrip("/")
            self.read_hosts = [base]
            self.write_hosts = [base]
        else:
            self.read_hosts = default_hosts(config.app_id, read=True)
            self.write_hosts = default_hosts(config.app_id, read=False)

    def request(self, method, path, body=None, read=False, timeout=None):
        hosts = self.read_hosts if read else self.write_hosts
        read_timeout = timeout or self.config.read_timeout
        data = json.dumps(body) if body is not None else None
        last_error = None
        last_response = None

        for host in hosts:
            try:
                res = self.session.request(
                    method,
                    f"{host}{path}",
                    data=data,
                    timeout=(self.config.connect_timeout, read_timeout),
                )
            except requests.RequestException as exc:
                logger.warning("%s %s on %s failed: %s", method, path, host, exc)
                last_error = exc
                continue

            logger.debug("%s %s%s -> %s", method, host, path, res.status_code)
            if res.status_code >= 500:
                logger.warning(
                    "%s %s on %s answered %s, trying next host",
                    method,
                    path,
                    host,
                    res.status_code,
                )
                last_response = res
                continue
            return res.status_code, _parse(res)

        if last_response is not None:
            return last_response.status_code, _parse(last_response)
        raise TransportError(
            f"{method} {path} failed on all hosts: {last_error}"
        ) from last_error

    def close(self):
        self.session.close()


def _parse(res):
    if not res.content:
        return None
    try:
        return res.json()
    except ValueError:
        return res.text
