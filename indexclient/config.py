import os
from dataclasses import dataclass, field, replace
from typing import Optional

from indexclient.errors import ValidationError

DEFAULT_CONNECT_TIMEOUT = 2.0
DEFAULT_READ_TIMEOUT = 30.0
DEFAULT_SEARCH_TIMEOUT = 5.0
DEFAULT_WAIT_TIMEOUT = 100.0
DEFAULT_POLL_INTERVAL = 0.1
DEFAULT_MAX_POLL_INTERVAL = 5.0


def _getenv(*names):
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


def _float_env(name, default):
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Config:
    app_id: str
    api_key: str = field(repr=False)
    base_url: Optional[str] = None
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    search_timeout: float = DEFAULT_SEARCH_TIMEOUT
    wait_timeout: float = DEFAULT_WAIT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_poll_interval: float = DEFAULT_MAX_POLL_INTERVAL

    def __post_init__(self):
        if not self.app_id:
            raise ValidationError("app_id is required")
        if not self.api_key:
            raise ValidationError("api_key is required")
        if self.poll_interval <= 0:
            raise ValidationError("poll_interval must be > 0")
        if self.max_poll_interval < self.poll_interval:
            raise ValidationError("max_poll_interval must be >= poll_interval")
        if self.wait_timeout <= 0:
            raise ValidationError("wait_timeout must be > 0")

    @classmethod
    def from_env(cls, **overrides) -> "Config":
        """Build a Config from SEARCH_* (or ALGOLIA_*) environment variables."""
        app_id = _getenv("SEARCH_APPLICATION_ID", "ALGOLIA_APPLICATION_ID")
        api_key = _getenv("SEARCH_API_KEY", "ALGOLIA_API_KEY")
        if not app_id or not api_key:
            raise ValidationError(
                "SEARCH_APPLICATION_ID and SEARCH_API_KEY must be set in the environment"
            )
        config = cls(
            app_id=app_id,
            api_key=api_key,
            base_url=os.getenv("BASE_URL") or None,
            connect_timeout=_float_env(
                "SEARCH_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT
            ),
            read_timeout=_float_env("SEARCH_READ_TIMEOUT", DEFAULT_READ_TIMEOUT),
            wait_timeout=_float_env("SEARCH_WAIT_TIMEOUT", DEFAULT_WAIT_TIMEOUT),
        )
        return replace(config, **overrides) if overrides else config
