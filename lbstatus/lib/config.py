"""Runtime settings for the status watcher, read from ``LBSTATUS_*`` variables."""

import os
from typing import Any, Mapping, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import SettingsLoadError

SERVICES_FILENAME = ".lbstatus"


def default_services_path() -> Optional[str]:
    """Return ``$HOME/.lbstatus``, or None when HOME is not set."""
    home = os.environ.get("HOME")
    if not home:
        return None
    return os.path.join(home, SERVICES_FILENAME)


class WatcherConfig(BaseSettings):
    """Settings shared by the checker, the commit lookup and the watch loop.

    Every field can be set from the environment with the ``LBSTATUS_`` prefix,
    e.g. ``request_timeout`` reads ``LBSTATUS_REQUEST_TIMEOUT``.

    Attributes:
        check_interval: Seconds between watch cycles.
        request_timeout: Total timeout of one /ping request in seconds.
        lookup_timeout: Seconds a gh commit lookup may take.
        github_owner: GitHub organisation holding the service repositories.
        enrich_commits: Whether to look commits up with gh at all.
        services_path: Services file, None to use the built-in services.
    """

    model_config = SettingsConfigDict(
        env_prefix="LBSTATUS_",
        extra="ignore",
        case_sensitive=False,
    )

    check_interval: float = Field(default=2.0, gt=0)
    request_timeout: float = Field(default=10.0, gt=0)
    lookup_timeout: float = Field(default=15.0, gt=0)
    github_owner: str = Field(default="lookback", min_length=1)
    enrich_commits: bool = Field(default=True)
    services_path: Optional[str] = Field(default_factory=default_services_path)


def config_load_settings(overrides: Optional[Mapping[str, Any]] = None) -> WatcherConfig:
    """Load settings from the environment, with explicit overrides on top.

    Args:
        overrides: values that win over the environment, e.g. from CLI flags

    Returns:
        Validated settings

    Raises:
        SettingsLoadError: a variable or override has an invalid value
    """
    try:
        return WatcherConfig(**dict(overrides or {}))
    except ValidationError as error:
        raise SettingsLoadError(
            f"Invalid lbstatus settings. Check the LBSTATUS_* environment variables. Details: {error}"
        ) from error
