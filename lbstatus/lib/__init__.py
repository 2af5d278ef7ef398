"""Service status polling library."""

from .commands import CommandHandlers
from .commit_lookup import CommitInfo, CommitLookup
from .config import WatcherConfig, config_load_settings
from .errors import (
    CommitLookupError,
    LbStatusError,
    RegistryError,
    RegistryParseError,
    SettingsLoadError,
    UnknownServiceError
)
from .formatters import (
    format_batch,
    format_result,
    format_service_list,
    human_time_of
)
from .services import HARDCODED_SERVICES, ServiceRegistry
from .status_checker import ProbeError, ProbeResult, ProbeSuccess, StatusAPIClient, StatusChecker
from .urls import expand
from .watcher import WatchDiffer, watch_loop

__all__ = [
    'CommandHandlers',
    'CommitInfo',
    'CommitLookup',
    'CommitLookupError',
    'HARDCODED_SERVICES',
    'LbStatusError',
    'ProbeError',
    'ProbeResult',
    'ProbeSuccess',
    'RegistryError',
    'RegistryParseError',
    'ServiceRegistry',
    'SettingsLoadError',
    'StatusAPIClient',
    'StatusChecker',
    'UnknownServiceError',
    'WatchDiffer',
    'WatcherConfig',
    'config_load_settings',
    'expand',
    'format_batch',
    'format_result',
    'format_service_list',
    'human_time_of',
    'watch_loop',
]
