import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

import aiohttp

from .adapters import PingResponse, get_adapter
from .commit_lookup import CommitInfo, CommitLookup
from .errors import CommitLookupError
from .urls import expand

logger = logging.getLogger(__name__)


@dataclass
class ProbeSuccess:
    service: str
    git_hash: Optional[str] = None
    uptime: Optional[int] = None
    commit: Optional[CommitInfo] = None


@dataclass
class ProbeError:
    service: str
    message: str


ProbeResult = Union[ProbeSuccess, ProbeError]


class StatusAPIClient:
    """HTTP client for the services' /ping endpoints."""

    def __init__(self, timeout: float = 10.0, trust_env: bool = True):
        self.timeout = timeout
        self.trust_env = trust_env
        self.session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the client session."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(trust_env=self.trust_env)
        return self.session

    async def close(self):
        """Close the client session."""
        if self.session and not self.session.closed:
            await self.session.close()

    async def fetch_ping(self, url: str) -> PingResponse:
        """GET a ping URL and read the whole body. Network errors propagate."""
        session = await self._get_session()
        async with session.get(url, timeout=aiohttp.ClientTimeout(total=self.timeout)) as response:
            body = await response.read()
            return PingResponse(
                status=response.status,
                reason=response.reason or '',
                content_type=response.headers.get('Content-Type', 'text/plain'),
                body=body,
                charset=response.charset,
            )


class StatusChecker:
    """Probes services and classifies each outcome as success or error."""

    def __init__(self, api_client: Optional[StatusAPIClient] = None,
                 commit_lookup: Optional[CommitLookup] = None):
        self.api_client = api_client or StatusAPIClient()
        self.commit_lookup = commit_lookup or CommitLookup()

    async def close(self):
        """Clean up resources."""
        await self.api_client.close()

    async def fetch_status(self, service_name: str, url: str, environment: str) -> ProbeResult:
        """Check one service.

        Args:
            service_name: Service name
            url: URL template from the registry
            environment: Environment the template is expanded for

        Returns:
            ProbeSuccess, or ProbeError for any network, HTTP or parse failure

        Raises:
            CommitLookupError: gh is installed but could not look the commit up
        """
        ping_url = expand(url, environment)
        try:
            response = await self.api_client.fetch_ping(ping_url)

            if response.status != 200:
                logger.debug(f"[{service_name}] {ping_url} -> HTTP {response.status}")
                return ProbeError(
                    service=service_name,
                    message=f"Service responded with status: {response.status} {response.reason}",
                )

            info = get_adapter(response.content_type).parse(service_name, response)
            version = info['version']

            commit = await self.commit_lookup.lookup(service_name, version) if version else None

            logger.debug(f"[{service_name}] {ping_url} -> version={version}, uptime={info['uptime']}")
            return ProbeSuccess(
                service=service_name,
                git_hash=version,
                uptime=info['uptime'],
                commit=commit,
            )
        except CommitLookupError:
            # a broken gh setup ends the run instead of becoming this service's error
            raise
        except Exception as e:
            logger.debug(f"[{service_name}] {ping_url} failed: {e!r}")
            return ProbeError(service=service_name, message=_error_message(e))

    async def poll_all(self, services: Dict[str, str], environment: str) -> List[ProbeResult]:
        """Check all services concurrently and wait for every one of them.

        Returns:
            One result per service, in registry order
        """
        service_names = list(services.keys())
        tasks = [self.fetch_status(name, services[name], environment) for name in service_names]

        results = await asyncio.gather(*tasks, return_exceptions=True)

        collected: List[ProbeResult] = []
        for name, result in zip(service_names, results):
            if isinstance(result, CommitLookupError):
                raise result
            if isinstance(result, BaseException):
                # fetch_status handles its own errors, but just in case
                logger.warning(f"[{name}] unexpected error while checking: {result!r}")
                collected.append(ProbeError(service=name, message=_error_message(result)))
                continue
            collected.append(result)
        return collected


def _error_message(e: BaseException) -> str:
    # asyncio.TimeoutError and friends stringify to ''
    return str(e) or e.__class__.__name__
