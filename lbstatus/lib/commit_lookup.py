"""Commit metadata lookup through the GitHub CLI (``gh``).

A missing ``gh`` binary just means no enrichment. A ``gh`` that is installed
but fails (not logged in, unknown repo, garbage output) is a setup problem
the user has to fix, so it raises CommitLookupError and ends the run.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .errors import CommitLookupError

logger = logging.getLogger(__name__)

GH_ACCEPT_HEADER = '-HAccept: application/vnd.github.v3.raw+json'


@dataclass(frozen=True)
class CommitInfo:
    message: str
    author_name: str


class CommitLookup:
    """Resolves ``(service, version)`` to a CommitInfo using ``gh api``."""

    def __init__(self, owner: str = "lookback", timeout: float = 15.0, enabled: bool = True):
        self.owner = owner
        self.timeout = timeout
        self.enabled = enabled
        # Commits never change, so a found one is kept for the process lifetime
        self._cache: Dict[Tuple[str, str], CommitInfo] = {}

    def command(self, service_name: str, version: str) -> list:
        return [
            'gh',
            'api',
            GH_ACCEPT_HEADER,
            f'/repos/{self.owner}/{service_name}/commits/{version}',
        ]

    async def lookup(self, service_name: str, version: str) -> Optional[CommitInfo]:
        """Look up the commit behind a deployed version.

        Args:
            service_name: service name, which is also the repository name
            version: git sha (or prefix) reported by the service

        Returns:
            The commit, or None when gh is not installed or lookups are disabled

        Raises:
            CommitLookupError: gh is installed but the lookup failed
        """
        if not self.enabled:
            return None

        key = (service_name, version)
        if key in self._cache:
            return self._cache[key]

        try:
            proc = await asyncio.create_subprocess_exec(
                *self.command(service_name, version),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            # if gh isn't installed, this is a no-op
            logger.debug(f"[{service_name}] gh not found, skipping commit lookup")
            return None
        except OSError as e:
            raise CommitLookupError(service_name, f"Exception when starting gh: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise CommitLookupError(service_name, f"gh did not answer within {self.timeout}s")
        finally:
            # also reached when the poll is cancelled, e.g. Ctrl+C in watch mode
            if proc.returncode is None:
                proc.kill()
                await proc.wait()

        if proc.returncode != 0:
            raise CommitLookupError(service_name, stderr.decode('utf-8', errors='replace').strip())

        commit = self.parse_output(service_name, stdout)
        self._cache[key] = commit
        logger.debug(f"[{service_name}] {version} -> {commit.message.splitlines()[0] if commit.message else ''}")
        return commit

    @staticmethod
    def parse_output(service_name: str, output: bytes) -> CommitInfo:
        """Pick ``commit.message`` and ``commit.author.name`` out of the API response."""
        try:
            commit = json.loads(output.decode('utf-8'))['commit']
            return CommitInfo(
                message=commit['message'],
                author_name=commit['author']['name'],
            )
        except (ValueError, KeyError, TypeError) as e:
            raise CommitLookupError(service_name, f"Unexpected gh output: {e!r}") from e
