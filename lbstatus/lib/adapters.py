import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

# First hex token that looks like a (possibly abbreviated) git sha.
GIT_HASH_RE = re.compile(r'\b([a-f0-9]{5,40})\b')


@dataclass
class PingResponse:
    """The parts of a /ping HTTP response the adapters need."""
    status: int
    reason: str
    content_type: str
    body: bytes
    charset: Optional[str] = None

    def text(self) -> str:
        return self.body.decode(self.charset or 'utf-8', errors='replace')


class BaseAdapter(ABC):
    """Abstract base class for /ping body adapters."""

    @abstractmethod
    def parse(self, service_name: str, response: PingResponse) -> Dict[str, Any]:
        """
        Extract version metadata from a successful /ping response.

        Args:
            service_name: Name of the service
            response: The HTTP response, already known to be a 200

        Returns:
            Dict with the keys 'version' (str or None) and 'uptime' (int or None).
        """
        pass


class JsonAdapter(BaseAdapter):
    """Adapter for services answering with a JSON document."""

    def parse(self, service_name: str, response: PingResponse) -> Dict[str, Any]:
        # Malformed JSON raises here and becomes the service's error result
        data = json.loads(response.text())
        if not isinstance(data, dict):
            return {'version': None, 'uptime': None}

        version = data.get('version')
        uptime = data.get('uptime')

        return {
            'version': str(version) if version not in (None, '') else None,
            # bool is an int subclass, but "uptime": true is not a duration
            'uptime': int(uptime) if isinstance(uptime, (int, float)) and not isinstance(uptime, bool) else None,
        }


class PlainTextAdapter(BaseAdapter):
    """Adapter for plain text (or unknown) bodies: the first hex token is the version."""

    def parse(self, service_name: str, response: PingResponse) -> Dict[str, Any]:
        match = GIT_HASH_RE.search(response.text())
        return {
            'version': match.group(0) if match else None,
            'uptime': None,
        }


ADAPTERS: Dict[str, BaseAdapter] = {
    'application/json': JsonAdapter(),
}

DEFAULT_ADAPTER = PlainTextAdapter()


def get_adapter(content_type: Optional[str]) -> BaseAdapter:
    """Pick the adapter for a content type, ignoring any charset parameter."""
    mime = (content_type or 'text/plain').split(';')[0].strip().lower()
    return ADAPTERS.get(mime, DEFAULT_ADAPTER)
