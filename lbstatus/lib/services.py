"""Service registry: which services are checked and where they live."""

import logging
from typing import Dict, Optional

from .errors import RegistryError, RegistryParseError, UnknownServiceError

logger = logging.getLogger(__name__)

# Service name (the GitHub repo) -> URL template without the /ping path.
HARDCODED_SERVICES: Dict[str, str] = {
    'player': 'https://$domain.$tld/play',
    'dashboard': 'https://$domain.$tld/org',
    'settings': 'https://$domain.$tld/settings',
    'zodiac': 'https://auth.$domain.$tld',
    'lookback-ultron': 'https://graph.$svc_domain.$tld',
    'nebula': 'https://join.$domain.$tld/session',
    'lookback-participate-web': 'https://participate.$domain.$tld',
    'que': 'https://que.$domain.$tld',
    'umar': 'https://umar-segment.$svc_domain.$tld',
}


class ServiceRegistry:
    """Loads the mapping of service names to URL templates."""

    @classmethod
    def parse(cls, text: str, source: str = "<string>") -> Dict[str, str]:
        """Parse ``service=template`` lines.

        Blank lines and lines starting with ``#`` are skipped. Only the first
        ``=`` splits a line, so templates may contain ``=`` themselves.

        Args:
            text: content of a services file
            source: name used in error messages

        Returns:
            Services in file order

        Raises:
            RegistryParseError: a line is not a ``service=template`` pair
        """
        services = {}
        for line_no, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith('#'):
                continue

            service, sep, url = line.partition('=')
            service, url = service.strip(), url.strip()
            if not sep or not service or not url:
                raise RegistryParseError(source, line_no, raw_line)

            services[service] = url
        return services

    @classmethod
    def load_from_file(cls, file_path: Optional[str]) -> Dict[str, str]:
        """Load services from a file, falling back to the built-in list.

        Args:
            file_path: path of the services file, None when there is no HOME

        Returns:
            The services to check

        Raises:
            RegistryError: the file exists but cannot be read or parsed
        """
        if not file_path:
            return dict(HARDCODED_SERVICES)

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                text = f.read()
        except FileNotFoundError:
            logger.debug(f"No services file at {file_path}, using built-in services")
            return dict(HARDCODED_SERVICES)
        except (OSError, UnicodeDecodeError) as e:
            raise RegistryError(file_path, str(e)) from e

        services = cls.parse(text, file_path)
        logger.info(f"Loaded {len(services)} services from {file_path}")
        return services

    @staticmethod
    def select(services: Dict[str, str], service_name: Optional[str]) -> Dict[str, str]:
        """Narrow the registry to one service, or return all of it.

        Raises:
            UnknownServiceError: ``service_name`` is not registered
        """
        if not service_name:
            return services

        if service_name not in services:
            raise UnknownServiceError(service_name, services.keys())

        return {service_name: services[service_name]}
