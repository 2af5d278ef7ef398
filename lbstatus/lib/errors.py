"""Errors that abort the whole lbstatus process.

Per-service probe failures never show up here; they are folded into a
``ProbeError`` result by the status checker. Everything below is a
configuration or registry level problem and ends the run.
"""

from typing import Iterable


class LbStatusError(Exception):
    """Base class for fatal lbstatus errors."""


class UnknownServiceError(LbStatusError):
    """Raised when a requested service is not in the registry."""

    def __init__(self, service: str, known: Iterable[str]):
        self.service = service
        self.known = list(known)
        listing = "\n".join(f"* {name}" for name in self.known)
        super().__init__(f'"{service}" isn\'t a service we know. Currently got:\n\n{listing}')


class RegistryError(LbStatusError):
    """Raised when the services file exists but cannot be read."""

    def __init__(self, path: str, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(f"Error when reading {path}: {detail}")


class RegistryParseError(RegistryError):
    """Raised for a services file line that is not ``service=template``."""

    def __init__(self, path: str, line_no: int, line: str):
        self.line_no = line_no
        self.line = line
        super().__init__(path, f"line {line_no} is not a service=url pair: {line!r}")


class CommitLookupError(LbStatusError):
    """Raised when the gh CLI is installed but the commit lookup fails."""

    def __init__(self, service: str, detail: str):
        self.service = service
        self.detail = detail
        super().__init__(f"Could not fetch commit via gh for service: {service}\n{detail}")


class SettingsLoadError(LbStatusError):
    """Raised when the ``LBSTATUS_*`` settings cannot be validated."""
