"""Command handlers for lbstatus."""

from typing import Callable, Dict, List, Optional

from .formatters import SEPARATOR, format_batch, format_service_list
from .services import ServiceRegistry
from .status_checker import ProbeResult, StatusChecker
from .watcher import WatchDiffer, watch_loop


class CommandHandlers:
    """Handlers for the one-shot, watch and list commands."""

    def __init__(
            self,
            status_checker: StatusChecker,
            services: Dict[str, str],
            out: Callable[[str], None] = print,
            check_interval: float = 2.0,
    ):
        """Set up the command handlers.

        Args:
            status_checker: StatusChecker instance
            services: the full service registry
            out: receives rendered text, one call per batch
            check_interval: seconds between watch cycles
        """
        self.status_checker = status_checker
        self.services = services
        self.out = out
        self.check_interval = check_interval

    async def handle_status(self, environment: str, service_name: Optional[str] = None) -> List[ProbeResult]:
        """Check everything (or one service) once and print the whole batch."""
        todo = ServiceRegistry.select(self.services, service_name)

        results = await self.status_checker.poll_all(todo, environment)
        if results:
            self.out(format_batch(results, environment))
        return results

    async def handle_watch(
            self,
            environment: str,
            service_name: Optional[str] = None,
            cycles: Optional[int] = None,
    ) -> WatchDiffer:
        """Keep checking and print only services whose version changed."""
        todo = ServiceRegistry.select(self.services, service_name)

        def emit(changed: List[ProbeResult], first: bool):
            if not first:
                self.out(SEPARATOR)
            self.out(format_batch(changed, environment))

        return await watch_loop(
            lambda: self.status_checker.poll_all(todo, environment),
            emit,
            interval=self.check_interval,
            cycles=cycles,
        )

    def handle_list(self, bootstrap: bool = False):
        """Print the service registry."""
        if self.services:
            self.out(format_service_list(self.services, config_compatible=bootstrap))
