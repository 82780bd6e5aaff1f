import asyncio
import logging
import signal
from pathlib import Path
from typing import Optional, Union

from fleet_usage.api.server import ApiServer
from fleet_usage.apps.automobile_usage.application.usage_service import AutomobileUsageService
from fleet_usage.apps.automobile_usage.domain.interfaces import (
    AutomobileLookup, DriverLookup, UsageRepositoryInterface
)
from fleet_usage.apps.automobile_usage.infrastructure.lookups import (
    RepositoryAutomobileLookup, RepositoryDriverLookup
)
from fleet_usage.apps.automobile_usage.infrastructure.repositories import (
    InMemoryUsageRepository, SqliteUsageRepository
)
from fleet_usage.apps.automobiles.application.automobile_service import AutomobileService
from fleet_usage.apps.automobiles.domain.interfaces import AutomobileRepositoryInterface
from fleet_usage.apps.automobiles.infrastructure.repositories import (
    InMemoryAutomobileRepository, SqliteAutomobileRepository
)
from fleet_usage.apps.drivers.application.driver_service import DriverService
from fleet_usage.apps.drivers.domain.interfaces import DriverRepositoryInterface
from fleet_usage.apps.drivers.infrastructure.repositories import (
    InMemoryDriverRepository, SqliteDriverRepository
)
from fleet_usage.config import config
from fleet_usage.db.sqlite import Database
from fleet_usage.di import Container

logger = logging.getLogger(__name__)


class FleetApp:
    """Main application class: owns the storage, the services and the API server."""

    def __init__(self, backend: Optional[str] = None, db_path: Optional[Union[str, Path]] = None):
        """Initialize the application and wire its components."""
        self.backend = backend or config.storage.backend
        if self.backend not in ("memory", "sqlite"):
            raise ValueError(f"Unknown storage backend: {self.backend}")

        self.container = Container()
        self.db: Optional[Database] = None

        # Control flags
        self._running = False
        self._stop_event = asyncio.Event()

        self._register_storage(db_path)
        self._register_services()

    def _register_storage(self, db_path: Optional[Union[str, Path]]) -> None:
        """Register the repositories of the selected backend."""
        if self.backend == "sqlite":
            self.db = Database(db_path)
            self.container.register(Database, self.db)
            self.container.register(DriverRepositoryInterface, SqliteDriverRepository(self.db))
            self.container.register(AutomobileRepositoryInterface, SqliteAutomobileRepository(self.db))
            self.container.register(UsageRepositoryInterface, SqliteUsageRepository(self.db))
        else:
            self.container.register(DriverRepositoryInterface, InMemoryDriverRepository())
            self.container.register(AutomobileRepositoryInterface, InMemoryAutomobileRepository())
            self.container.register(UsageRepositoryInterface, InMemoryUsageRepository())

        logger.debug(f"Using {self.backend} storage")

    def _register_services(self) -> None:
        """Register lookups, application services and the API server."""
        inject = self.container.inject
        self.container.register_factory(DriverLookup, inject(RepositoryDriverLookup))
        self.container.register_factory(AutomobileLookup, inject(RepositoryAutomobileLookup))
        self.container.register_factory(DriverService, inject(DriverService))
        self.container.register_factory(AutomobileService, inject(AutomobileService))
        self.container.register_factory(AutomobileUsageService, inject(AutomobileUsageService))
        self.container.register_factory(ApiServer, inject(ApiServer))

    @property
    def usage_service(self) -> AutomobileUsageService:
        return self.container.resolve(AutomobileUsageService)

    @property
    def api_server(self) -> ApiServer:
        return self.container.resolve(ApiServer)

    async def start(self) -> None:
        """Start the application."""
        if self._running:
            logger.warning("Fleet application is already running")
            return

        logger.info("Starting fleet application")
        self._running = True
        self._stop_event.clear()

        if self.db:
            await self.db.initialize()

        await self.api_server.start()

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: asyncio.create_task(self.stop(s)))

        logger.info("Fleet application started")

    async def stop(self, sig=None) -> None:
        """Stop the application."""
        if not self._running:
            return

        if sig:
            logger.info(f"Received signal {sig.name}, shutting down")
        else:
            logger.info("Shutting down fleet application")

        self._running = False
        self._stop_event.set()

        loop = asyncio.get_running_loop()
        for handled in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(handled)

        await self.api_server.stop()

        if self.db:
            await self.db.close()

        logger.info("Fleet application stopped")

    def is_running(self) -> bool:
        """Check if the application is running."""
        return self._running

    async def wait_for_stop(self) -> None:
        """Wait for the application to stop."""
        await self._stop_event.wait()
