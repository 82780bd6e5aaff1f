"""Application service for automobile usage."""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Tuple

from fleet_usage.apps.automobile_usage.application.validation import (
    ensure_end_not_before_start, validate_registration, validate_update
)
from fleet_usage.apps.automobile_usage.domain.exceptions import (
    DriverAlreadyHasUsage, InvalidUsageData, UsageAlreadyClosed, UsageNotFound
)
from fleet_usage.apps.automobile_usage.domain.interfaces import (
    AutomobileLookup, DriverLookup, UsageRepositoryInterface
)
from fleet_usage.apps.automobile_usage.domain.models import NewUsage
from fleet_usage.exceptions import DomainError, failure, success

logger = logging.getLogger(__name__)


class AutomobileUsageService:
    """Registers and closes automobile usages.

    Every entry point returns a result dict, ``{"ok": True, ...}`` or
    ``{"ok": False, "why": ..., "status": ...}``; domain errors never escape.

    The open-usage check and the write that follows it run under a lock per
    driver, so two concurrent registrations for one driver cannot both pass.
    """

    def __init__(self,
                 usage_repository: UsageRepositoryInterface,
                 driver_lookup: DriverLookup,
                 automobile_lookup: AutomobileLookup):
        """
        Initialize the usage service with its dependencies.

        Args:
            usage_repository: Store for usage records
            driver_lookup: Resolves driver ids to snapshots
            automobile_lookup: Resolves automobile ids to snapshots
        """
        self.usage_repository = usage_repository
        self.driver_lookup = driver_lookup
        self.automobile_lookup = automobile_lookup
        # driver id -> (lock, number of tasks holding or waiting for it)
        self._driver_locks: Dict[str, Tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def _locked_driver(self, driver_id: str) -> AsyncIterator[None]:
        """Hold the driver's lock; the entry is dropped once nobody needs it."""
        lock, users = self._driver_locks.get(driver_id, (asyncio.Lock(), 0))
        self._driver_locks[driver_id] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._driver_locks[driver_id]
            if users == 1:
                del self._driver_locks[driver_id]
            else:
                self._driver_locks[driver_id] = (lock, users - 1)

    async def list_all(self) -> Dict[str, Any]:
        """Return every usage, open and closed, in registration order."""
        usages = await self.usage_repository.list_all()
        return success(automobileUsage=usages)

    async def register_usage(self, payload: Any) -> Dict[str, Any]:
        """Open a usage for a driver that holds no open usage."""
        try:
            data = validate_registration(payload)

            driver = await self.driver_lookup.resolve(data.driver_id)
            if driver is None:
                raise InvalidUsageData(f"Unknown driver {data.driver_id}")

            automobile = await self.automobile_lookup.resolve(data.automobile_id)
            if automobile is None:
                raise InvalidUsageData(f"Unknown automobile {data.automobile_id}")

            async with self._locked_driver(driver.id):
                if await self.usage_repository.find_open_by_driver(driver.id):
                    raise DriverAlreadyHasUsage(f"Driver {driver.id} already has an open usage")

                usage = await self.usage_repository.insert(NewUsage(
                    start_date=data.start_date,
                    driver=driver,
                    automobile=automobile,
                    reason=data.reason,
                ))

            logger.info(f"Driver {driver.id} started using automobile {automobile.id} (usage {usage.id})")
            return success(automobileUsage=usage)

        except DomainError as e:
            logger.info(f"Usage registration rejected: {e.why} ({e.message})")
            return failure(e)

    async def update_usage(self, usage_id: str, payload: Any) -> Dict[str, Any]:
        """Close an open usage with an end date no earlier than its start date."""
        try:
            patch = validate_update(payload)

            usage = await self.usage_repository.find_by_id(usage_id)
            if usage is None:
                raise UsageNotFound(f"Usage {usage_id} not found")

            async with self._locked_driver(usage.driver.id):
                # Re-read: another close may have finished while we waited
                usage = await self.usage_repository.find_by_id(usage_id)
                if not usage.is_open():
                    raise UsageAlreadyClosed(f"Usage {usage_id} was closed on {usage.end_date}")

                ensure_end_not_before_start(usage, patch)

                usage = await self.usage_repository.update_by_id(usage_id, patch)

            logger.info(f"Closed usage {usage_id} on {patch.end_date}")
            return success(automobileUsage=usage)

        except DomainError as e:
            logger.info(f"Usage update rejected: {e.why} ({e.message})")
            return failure(e)
