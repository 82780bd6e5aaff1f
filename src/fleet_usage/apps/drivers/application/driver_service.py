"""Application service for the driver registry."""
import logging
from typing import Any, Dict, Optional

from fleet_usage.apps.drivers.domain.exceptions import DriverNotFound, InvalidDriverData
from fleet_usage.apps.drivers.domain.interfaces import DriverRepositoryInterface
from fleet_usage.exceptions import DomainError, failure, success
from fleet_usage.utils.payloads import pick_fields

logger = logging.getLogger(__name__)

DRIVER_FIELDS = ("name",)


class DriverService:
    """Create, read, update and delete drivers with field whitelisting."""

    def __init__(self, driver_repository: DriverRepositoryInterface):
        self.driver_repository = driver_repository

    async def get_all_drivers(self, filters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """List drivers, optionally filtered by exact name."""
        criteria = pick_fields(filters, DRIVER_FIELDS)
        if criteria:
            drivers = await self.driver_repository.filter_by(criteria)
        else:
            drivers = await self.driver_repository.get_all()
        return success(driver=drivers)

    async def get_a_driver(self, driver_id: str) -> Dict[str, Any]:
        try:
            driver = await self.driver_repository.get_by_id(driver_id)
            if driver is None:
                raise DriverNotFound(f"Driver {driver_id} not found")
            return success(driver=driver)
        except DomainError as e:
            return failure(e)

    async def register_driver(self, payload: Any) -> Dict[str, Any]:
        try:
            fields = pick_fields(payload, DRIVER_FIELDS)
            if "name" not in fields:
                raise InvalidDriverData("Driver name is required")

            driver = await self.driver_repository.save(fields["name"])
            logger.info(f"Registered driver {driver.id}")
            return success(driver=driver)
        except DomainError as e:
            logger.info(f"Driver registration rejected: {e.why}")
            return failure(e)

    async def update_driver(self, driver_id: str, payload: Any) -> Dict[str, Any]:
        try:
            changes = pick_fields(payload, DRIVER_FIELDS)
            if not changes:
                raise InvalidDriverData("Nothing to update")

            driver = await self.driver_repository.update(driver_id, changes)
            if driver is None:
                raise DriverNotFound(f"Driver {driver_id} not found")
            return success(driver=driver)
        except DomainError as e:
            return failure(e)

    async def delete_driver(self, driver_id: str) -> Dict[str, Any]:
        """Delete a driver; usages already recorded keep their snapshot."""
        try:
            if not await self.driver_repository.delete(driver_id):
                raise DriverNotFound(f"Driver {driver_id} not found")
            logger.info(f"Deleted driver {driver_id}")
            return success()
        except DomainError as e:
            return failure(e)
