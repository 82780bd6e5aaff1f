"""Driver and automobile lookups backed by the registry repositories."""
from typing import Optional

from fleet_usage.apps.automobile_usage.domain.models import AutomobileSnapshot, DriverSnapshot
from fleet_usage.apps.automobiles.domain.interfaces import AutomobileRepositoryInterface
from fleet_usage.apps.drivers.domain.interfaces import DriverRepositoryInterface


class RepositoryDriverLookup:
    """Snapshots drivers straight from the driver repository."""

    def __init__(self, driver_repository: DriverRepositoryInterface):
        self.driver_repository = driver_repository

    async def resolve(self, driver_id: str) -> Optional[DriverSnapshot]:
        driver = await self.driver_repository.get_by_id(driver_id)
        if driver is None:
            return None
        return DriverSnapshot(id=driver.id, name=driver.name)


class RepositoryAutomobileLookup:
    """Snapshots automobiles straight from the automobile repository."""

    def __init__(self, automobile_repository: AutomobileRepositoryInterface):
        self.automobile_repository = automobile_repository

    async def resolve(self, automobile_id: str) -> Optional[AutomobileSnapshot]:
        automobile = await self.automobile_repository.get_by_id(automobile_id)
        if automobile is None:
            return None
        return AutomobileSnapshot(
            id=automobile.id,
            license_plate=automobile.license_plate,
            brand=automobile.brand,
            color=automobile.color,
        )
