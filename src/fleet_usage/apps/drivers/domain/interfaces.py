"""Domain interfaces for drivers."""
from typing import Dict, List, Optional, Protocol

from fleet_usage.apps.drivers.domain.models import Driver


class DriverRepositoryInterface(Protocol):
    """Interface for driver storage."""

    async def get_all(self) -> List[Driver]:
        """Get all drivers in registration order."""
        ...

    async def get_by_id(self, driver_id: str) -> Optional[Driver]:
        """
        Get a driver by ID.

        Args:
            driver_id: Driver ID to look up

        Returns:
            Domain driver model or None if not found
        """
        ...

    async def filter_by(self, criteria: Dict[str, str]) -> List[Driver]:
        """Get the drivers whose fields equal every value in ``criteria``."""
        ...

    async def save(self, name: str) -> Driver:
        """
        Store a new driver.

        Args:
            name: Driver name

        Returns:
            The stored driver with its generated ID
        """
        ...

    async def update(self, driver_id: str, changes: Dict[str, str]) -> Optional[Driver]:
        """Apply whitelisted changes; None if the driver does not exist."""
        ...

    async def delete(self, driver_id: str) -> bool:
        """Remove a driver; False if it did not exist."""
        ...
