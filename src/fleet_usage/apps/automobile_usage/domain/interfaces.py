"""Domain interfaces for automobile usage."""
from typing import List, Optional, Protocol

from fleet_usage.apps.automobile_usage.domain.models import (
    AutomobileSnapshot, DriverSnapshot, NewUsage, UsagePatch, UsageRecord
)


class UsageRepositoryInterface(Protocol):
    """Interface for the usage record store.

    Records are never removed. Implementations return copies, so mutating a
    returned record never changes what is stored.
    """

    async def list_all(self) -> List[UsageRecord]:
        """
        Get every usage record.

        Returns:
            Records in insertion order
        """
        ...

    async def find_open_by_driver(self, driver_id: str) -> List[UsageRecord]:
        """Get the records of one driver that have no end date."""
        ...

    async def find_by_id(self, usage_id: str) -> Optional[UsageRecord]:
        """
        Get a record by ID.

        Args:
            usage_id: Usage ID to look up

        Returns:
            The record or None if not found
        """
        ...

    async def insert(self, new_usage: NewUsage) -> UsageRecord:
        """
        Store a new record under a freshly generated ID.

        Raises:
            DriverAlreadyHasUsage: if the store itself detects a second open
                usage for the driver
        """
        ...

    async def update_by_id(self, usage_id: str, patch: UsagePatch) -> Optional[UsageRecord]:
        """Merge the patch into a stored record; None if the ID is unknown."""
        ...


class DriverLookup(Protocol):
    """Resolves a driver id to the snapshot embedded in new usages."""

    async def resolve(self, driver_id: str) -> Optional[DriverSnapshot]:
        ...


class AutomobileLookup(Protocol):
    """Resolves an automobile id to the snapshot embedded in new usages."""

    async def resolve(self, automobile_id: str) -> Optional[AutomobileSnapshot]:
        ...
