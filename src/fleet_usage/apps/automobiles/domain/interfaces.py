"""Domain interfaces for automobiles."""
from typing import Dict, List, Optional, Protocol

from fleet_usage.apps.automobiles.domain.models import Automobile


class AutomobileRepositoryInterface(Protocol):
    """Interface for automobile storage.

    Field names in ``criteria`` and ``changes`` are model attribute names
    (``license_plate``, ``brand``, ``color``).
    """

    async def get_all(self) -> List[Automobile]:
        ...

    async def get_by_id(self, automobile_id: str) -> Optional[Automobile]:
        """Get an automobile by ID, or None if not found."""
        ...

    async def filter_by(self, criteria: Dict[str, str]) -> List[Automobile]:
        ...

    async def is_plate_available(self, license_plate: str, exclude_id: Optional[str] = None) -> bool:
        """
        Check whether a plate is free.

        Args:
            license_plate: Plate to look for
            exclude_id: Automobile allowed to hold the plate already (for updates)
        """
        ...

    async def save(self, license_plate: str, brand: str, color: str) -> Automobile:
        ...

    async def update(self, automobile_id: str, changes: Dict[str, str]) -> Optional[Automobile]:
        ...

    async def delete(self, automobile_id: str) -> bool:
        ...
