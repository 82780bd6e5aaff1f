"""Application service for the automobile registry."""
import logging
from typing import Any, Dict, Optional

from fleet_usage.apps.automobiles.domain.exceptions import (
    AutomobileNotFound, InvalidAutomobileData, LicensePlateTaken
)
from fleet_usage.apps.automobiles.domain.interfaces import AutomobileRepositoryInterface
from fleet_usage.exceptions import DomainError, failure, success
from fleet_usage.utils.payloads import pick_fields

logger = logging.getLogger(__name__)

# Payload key -> model attribute
AUTOMOBILE_FIELDS = {
    "licensePlate": "license_plate",
    "brand": "brand",
    "color": "color",
}
FILTER_FIELDS = ("brand", "color")


def _to_attributes(fields: Dict[str, str]) -> Dict[str, str]:
    return {AUTOMOBILE_FIELDS[key]: value for key, value in fields.items()}


class AutomobileService:
    """Create, read, update and delete automobiles with field whitelisting."""

    def __init__(self, automobile_repository: AutomobileRepositoryInterface):
        self.automobile_repository = automobile_repository

    async def get_all_automobiles(self, filters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """List automobiles, optionally filtered by exact brand and/or color."""
        criteria = _to_attributes(pick_fields(filters, FILTER_FIELDS))
        if criteria:
            automobiles = await self.automobile_repository.filter_by(criteria)
        else:
            automobiles = await self.automobile_repository.get_all()
        return success(automobile=automobiles)

    async def get_an_automobile(self, automobile_id: str) -> Dict[str, Any]:
        try:
            automobile = await self.automobile_repository.get_by_id(automobile_id)
            if automobile is None:
                raise AutomobileNotFound(f"Automobile {automobile_id} not found")
            return success(automobile=automobile)
        except DomainError as e:
            return failure(e)

    async def register_automobile(self, payload: Any) -> Dict[str, Any]:
        try:
            fields = pick_fields(payload, AUTOMOBILE_FIELDS)
            missing = [key for key in AUTOMOBILE_FIELDS if key not in fields]
            if missing:
                raise InvalidAutomobileData(f"Missing fields: {', '.join(missing)}")

            if not await self.automobile_repository.is_plate_available(fields["licensePlate"]):
                raise LicensePlateTaken(f"License plate {fields['licensePlate']} already registered")

            automobile = await self.automobile_repository.save(
                fields["licensePlate"], fields["brand"], fields["color"]
            )
            logger.info(f"Registered automobile {automobile.id} ({automobile.license_plate})")
            return success(automobile=automobile)
        except DomainError as e:
            logger.info(f"Automobile registration rejected: {e.why}")
            return failure(e)

    async def update_automobile(self, automobile_id: str, payload: Any) -> Dict[str, Any]:
        try:
            changes = _to_attributes(pick_fields(payload, AUTOMOBILE_FIELDS))
            if not changes:
                raise InvalidAutomobileData("Nothing to update")

            if await self.automobile_repository.get_by_id(automobile_id) is None:
                raise AutomobileNotFound(f"Automobile {automobile_id} not found")

            plate = changes.get("license_plate")
            if plate and not await self.automobile_repository.is_plate_available(plate, exclude_id=automobile_id):
                raise LicensePlateTaken(f"License plate {plate} already registered")

            automobile = await self.automobile_repository.update(automobile_id, changes)
            if automobile is None:
                raise AutomobileNotFound(f"Automobile {automobile_id} not found")
            return success(automobile=automobile)
        except DomainError as e:
            return failure(e)

    async def delete_automobile(self, automobile_id: str) -> Dict[str, Any]:
        """Delete an automobile; usages already recorded keep their snapshot."""
        try:
            if not await self.automobile_repository.delete(automobile_id):
                raise AutomobileNotFound(f"Automobile {automobile_id} not found")
            logger.info(f"Deleted automobile {automobile_id}")
            return success()
        except DomainError as e:
            return failure(e)
