"""Domain models for automobile usage."""
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class UsageStatus(str, Enum):
    """Lifecycle of a usage record."""
    PENDING_CREATION = "pending_creation"  # Validated, not yet stored
    OPEN = "open"  # Stored without an end date
    CLOSED = "closed"  # End date set; terminal


class DriverSnapshot(BaseModel):
    """Driver fields copied into a usage when it is registered."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class AutomobileSnapshot(BaseModel):
    """Automobile fields copied into a usage when it is registered."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    license_plate: str = Field(alias="licensePlate")
    brand: str
    color: str


class NewUsage(BaseModel):
    """Everything needed to store a usage except the id the store assigns."""
    model_config = ConfigDict(frozen=True)

    start_date: str
    driver: DriverSnapshot
    automobile: AutomobileSnapshot
    reason: str

    @property
    def status(self) -> UsageStatus:
        return UsageStatus.PENDING_CREATION


class UsagePatch(BaseModel):
    """The only change a stored usage accepts: closing it."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    end_date: str


class UsageRecord(BaseModel):
    """One occupancy of an automobile by a driver."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    start_date: str = Field(alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    driver: DriverSnapshot
    automobile: AutomobileSnapshot
    reason: str

    @property
    def status(self) -> UsageStatus:
        return UsageStatus.OPEN if self.end_date is None else UsageStatus.CLOSED

    def is_open(self) -> bool:
        return self.end_date is None

    def to_dict(self) -> Dict[str, Any]:
        """JSON shape; ``endDate`` is omitted while the usage is open."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_new(cls, usage_id: str, new_usage: NewUsage) -> "UsageRecord":
        return cls(
            id=usage_id,
            start_date=new_usage.start_date,
            driver=new_usage.driver,
            automobile=new_usage.automobile,
            reason=new_usage.reason,
        )
