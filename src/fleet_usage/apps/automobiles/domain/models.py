"""Domain model for automobiles."""
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class Automobile(BaseModel):
    """A vehicle of the fleet, identified externally by its license plate."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    license_plate: str = Field(alias="licensePlate")
    brand: str
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
