"""Domain model for drivers."""
from typing import Any, Dict

from pydantic import BaseModel


class Driver(BaseModel):
    """A person who can be assigned an automobile."""
    id: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()
