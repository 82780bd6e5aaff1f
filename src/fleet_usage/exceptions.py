"""
Base error type and result helpers shared by every application service.

Services never let a DomainError escape: they catch it and hand back a
``failure`` result so the HTTP layer can copy ``status`` onto the response.
"""
from typing import Any, Dict


class DomainError(Exception):
    """A rule violation that is reported to the caller as a result value."""

    why: str = "domain-error"
    status: int = 400

    def __init__(self, message: str = ""):
        super().__init__(message or self.why)
        self.message = message or self.why

    def to_result(self) -> Dict[str, Any]:
        return {"ok": False, "why": self.why, "status": self.status}


def success(**payload: Any) -> Dict[str, Any]:
    """Build an ``ok`` result carrying the given payload keys."""
    return {"ok": True, **payload}


def failure(error: DomainError) -> Dict[str, Any]:
    """Build a failed result from a domain error."""
    return error.to_result()
