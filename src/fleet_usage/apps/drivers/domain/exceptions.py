from fleet_usage.exceptions import DomainError


class InvalidDriverData(DomainError):
    """Required driver fields are missing or blank."""
    why = "invalid-driver-data"
    status = 403


class DriverNotFound(DomainError):
    """No driver has the requested id."""
    why = "no-driver-found"
    status = 404
