from fleet_usage.exceptions import DomainError


class InvalidAutomobileData(DomainError):
    """Required automobile fields are missing or blank."""
    why = "invalid-automobile-data"
    status = 403


class AutomobileNotFound(DomainError):
    """No automobile has the requested id."""
    why = "no-automobile-found"
    status = 404


class LicensePlateTaken(DomainError):
    """Another automobile is already registered with this plate."""
    why = "license-plate-already-registered"
    status = 403
