"""Error taxonomy for automobile usage."""
from fleet_usage.exceptions import DomainError


class InvalidUsageData(DomainError):
    """A required registration field is missing, or an id does not resolve."""
    why = "invalid-automobile-usage-data"
    status = 403


class InvalidDateFormat(DomainError):
    """A date is not DD/MM/YY, or an update payload carries anything else."""
    why = "invalid-date-format"
    status = 403


class DriverAlreadyHasUsage(DomainError):
    """The driver still holds an open usage."""
    why = "invalid-driver-already-has-a-usage"
    status = 403


class UsageNotFound(DomainError):
    why = "no-automobile-usage-found"
    status = 404


class InvalidEndDate(DomainError):
    """The end date falls before the start date."""
    why = "invalid-end-date"
    status = 403


class UsageAlreadyClosed(DomainError):
    """Closed usages cannot change again."""
    why = "automobile-usage-already-closed"
    status = 403
