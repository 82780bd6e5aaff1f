"""
Validation of raw usage payloads.

Payloads arrive as untyped mappings straight from the HTTP layer. Every check
here is pure: it either returns a typed value or raises one of the usage
domain errors.

Dates are ``DD/MM/YY``. The format check is the pattern alone, so
``31/02/23`` is accepted. Two-digit years always belong to the 2000s, and
dates are compared as (year, month, day), never as strings.
"""
import re
from dataclasses import dataclass
from typing import Any

from fleet_usage.apps.automobile_usage.domain.exceptions import (
    InvalidDateFormat, InvalidEndDate, InvalidUsageData
)
from fleet_usage.apps.automobile_usage.domain.models import UsagePatch, UsageRecord
from fleet_usage.utils.payloads import as_mapping, pick_fields

DATE_PATTERN = re.compile(r"^[0-9]{2}/[0-9]{2}/[0-9]{2}$")

# Two-digit years YY map to CENTURY + YY
CENTURY = 2000

REGISTRATION_FIELDS = ("startDate", "driverId", "automobileId", "reason")
UPDATE_FIELDS = frozenset({"endDate"})


@dataclass(frozen=True, order=True)
class UsageDate:
    """A calendar date ordered by year, then month, then day."""
    year: int
    month: int
    day: int

    def __str__(self) -> str:
        return f"{self.day:02d}/{self.month:02d}/{self.year % 100:02d}"


@dataclass(frozen=True)
class RegistrationData:
    """Whitelisted fields of a registration payload."""
    start_date: str
    driver_id: str
    automobile_id: str
    reason: str


def is_valid_date(value: Any) -> bool:
    return isinstance(value, str) and DATE_PATTERN.fullmatch(value) is not None


def parse_usage_date(value: str) -> UsageDate:
    """Parse a ``DD/MM/YY`` string; raises InvalidDateFormat otherwise."""
    if not is_valid_date(value):
        raise InvalidDateFormat(f"Invalid date: {value!r}")
    day, month, year = (int(part) for part in value.split("/"))
    return UsageDate(year=CENTURY + year, month=month, day=day)


def validate_registration(payload: Any) -> RegistrationData:
    """Check a registration payload and keep only the known fields."""
    fields = pick_fields(payload, REGISTRATION_FIELDS)
    missing = [name for name in REGISTRATION_FIELDS if name not in fields]
    if missing:
        raise InvalidUsageData(f"Missing fields: {', '.join(missing)}")

    if not is_valid_date(fields["startDate"]):
        raise InvalidDateFormat(f"Invalid start date: {fields['startDate']!r}")

    return RegistrationData(
        start_date=fields["startDate"],
        driver_id=fields["driverId"],
        automobile_id=fields["automobileId"],
        reason=fields["reason"],
    )


def validate_update(payload: Any) -> UsagePatch:
    """Check an update payload; the only accepted shape is ``{"endDate": "DD/MM/YY"}``."""
    data = as_mapping(payload)
    if set(data) != UPDATE_FIELDS:
        raise InvalidDateFormat(f"Update accepts only endDate, got {sorted(map(str, data))}")

    end_date = data["endDate"]
    if not is_valid_date(end_date):
        raise InvalidDateFormat(f"Invalid end date: {end_date!r}")

    return UsagePatch(end_date=end_date)


def ensure_end_not_before_start(record: UsageRecord, patch: UsagePatch) -> None:
    """Raise InvalidEndDate when closing would end the usage before it started."""
    if parse_usage_date(patch.end_date) < parse_usage_date(record.start_date):
        raise InvalidEndDate(f"End date {patch.end_date} is before start date {record.start_date}")
