import pytest
from pydantic import ValidationError

from fleet_usage.apps.automobile_usage.domain.models import (
    AutomobileSnapshot, DriverSnapshot, NewUsage, UsagePatch, UsageRecord, UsageStatus
)


@pytest.fixture
def new_usage():
    return NewUsage(
        start_date="11/12/23",
        driver=DriverSnapshot(id="driver-1", name="John"),
        automobile=AutomobileSnapshot(id="car-1", license_plate="AAA1A11", brand="Foo", color="Blue"),
        reason="Client visit",
    )


def test_new_usage_is_pending(new_usage):
    assert new_usage.status == UsageStatus.PENDING_CREATION


def test_open_record_json_shape(new_usage):
    record = UsageRecord.from_new("usage-1", new_usage)

    assert record.to_dict() == {
        "id": "usage-1",
        "startDate": "11/12/23",
        "driver": {"id": "driver-1", "name": "John"},
        "automobile": {"id": "car-1", "licensePlate": "AAA1A11", "brand": "Foo", "color": "Blue"},
        "reason": "Client visit",
    }


def test_closed_record_carries_end_date(new_usage):
    record = UsageRecord.from_new("usage-1", new_usage)
    record.end_date = "15/12/23"

    assert record.status == UsageStatus.CLOSED
    assert record.to_dict()["endDate"] == "15/12/23"


def test_snapshots_are_frozen():
    snapshot = DriverSnapshot(id="driver-1", name="John")

    with pytest.raises(ValidationError):
        snapshot.name = "Johnny"


def test_patch_accepts_only_end_date():
    with pytest.raises(ValidationError):
        UsagePatch(end_date="15/12/23", reason="changed")
