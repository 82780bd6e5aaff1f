"""Usage record stores."""
import sqlite3
import uuid
from typing import List, Optional

from fleet_usage.apps.automobile_usage.domain.exceptions import DriverAlreadyHasUsage
from fleet_usage.apps.automobile_usage.domain.models import (
    AutomobileSnapshot, DriverSnapshot, NewUsage, UsagePatch, UsageRecord
)
from fleet_usage.db.sqlite import Database

OPEN_USAGE_INDEX = "idx_automobile_usages_open_driver"


def is_open_driver_violation(error: sqlite3.IntegrityError) -> bool:
    """True when the error comes from the one-open-usage-per-driver index."""
    message = str(error)
    return "automobile_usages.driver_id" in message or OPEN_USAGE_INDEX in message


class InMemoryUsageRepository:
    """Usage records kept in a process-local list, in insertion order."""

    def __init__(self):
        self._records: List[UsageRecord] = []

    async def list_all(self) -> List[UsageRecord]:
        return [record.model_copy() for record in self._records]

    async def find_open_by_driver(self, driver_id: str) -> List[UsageRecord]:
        return [
            record.model_copy() for record in self._records
            if record.driver.id == driver_id and record.is_open()
        ]

    async def find_by_id(self, usage_id: str) -> Optional[UsageRecord]:
        record = self._find(usage_id)
        return record.model_copy() if record else None

    async def insert(self, new_usage: NewUsage) -> UsageRecord:
        record = UsageRecord.from_new(str(uuid.uuid4()), new_usage)
        self._records.append(record)
        return record.model_copy()

    async def update_by_id(self, usage_id: str, patch: UsagePatch) -> Optional[UsageRecord]:
        record = self._find(usage_id)
        if record is None:
            return None
        record.end_date = patch.end_date
        return record.model_copy()

    async def reset(self) -> None:
        """Drop every stored record."""
        self._records = []

    def _find(self, usage_id: str) -> Optional[UsageRecord]:
        return next((record for record in self._records if record.id == usage_id), None)


class SqliteUsageRepository:
    """Usage records in the ``automobile_usages`` table.

    A partial unique index on open rows backs the one-open-usage-per-driver
    rule at the storage level.
    """

    def __init__(self, db: Database):
        self._db = db

    async def list_all(self) -> List[UsageRecord]:
        rows = await self._db.execute_and_fetchall("SELECT * FROM automobile_usages ORDER BY rowid")
        return [self._row_to_record(row) for row in rows]

    async def find_open_by_driver(self, driver_id: str) -> List[UsageRecord]:
        rows = await self._db.execute_and_fetchall(
            "SELECT * FROM automobile_usages WHERE driver_id = ? AND end_date IS NULL ORDER BY rowid",
            (driver_id,)
        )
        return [self._row_to_record(row) for row in rows]

    async def find_by_id(self, usage_id: str) -> Optional[UsageRecord]:
        row = await self._db.execute_and_fetchone(
            "SELECT * FROM automobile_usages WHERE id = ?", (usage_id,)
        )
        return self._row_to_record(row) if row else None

    async def insert(self, new_usage: NewUsage) -> UsageRecord:
        record = UsageRecord.from_new(str(uuid.uuid4()), new_usage)
        try:
            async with self._db.transaction() as tx:
                await tx.execute(
                    """
                    INSERT INTO automobile_usages (
                        id, start_date, end_date, reason, driver_id, driver_name,
                        automobile_id, license_plate, brand, color
                    ) VALUES (?, ?, NULL, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.id, record.start_date, record.reason,
                        record.driver.id, record.driver.name,
                        record.automobile.id, record.automobile.license_plate,
                        record.automobile.brand, record.automobile.color
                    )
                )
        except sqlite3.IntegrityError as e:
            if not is_open_driver_violation(e):
                raise
            raise DriverAlreadyHasUsage(f"Driver {record.driver.id} already has an open usage") from e
        return record

    async def update_by_id(self, usage_id: str, patch: UsagePatch) -> Optional[UsageRecord]:
        async with self._db.transaction() as tx:
            await tx.execute(
                "UPDATE automobile_usages SET end_date = ? WHERE id = ?",
                (patch.end_date, usage_id)
            )
            row = await tx.fetchone("SELECT * FROM automobile_usages WHERE id = ?", (usage_id,))
        return self._row_to_record(row) if row else None

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> UsageRecord:
        return UsageRecord(
            id=row["id"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            reason=row["reason"],
            driver=DriverSnapshot(id=row["driver_id"], name=row["driver_name"]),
            automobile=AutomobileSnapshot(
                id=row["automobile_id"],
                license_plate=row["license_plate"],
                brand=row["brand"],
                color=row["color"],
            ),
        )
