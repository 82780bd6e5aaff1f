"""Repositories for driver domain objects."""
import sqlite3
import uuid
from typing import Dict, List, Optional

from fleet_usage.apps.drivers.domain.models import Driver
from fleet_usage.db.sqlite import Database

# Columns a caller may filter or update on
DRIVER_COLUMNS = {"name": "name"}


class InMemoryDriverRepository:
    """Driver storage kept in a process-local list."""

    def __init__(self):
        self._drivers: List[Driver] = []

    async def get_all(self) -> List[Driver]:
        return [driver.model_copy() for driver in self._drivers]

    async def get_by_id(self, driver_id: str) -> Optional[Driver]:
        driver = self._find(driver_id)
        return driver.model_copy() if driver else None

    async def filter_by(self, criteria: Dict[str, str]) -> List[Driver]:
        return [
            driver.model_copy() for driver in self._drivers
            if all(getattr(driver, field) == value for field, value in criteria.items())
        ]

    async def save(self, name: str) -> Driver:
        driver = Driver(id=str(uuid.uuid4()), name=name)
        self._drivers.append(driver)
        return driver.model_copy()

    async def update(self, driver_id: str, changes: Dict[str, str]) -> Optional[Driver]:
        driver = self._find(driver_id)
        if driver is None:
            return None
        for field, value in changes.items():
            setattr(driver, field, value)
        return driver.model_copy()

    async def delete(self, driver_id: str) -> bool:
        before = len(self._drivers)
        self._drivers = [driver for driver in self._drivers if driver.id != driver_id]
        return len(self._drivers) < before

    async def reset(self) -> None:
        """Drop every stored driver."""
        self._drivers = []

    def _find(self, driver_id: str) -> Optional[Driver]:
        return next((driver for driver in self._drivers if driver.id == driver_id), None)


class SqliteDriverRepository:
    """Driver storage backed by the ``drivers`` table."""

    def __init__(self, db: Database):
        self._db = db

    async def get_all(self) -> List[Driver]:
        rows = await self._db.execute_and_fetchall("SELECT * FROM drivers ORDER BY rowid")
        return [self._row_to_driver(row) for row in rows]

    async def get_by_id(self, driver_id: str) -> Optional[Driver]:
        row = await self._db.execute_and_fetchone("SELECT * FROM drivers WHERE id = ?", (driver_id,))
        return self._row_to_driver(row) if row else None

    async def filter_by(self, criteria: Dict[str, str]) -> List[Driver]:
        clauses = [f"{DRIVER_COLUMNS[field]} = ?" for field in criteria]
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = await self._db.execute_and_fetchall(
            f"SELECT * FROM drivers {where} ORDER BY rowid", tuple(criteria.values())
        )
        return [self._row_to_driver(row) for row in rows]

    async def save(self, name: str) -> Driver:
        driver = Driver(id=str(uuid.uuid4()), name=name)
        async with self._db.transaction() as tx:
            await tx.execute("INSERT INTO drivers (id, name) VALUES (?, ?)", (driver.id, driver.name))
        return driver

    async def update(self, driver_id: str, changes: Dict[str, str]) -> Optional[Driver]:
        async with self._db.transaction() as tx:
            if changes:
                assignments = ", ".join(f"{DRIVER_COLUMNS[field]} = ?" for field in changes)
                await tx.execute(
                    f"UPDATE drivers SET {assignments} WHERE id = ?",
                    (*changes.values(), driver_id)
                )
            row = await tx.fetchone("SELECT * FROM drivers WHERE id = ?", (driver_id,))
        return self._row_to_driver(row) if row else None

    async def delete(self, driver_id: str) -> bool:
        async with self._db.transaction() as tx:
            deleted = await tx.execute("DELETE FROM drivers WHERE id = ?", (driver_id,))
        return deleted > 0

    @staticmethod
    def _row_to_driver(row: sqlite3.Row) -> Driver:
        return Driver(id=row["id"], name=row["name"])
