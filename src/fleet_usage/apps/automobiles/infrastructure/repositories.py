"""Repositories for automobile domain objects."""
import sqlite3
import uuid
from typing import Dict, List, Optional

from fleet_usage.apps.automobiles.domain.exceptions import LicensePlateTaken
from fleet_usage.apps.automobiles.domain.models import Automobile
from fleet_usage.db.sqlite import Database

AUTOMOBILE_COLUMNS = {
    "license_plate": "license_plate",
    "brand": "brand",
    "color": "color",
}


class InMemoryAutomobileRepository:
    """Automobile storage kept in a process-local list."""

    def __init__(self):
        self._automobiles: List[Automobile] = []

    async def get_all(self) -> List[Automobile]:
        return [automobile.model_copy() for automobile in self._automobiles]

    async def get_by_id(self, automobile_id: str) -> Optional[Automobile]:
        automobile = self._find(automobile_id)
        return automobile.model_copy() if automobile else None

    async def filter_by(self, criteria: Dict[str, str]) -> List[Automobile]:
        return [
            automobile.model_copy() for automobile in self._automobiles
            if all(getattr(automobile, field) == value for field, value in criteria.items())
        ]

    async def is_plate_available(self, license_plate: str, exclude_id: Optional[str] = None) -> bool:
        return not any(
            automobile.license_plate == license_plate and automobile.id != exclude_id
            for automobile in self._automobiles
        )

    async def save(self, license_plate: str, brand: str, color: str) -> Automobile:
        if not await self.is_plate_available(license_plate):
            raise LicensePlateTaken(f"License plate {license_plate} already registered")
        automobile = Automobile(id=str(uuid.uuid4()), license_plate=license_plate, brand=brand, color=color)
        self._automobiles.append(automobile)
        return automobile.model_copy()

    async def update(self, automobile_id: str, changes: Dict[str, str]) -> Optional[Automobile]:
        automobile = self._find(automobile_id)
        if automobile is None:
            return None
        plate = changes.get("license_plate")
        if plate and not await self.is_plate_available(plate, exclude_id=automobile_id):
            raise LicensePlateTaken(f"License plate {plate} already registered")
        for field, value in changes.items():
            setattr(automobile, field, value)
        return automobile.model_copy()

    async def delete(self, automobile_id: str) -> bool:
        before = len(self._automobiles)
        self._automobiles = [a for a in self._automobiles if a.id != automobile_id]
        return len(self._automobiles) < before

    async def reset(self) -> None:
        """Drop every stored automobile."""
        self._automobiles = []

    def _find(self, automobile_id: str) -> Optional[Automobile]:
        return next((a for a in self._automobiles if a.id == automobile_id), None)


class SqliteAutomobileRepository:
    """Automobile storage backed by the ``automobiles`` table."""

    def __init__(self, db: Database):
        self._db = db

    async def get_all(self) -> List[Automobile]:
        rows = await self._db.execute_and_fetchall("SELECT * FROM automobiles ORDER BY rowid")
        return [self._row_to_automobile(row) for row in rows]

    async def get_by_id(self, automobile_id: str) -> Optional[Automobile]:
        row = await self._db.execute_and_fetchone(
            "SELECT * FROM automobiles WHERE id = ?", (automobile_id,)
        )
        return self._row_to_automobile(row) if row else None

    async def filter_by(self, criteria: Dict[str, str]) -> List[Automobile]:
        clauses = [f"{AUTOMOBILE_COLUMNS[field]} = ?" for field in criteria]
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = await self._db.execute_and_fetchall(
            f"SELECT * FROM automobiles {where} ORDER BY rowid", tuple(criteria.values())
        )
        return [self._row_to_automobile(row) for row in rows]

    async def is_plate_available(self, license_plate: str, exclude_id: Optional[str] = None) -> bool:
        row = await self._db.execute_and_fetchone(
            "SELECT id FROM automobiles WHERE license_plate = ? AND id != ?",
            (license_plate, exclude_id or "")
        )
        return row is None

    async def save(self, license_plate: str, brand: str, color: str) -> Automobile:
        automobile = Automobile(id=str(uuid.uuid4()), license_plate=license_plate, brand=brand, color=color)
        try:
            async with self._db.transaction() as tx:
                await tx.execute(
                    "INSERT INTO automobiles (id, license_plate, brand, color) VALUES (?, ?, ?, ?)",
                    (automobile.id, automobile.license_plate, automobile.brand, automobile.color)
                )
        except sqlite3.IntegrityError as e:
            raise LicensePlateTaken(f"License plate {license_plate} already registered") from e
        return automobile

    async def update(self, automobile_id: str, changes: Dict[str, str]) -> Optional[Automobile]:
        try:
            async with self._db.transaction() as tx:
                if changes:
                    assignments = ", ".join(f"{AUTOMOBILE_COLUMNS[field]} = ?" for field in changes)
                    await tx.execute(
                        f"UPDATE automobiles SET {assignments} WHERE id = ?",
                        (*changes.values(), automobile_id)
                    )
                row = await tx.fetchone("SELECT * FROM automobiles WHERE id = ?", (automobile_id,))
        except sqlite3.IntegrityError as e:
            raise LicensePlateTaken(f"License plate {changes.get('license_plate')} already registered") from e
        return self._row_to_automobile(row) if row else None

    async def delete(self, automobile_id: str) -> bool:
        async with self._db.transaction() as tx:
            deleted = await tx.execute("DELETE FROM automobiles WHERE id = ?", (automobile_id,))
        return deleted > 0

    @staticmethod
    def _row_to_automobile(row: sqlite3.Row) -> Automobile:
        return Automobile(
            id=row["id"],
            license_plate=row["license_plate"],
            brand=row["brand"],
            color=row["color"],
        )
