import os
import sys
from pathlib import Path

# Add the src directory to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# Set environment variables for testing
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["DATA_DIR"] = "/tmp/fleet-usage-test"
os.environ["DB_PATH"] = "test.db"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["LOG_DIR"] = "/tmp/fleet-usage-test/logs"
os.environ["PORT"] = "3100"

import pytest

from fleet_usage.apps.automobile_usage.application.usage_service import AutomobileUsageService
from fleet_usage.apps.automobile_usage.infrastructure.lookups import (
    RepositoryAutomobileLookup, RepositoryDriverLookup
)
from fleet_usage.apps.automobile_usage.infrastructure.repositories import (
    InMemoryUsageRepository, SqliteUsageRepository
)
from fleet_usage.apps.automobiles.infrastructure.repositories import (
    InMemoryAutomobileRepository, SqliteAutomobileRepository
)
from fleet_usage.apps.drivers.infrastructure.repositories import (
    InMemoryDriverRepository, SqliteDriverRepository
)
from fleet_usage.db.sqlite import Database


@pytest.fixture
async def sqlite_db(tmp_path):
    """A fresh SQLite database in a temporary directory."""
    db = Database(tmp_path / "fleet.db")
    await db.initialize()

    yield db

    await db.close()


@pytest.fixture(params=["memory", "sqlite"])
async def repositories(request, tmp_path):
    """Driver, automobile and usage repositories for each storage backend."""
    if request.param == "memory":
        yield InMemoryDriverRepository(), InMemoryAutomobileRepository(), InMemoryUsageRepository()
        return

    db = Database(tmp_path / "fleet.db")
    await db.initialize()

    yield SqliteDriverRepository(db), SqliteAutomobileRepository(db), SqliteUsageRepository(db)

    await db.close()


@pytest.fixture
def driver_repository(repositories):
    return repositories[0]


@pytest.fixture
def automobile_repository(repositories):
    return repositories[1]


@pytest.fixture
def usage_repository(repositories):
    return repositories[2]


@pytest.fixture
def usage_service(usage_repository, driver_repository, automobile_repository):
    """A usage service wired to the registry repositories."""
    return AutomobileUsageService(
        usage_repository,
        RepositoryDriverLookup(driver_repository),
        RepositoryAutomobileLookup(automobile_repository),
    )


@pytest.fixture
async def john(driver_repository):
    return await driver_repository.save("John")


@pytest.fixture
async def blue_car(automobile_repository):
    return await automobile_repository.save("AAA1A11", "Foo", "Blue")
