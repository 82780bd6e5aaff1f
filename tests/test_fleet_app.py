from unittest import mock

import pytest

from fleet_usage.api.server import ApiServer
from fleet_usage.apps.automobile_usage.application.usage_service import AutomobileUsageService
from fleet_usage.apps.automobile_usage.infrastructure.repositories import (
    InMemoryUsageRepository, SqliteUsageRepository
)
from fleet_usage.apps.drivers.application.driver_service import DriverService
from fleet_usage.fleet_app import FleetApp


class TestFleetApp:
    """Test suite for the FleetApp class."""

    def test_memory_wiring(self):
        fleet_app = FleetApp(backend="memory")

        assert fleet_app.db is None
        assert isinstance(fleet_app.usage_service, AutomobileUsageService)
        assert isinstance(fleet_app.usage_service.usage_repository, InMemoryUsageRepository)
        assert isinstance(fleet_app.api_server, ApiServer)
        assert fleet_app.api_server.usage_service is fleet_app.usage_service

    def test_sqlite_wiring(self, tmp_path):
        fleet_app = FleetApp(backend="sqlite", db_path=tmp_path / "fleet.db")

        assert fleet_app.db is not None
        assert fleet_app.db.path == tmp_path / "fleet.db"
        assert isinstance(fleet_app.usage_service.usage_repository, SqliteUsageRepository)

    def test_registries_share_storage_with_usage_lookups(self):
        fleet_app = FleetApp(backend="memory")
        driver_service = fleet_app.container.resolve(DriverService)

        assert fleet_app.usage_service.driver_lookup.driver_repository is driver_service.driver_repository

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            FleetApp(backend="postgres")

    async def test_start_and_stop(self, tmp_path):
        fleet_app = FleetApp(backend="sqlite", db_path=tmp_path / "fleet.db")

        with mock.patch.object(ApiServer, "start", new_callable=mock.AsyncMock) as mock_start, \
                mock.patch.object(ApiServer, "stop", new_callable=mock.AsyncMock) as mock_stop:
            await fleet_app.start()

            assert fleet_app.is_running()
            mock_start.assert_called_once()
            assert (tmp_path / "fleet.db").exists()

            await fleet_app.stop()

            assert not fleet_app.is_running()
            mock_stop.assert_called_once()

        await fleet_app.wait_for_stop()

    async def test_end_to_end_in_memory(self):
        fleet_app = FleetApp(backend="memory")
        driver_service = fleet_app.container.resolve(DriverService)
        automobile_service = fleet_app.api_server.automobile_service

        driver = (await driver_service.register_driver({"name": "John"}))["driver"]
        automobile = (await automobile_service.register_automobile(
            {"licensePlate": "AAA1A11", "brand": "Foo", "color": "Blue"}
        ))["automobile"]

        result = await fleet_app.usage_service.register_usage({
            "startDate": "11/12/23",
            "driverId": driver.id,
            "automobileId": automobile.id,
            "reason": "Client visit",
        })

        assert result["ok"] is True
