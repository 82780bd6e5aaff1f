import json
from unittest import mock

import pytest
from aiohttp.test_utils import make_mocked_request

from fleet_usage.api.server import ApiServer, read_payload, result_response, to_json
from fleet_usage.apps.automobile_usage.domain.models import AutomobileSnapshot, DriverSnapshot, UsageRecord
from fleet_usage.apps.drivers.domain.models import Driver


def make_request(method, path, payload=None, match_info=None, invalid_json=False):
    """Build a mocked request whose body is the given payload."""
    request = make_mocked_request(method, path, match_info=match_info or {})
    if invalid_json:
        request.json = mock.AsyncMock(side_effect=json.JSONDecodeError("Expecting value", "", 0))
    else:
        request.json = mock.AsyncMock(return_value=payload)
    return request


def body(response):
    return json.loads(response.body)


@pytest.fixture
def usage_record():
    return UsageRecord(
        id="usage-1",
        start_date="11/12/23",
        driver=DriverSnapshot(id="driver-1", name="John"),
        automobile=AutomobileSnapshot(id="car-1", license_plate="AAA1A11", brand="Foo", color="Blue"),
        reason="Client visit",
    )


class TestApiServer:
    """Test suite for the ApiServer class."""

    @pytest.fixture
    def services(self):
        return mock.AsyncMock(), mock.AsyncMock(), mock.AsyncMock()

    @pytest.fixture
    def api_server(self, services):
        """Create an ApiServer instance with mocked services."""
        usage_service, driver_service, automobile_service = services
        with mock.patch("fleet_usage.api.server.config") as mock_config:
            mock_config.api.host = "0.0.0.0"
            mock_config.api.http_port = 8080

            yield ApiServer(usage_service, driver_service, automobile_service)

    def test_routes(self, api_server):
        routes = {
            (route.method, route.resource.canonical)
            for route in api_server.app.router.routes()
        }

        assert {
            ("GET", "/automobile-usage"),
            ("POST", "/automobile-usage"),
            ("PUT", "/automobile-usage/{usage_id}"),
            ("POST", "/drivers"),
            ("DELETE", "/drivers/{driver_id}"),
            ("GET", "/automobiles"),
            ("PUT", "/automobiles/{automobile_id}"),
        } <= routes

    async def test_start_and_stop(self, api_server):
        """Test starting and stopping the API server."""
        with mock.patch("fleet_usage.api.server.web.AppRunner") as mock_app_runner, \
                mock.patch("fleet_usage.api.server.web.TCPSite") as mock_tcp_site:
            mock_runner = mock.AsyncMock()
            mock_site = mock.AsyncMock()
            mock_app_runner.return_value = mock_runner
            mock_tcp_site.return_value = mock_site

            await api_server.start()

            mock_app_runner.assert_called_once_with(api_server.app)
            mock_runner.setup.assert_called_once()
            mock_tcp_site.assert_called_once_with(mock_runner, "0.0.0.0", 8080)
            mock_site.start.assert_called_once()

            await api_server.stop()

            mock_site.stop.assert_called_once()
            mock_runner.cleanup.assert_called_once()
            assert api_server.site is None
            assert api_server.runner is None

    async def test_list_usages(self, api_server, services, usage_record):
        services[0].list_all.return_value = {"ok": True, "automobileUsage": [usage_record]}

        response = await api_server.handle_list_usages(make_request("GET", "/automobile-usage"))

        assert response.status == 200
        assert body(response)["automobileUsage"][0]["automobile"]["licensePlate"] == "AAA1A11"
        assert "endDate" not in body(response)["automobileUsage"][0]

    async def test_register_usage_passes_payload(self, api_server, services, usage_record):
        services[0].register_usage.return_value = {"ok": True, "automobileUsage": usage_record}
        payload = {"startDate": "11/12/23", "driverId": "driver-1", "automobileId": "car-1", "reason": "x"}

        response = await api_server.handle_register_usage(make_request("POST", "/automobile-usage", payload))

        services[0].register_usage.assert_called_once_with(payload)
        assert response.status == 200
        assert body(response)["automobileUsage"]["id"] == "usage-1"

    async def test_register_usage_failure_status(self, api_server, services):
        services[0].register_usage.return_value = {
            "ok": False, "why": "invalid-driver-already-has-a-usage", "status": 403,
        }

        response = await api_server.handle_register_usage(make_request("POST", "/automobile-usage", {}))

        assert response.status == 403
        assert body(response) == {"ok": False, "why": "invalid-driver-already-has-a-usage", "status": 403}

    async def test_invalid_json_becomes_empty_payload(self, api_server, services):
        services[0].register_usage.return_value = {
            "ok": False, "why": "invalid-automobile-usage-data", "status": 403,
        }

        request = make_request("POST", "/automobile-usage", invalid_json=True)
        response = await api_server.handle_register_usage(request)

        services[0].register_usage.assert_called_once_with({})
        assert response.status == 403

    async def test_update_usage(self, api_server, services):
        services[0].update_usage.return_value = {"ok": False, "why": "no-automobile-usage-found", "status": 404}

        request = make_request("PUT", "/automobile-usage/usage-9", {"endDate": "15/12/23"},
                               match_info={"usage_id": "usage-9"})
        response = await api_server.handle_update_usage(request)

        services[0].update_usage.assert_called_once_with("usage-9", {"endDate": "15/12/23"})
        assert response.status == 404

    async def test_unexpected_error(self, api_server, services):
        services[0].list_all.side_effect = RuntimeError("boom")

        response = await api_server.handle_list_usages(make_request("GET", "/automobile-usage"))

        assert response.status == 500
        assert body(response) == {"error": "boom"}

    async def test_list_drivers_passes_query(self, api_server, services):
        services[1].get_all_drivers.return_value = {"ok": True, "driver": [Driver(id="d1", name="John")]}

        response = await api_server.handle_list_drivers(make_request("GET", "/drivers?name=John"))

        services[1].get_all_drivers.assert_called_once_with({"name": "John"})
        assert body(response) == {"ok": True, "driver": [{"id": "d1", "name": "John"}]}

    async def test_delete_driver(self, api_server, services):
        services[1].delete_driver.return_value = {"ok": True}

        request = make_request("DELETE", "/drivers/d1", match_info={"driver_id": "d1"})
        response = await api_server.handle_delete_driver(request)

        services[1].delete_driver.assert_called_once_with("d1")
        assert response.status == 200

    async def test_get_automobile(self, api_server, services):
        services[2].get_an_automobile.return_value = {"ok": False, "why": "no-automobile-found", "status": 404}

        request = make_request("GET", "/automobiles/a1", match_info={"automobile_id": "a1"})
        response = await api_server.handle_get_automobile(request)

        services[2].get_an_automobile.assert_called_once_with("a1")
        assert response.status == 404


def test_to_json_nested(usage_record):
    assert to_json({"ok": True, "items": (usage_record,)})["items"][0]["startDate"] == "11/12/23"


def test_result_response_defaults_to_400():
    response = result_response({"ok": False, "why": "x"})

    assert response.status == 400


async def test_read_payload_non_json():
    request = make_request("POST", "/drivers", invalid_json=True)

    assert await read_payload(request) == {}
