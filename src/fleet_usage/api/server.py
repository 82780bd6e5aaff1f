import logging
from typing import Any, Dict, Optional

from aiohttp import web
from pydantic import BaseModel

from fleet_usage.apps.automobile_usage.application.usage_service import AutomobileUsageService
from fleet_usage.apps.automobiles.application.automobile_service import AutomobileService
from fleet_usage.apps.drivers.application.driver_service import DriverService
from fleet_usage.config import config

logger = logging.getLogger(__name__)


def to_json(value: Any) -> Any:
    """Turn service results (models, lists, dicts) into JSON-ready data."""
    if isinstance(value, BaseModel):
        return value.to_dict() if hasattr(value, "to_dict") else value.model_dump(by_alias=True)
    if isinstance(value, dict):
        return {key: to_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(item) for item in value]
    return value


def result_response(result: Dict[str, Any]) -> web.Response:
    """200 for ok results, the carried status otherwise."""
    status = 200 if result.get("ok") else result.get("status", 400)
    return web.json_response(to_json(result), status=status)


async def read_payload(request: web.Request) -> Any:
    """The JSON body, or an empty payload when there is no usable body."""
    try:
        return await request.json()
    except ValueError:
        return {}


class ApiServer:
    """REST API server for the fleet usage service."""

    def __init__(self,
                 usage_service: AutomobileUsageService,
                 driver_service: DriverService,
                 automobile_service: AutomobileService,
                 host: Optional[str] = None,
                 port: Optional[int] = None):
        """Initialize the API server."""
        self.usage_service = usage_service
        self.driver_service = driver_service
        self.automobile_service = automobile_service

        self.app = web.Application()
        self.host = host or config.api.host
        self.port = port or config.api.http_port
        self.runner = None
        self.site = None

        self._setup_routes()

    def _setup_routes(self) -> None:
        """Set up the API routes."""
        # Automobile usage routes
        self.app.router.add_get("/automobile-usage", self.handle_list_usages)
        self.app.router.add_post("/automobile-usage", self.handle_register_usage)
        self.app.router.add_put("/automobile-usage/{usage_id}", self.handle_update_usage)

        # Driver routes
        self.app.router.add_get("/drivers", self.handle_list_drivers)
        self.app.router.add_post("/drivers", self.handle_register_driver)
        self.app.router.add_get("/drivers/{driver_id}", self.handle_get_driver)
        self.app.router.add_put("/drivers/{driver_id}", self.handle_update_driver)
        self.app.router.add_delete("/drivers/{driver_id}", self.handle_delete_driver)

        # Automobile routes
        self.app.router.add_get("/automobiles", self.handle_list_automobiles)
        self.app.router.add_post("/automobiles", self.handle_register_automobile)
        self.app.router.add_get("/automobiles/{automobile_id}", self.handle_get_automobile)
        self.app.router.add_put("/automobiles/{automobile_id}", self.handle_update_automobile)
        self.app.router.add_delete("/automobiles/{automobile_id}", self.handle_delete_automobile)

    async def start(self) -> None:
        """Start the API server."""
        logger.info(f"Starting API server on port {self.port}")

        self.runner = web.AppRunner(self.app)
        await self.runner.setup()

        self.site = web.TCPSite(self.runner, self.host, self.port)
        await self.site.start()

        logger.info(f"API server running on http://{self.host}:{self.port}")

    async def stop(self) -> None:
        """Stop the API server."""
        logger.info("Stopping API server")

        if self.site:
            await self.site.stop()
            self.site = None

        if self.runner:
            await self.runner.cleanup()
            self.runner = None

        logger.info("API server stopped")

    # Automobile usage route handlers

    async def handle_list_usages(self, request: web.Request) -> web.Response:
        """Handle a request to list every automobile usage."""
        try:
            return result_response(await self.usage_service.list_all())
        except Exception as e:
            logger.error(f"Error handling list usages request: {e}", exc_info=True)
            return web.json_response({"error": str(e)}, status=500)

    async def handle_register_usage(self, request: web.Request) -> web.Response:
        """Handle a request to open an automobile usage."""
        try:
            payload = await read_payload(request)
            return result_response(await self.usage_service.register_usage(payload))
        except Exception as e:
            logger.error(f"Error handling register usage request: {e}", exc_info=True)
            return web.json_response({"error": str(e)}, status=500)

    async def handle_update_usage(self, request: web.Request) -> web.Response:
        """Handle a request to close an automobile usage."""
        try:
            usage_id = request.match_info["usage_id"]
            payload = await read_payload(request)
            return result_response(await self.usage_service.update_usage(usage_id, payload))
        except Exception as e:
            logger.error(f"Error handling update usage request: {e}", exc_info=True)
            return web.json_response({"error": str(e)}, status=500)

    # Driver route handlers

    async def handle_list_drivers(self, request: web.Request) -> web.Response:
        try:
            return result_response(await self.driver_service.get_all_drivers(dict(request.query)))
        except Exception as e:
            logger.error(f"Error handling list drivers request: {e}", exc_info=True)
            return web.json_response({"error": str(e)}, status=500)

    async def handle_register_driver(self, request: web.Request) -> web.Response:
        try:
            payload = await read_payload(request)
            return result_response(await self.driver_service.register_driver(payload))
        except Exception as e:
            logger.error(f"Error handling register driver request: {e}", exc_info=True)
            return web.json_response({"error": str(e)}, status=500)

    async def handle_get_driver(self, request: web.Request) -> web.Response:
        try:
            driver_id = request.match_info["driver_id"]
            return result_response(await self.driver_service.get_a_driver(driver_id))
        except Exception as e:
            logger.error(f"Error handling get driver request: {e}", exc_info=True)
            return web.json_response({"error": str(e)}, status=500)

    async def handle_update_driver(self, request: web.Request) -> web.Response:
        try:
            driver_id = request.match_info["driver_id"]
            payload = await read_payload(request)
            return result_response(await self.driver_service.update_driver(driver_id, payload))
        except Exception as e:
            logger.error(f"Error handling update driver request: {e}", exc_info=True)
            return web.json_response({"error": str(e)}, status=500)

    async def handle_delete_driver(self, request: web.Request) -> web.Response:
        try:
            driver_id = request.match_info["driver_id"]
            return result_response(await self.driver_service.delete_driver(driver_id))
        except Exception as e:
            logger.error(f"Error handling delete driver request: {e}", exc_info=True)
            return web.json_response({"error": str(e)}, status=500)

    # Automobile route handlers

    async def handle_list_automobiles(self, request: web.Request) -> web.Response:
        try:
            return result_response(await self.automobile_service.get_all_automobiles(dict(request.query)))
        except Exception as e:
            logger.error(f"Error handling list automobiles request: {e}", exc_info=True)
            return web.json_response({"error": str(e)}, status=500)

    async def handle_register_automobile(self, request: web.Request) -> web.Response:
        try:
            payload = await read_payload(request)
            return result_response(await self.automobile_service.register_automobile(payload))
        except Exception as e:
            logger.error(f"Error handling register automobile request: {e}", exc_info=True)
            return web.json_response({"error": str(e)}, status=500)

    async def handle_get_automobile(self, request: web.Request) -> web.Response:
        try:
            automobile_id = request.match_info["automobile_id"]
            return result_response(await self.automobile_service.get_an_automobile(automobile_id))
        except Exception as e:
            logger.error(f"Error handling get automobile request: {e}", exc_info=True)
            return web.json_response({"error": str(e)}, status=500)

    async def handle_update_automobile(self, request: web.Request) -> web.Response:
        try:
            automobile_id = request.match_info["automobile_id"]
            payload = await read_payload(request)
            return result_response(await self.automobile_service.update_automobile(automobile_id, payload))
        except Exception as e:
            logger.error(f"Error handling update automobile request: {e}", exc_info=True)
            return web.json_response({"error": str(e)}, status=500)

    async def handle_delete_automobile(self, request: web.Request) -> web.Response:
        try:
            automobile_id = request.match_info["automobile_id"]
            return result_response(await self.automobile_service.delete_automobile(automobile_id))
        except Exception as e:
            logger.error(f"Error handling delete automobile request: {e}", exc_info=True)
            return web.json_response({"error": str(e)}, status=500)
