"""Sensor endpoints."""
from __future__ import annotations

import structlog
from aiohttp import web

from iot_server.api.negotiation import HTML, JSON, accepts, render
from iot_server.api.validator import Validator
from iot_server.core.exceptions import BadRequestError, ForbiddenError
from iot_server.db.pool import Database
from iot_server.domain.dto import SensorCreate, SensorUpdate
from iot_server.domain.models import SensorWithChannel, User
from iot_server.repositories.hardware import HardwareRepository
from iot_server.repositories.nodes import NodeRepository
from iot_server.repositories.sensors import SensorRepository

logger = structlog.get_logger(__name__)

SENSOR_HARDWARE_TYPE = "sensor"


def _can_manage(owner_id: int, user: User) -> bool:
    return owner_id == user.id_user or user.is_admin


class SensorHandler:
    """CRUD handlers for sensors.

    Every handler that touches the database runs in one transaction which is
    rolled back if anything, including an authorization check, fails.
    """

    def __init__(
        self,
        db: Database,
        sensor_repository: SensorRepository,
        hardware_repository: HardwareRepository,
        node_repository: NodeRepository,
        validator: Validator,
    ) -> None:
        self._db = db
        self._repository = sensor_repository
        self._hardware_repository = hardware_repository
        self._node_repository = node_repository
        self._validator = validator

    async def create_form(self, request: web.Request) -> web.Response:
        return render(request, "sensor_form", {"title": "Create Sensor"})

    async def create(self, request: web.Request) -> web.Response:
        payload = await self._validator.parse_body(request, SensorCreate)

        async with self._db.begin() as conn:
            node = await self._node_repository.get_by_id(conn, payload.id_node)
            hardware = await self._hardware_repository.get_by_id(conn, payload.id_hardware)

            if hardware.type.lower() != SENSOR_HARDWARE_TYPE:
                raise BadRequestError("Hardware type not match, type should be sensor")

            user = self._validator.get_authentication(request)
            if user.id_user != node.id_user:
                raise ForbiddenError("You can't use other user's node")

            sensor = await self._repository.create(conn, payload)

        logger.info("sensor_created", id_sensor=sensor.id_sensor, id_user=user.id_user)
        return web.Response(text="Success add new sensor", status=201)

    async def get_all(self, request: web.Request) -> web.Response:
        async with self._db.begin() as conn:
            user = self._validator.get_authentication(request)
            sensors = await self._repository.get_all(conn, user)

        if accepts(request, JSON, HTML) == HTML:
            return render(request, "sensor", {"title": "Sensor", "sensors": sensors})
        return web.json_response([sensor.model_dump(mode="json") for sensor in sensors])

    async def get_by_id(self, request: web.Request) -> web.Response:
        id_sensor = self._validator.parse_id_from_url_parameter(request)

        async with self._db.begin() as conn:
            sensor = await self._repository.get_by_id(conn, id_sensor)
            channels = await self._repository.get_sensor_channel(conn, id_sensor)
            owner_id = await self._repository.get_id_user_who_own_sensor_by_id(conn, id_sensor)

            user = self._validator.get_authentication(request)
            if not _can_manage(owner_id, user):
                raise ForbiddenError("You can't see another user's sensor")

        if accepts(request, JSON, HTML) == HTML:
            return render(
                request,
                "sensor_detail",
                {
                    "title": "Sensor Detail",
                    "sensor": sensor,
                    "channel": sorted(channels, key=lambda item: item.time),
                },
            )
        body = SensorWithChannel(sensor=sensor, channel=channels)
        return web.json_response(body.model_dump(mode="json"))

    async def update_form(self, request: web.Request) -> web.Response:
        id_sensor = self._validator.parse_id_from_url_parameter(request)

        async with self._db.begin() as conn:
            sensor = await self._repository.get_by_id(conn, id_sensor)
            owner_id = await self._repository.get_id_user_who_own_sensor_by_id(conn, id_sensor)

            user = self._validator.get_authentication(request)
            if not _can_manage(owner_id, user):
                raise ForbiddenError("You can't edit another user's sensor")

        return render(
            request,
            "sensor_form",
            {"title": "Edit Sensor", "sensor": sensor, "edit": True},
        )

    async def update(self, request: web.Request) -> web.Response:
        id_sensor = self._validator.parse_id_from_url_parameter(request)
        payload = await self._validator.parse_body(request, SensorUpdate)

        async with self._db.begin() as conn:
            sensor = await self._repository.get_by_id(conn, id_sensor)
            owner_id = await self._repository.get_id_user_who_own_sensor_by_id(conn, id_sensor)

            user = self._validator.get_authentication(request)
            if not _can_manage(owner_id, user):
                raise ForbiddenError("You can't edit another user's sensor")

            await self._repository.update(conn, sensor, payload)

        logger.info("sensor_updated", id_sensor=id_sensor, id_user=user.id_user)
        return web.Response(text="Success edit sensor")

    async def delete(self, request: web.Request) -> web.Response:
        id_sensor = self._validator.parse_id_from_url_parameter(request)

        async with self._db.begin() as conn:
            owner_id = await self._repository.get_id_user_who_own_sensor_by_id(conn, id_sensor)

            user = self._validator.get_authentication(request)
            if not _can_manage(owner_id, user):
                raise ForbiddenError("You can't delete another user's sensor")

            await self._repository.delete(conn, id_sensor)

        logger.info("sensor_deleted", id_sensor=id_sensor, id_user=user.id_user)
        return web.Response(text=f"Success delete sensor, id: {id_sensor}")


def setup_routes(app: web.Application, handler: SensorHandler) -> None:
    """Setup sensor routes."""
    app.router.add_get("/sensor/add", handler.create_form)
    app.router.add_post("/sensor", handler.create)
    app.router.add_get("/sensor", handler.get_all)
    app.router.add_get("/sensor/{id}", handler.get_by_id)
    app.router.add_get("/sensor/{id}/edit", handler.update_form)
    app.router.add_put("/sensor/{id}", handler.update)
    app.router.add_post("/sensor/{id}/edit", handler.update)
    app.router.add_delete("/sensor/{id}", handler.delete)
