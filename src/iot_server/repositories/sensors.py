"""Sensor repository backed by asyncpg."""
from __future__ import annotations

from typing import List

from asyncpg import Connection, Record  # type: ignore[import-untyped]

from iot_server.core.exceptions import NotFoundError, RepositoryError
from iot_server.domain.dto import SensorCreate, SensorUpdate
from iot_server.domain.models import Sensor, SensorChannel, User
from iot_server.repositories.base import BaseRepository

SENSOR_COLUMNS = "s.id_sensor, s.name, s.unit, s.id_node, s.id_hardware"


class SensorRepository(BaseRepository):
    """CRUD operations for sensors and reads of their channel data."""

    @staticmethod
    def _to_model(record: Record) -> Sensor:
        return Sensor.model_validate(dict(record))

    async def create(self, conn: Connection, data: SensorCreate) -> Sensor:
        record = await self._fetchrow(
            conn,
            """
            INSERT INTO sensor AS s (name, unit, id_node, id_hardware)
            VALUES ($1, $2, $3, $4)
            RETURNING """
            + SENSOR_COLUMNS,
            data.name,
            data.unit,
            data.id_node,
            data.id_hardware,
        )
        if record is None:
            raise RepositoryError("Failed to create sensor")
        return self._to_model(record)

    async def get_all(self, conn: Connection, user: User) -> List[Sensor]:
        """Sensors visible to ``user``: every sensor for admins, own sensors otherwise."""
        if user.is_admin:
            records = await self._fetch(
                conn,
                f"SELECT {SENSOR_COLUMNS} FROM sensor s ORDER BY s.id_sensor",
            )
        else:
            records = await self._fetch(
                conn,
                f"""
                SELECT {SENSOR_COLUMNS}
                FROM sensor s
                JOIN node n ON n.id_node = s.id_node
                WHERE n.id_user = $1
                ORDER BY s.id_sensor
                """,
                user.id_user,
            )
        return [self._to_model(rec) for rec in records]

    async def get_by_id(self, conn: Connection, id_sensor: int) -> Sensor:
        record = await self._fetchrow(
            conn,
            f"SELECT {SENSOR_COLUMNS} FROM sensor s WHERE s.id_sensor = $1",
            id_sensor,
        )
        if record is None:
            raise NotFoundError(f"Sensor with id {id_sensor} not found")
        return self._to_model(record)

    async def get_sensor_channel(self, conn: Connection, id_sensor: int) -> List[SensorChannel]:
        """Channel readings of a sensor, newest first."""
        records = await self._fetch(
            conn,
            """
            SELECT time, value, id_sensor
            FROM channel
            WHERE id_sensor = $1
            ORDER BY time DESC
            """,
            id_sensor,
        )
        return [SensorChannel.model_validate(dict(rec)) for rec in records]

    async def get_id_user_who_own_sensor_by_id(self, conn: Connection, id_sensor: int) -> int:
        id_user = await self._fetchval(
            conn,
            """
            SELECT n.id_user
            FROM sensor s
            JOIN node n ON n.id_node = s.id_node
            WHERE s.id_sensor = $1
            """,
            id_sensor,
        )
        if id_user is None:
            raise NotFoundError(f"Sensor with id {id_sensor} not found")
        return int(id_user)

    async def update(self, conn: Connection, sensor: Sensor, data: SensorUpdate) -> Sensor:
        """Apply the fields set in ``data`` on top of ``sensor`` and persist."""
        patch = data.model_dump(exclude_unset=True, exclude_none=True)
        updated = sensor.model_copy(update=patch)
        record = await self._fetchrow(
            conn,
            """
            UPDATE sensor AS s
            SET name = $2,
                unit = $3
            WHERE s.id_sensor = $1
            RETURNING """
            + SENSOR_COLUMNS,
            updated.id_sensor,
            updated.name,
            updated.unit,
        )
        if record is None:
            raise NotFoundError(f"Sensor with id {sensor.id_sensor} not found")
        return self._to_model(record)

    async def delete(self, conn: Connection, id_sensor: int) -> None:
        status = await self._execute(
            conn,
            "DELETE FROM sensor WHERE id_sensor = $1",
            id_sensor,
        )
        if status == "DELETE 0":
            raise NotFoundError(f"Sensor with id {id_sensor} not found")
