"""Hardware repository backed by asyncpg."""
from __future__ import annotations

from asyncpg import Connection  # type: ignore[import-untyped]

from iot_server.core.exceptions import NotFoundError
from iot_server.domain.models import Hardware
from iot_server.repositories.base import BaseRepository


class HardwareRepository(BaseRepository):
    """Read access to hardware definitions."""

    async def get_by_id(self, conn: Connection, id_hardware: int) -> Hardware:
        record = await self._fetchrow(
            conn,
            """
            SELECT id_hardware, name, type, description
            FROM hardware
            WHERE id_hardware = $1
            """,
            id_hardware,
        )
        if record is None:
            raise NotFoundError(f"Hardware with id {id_hardware} not found")
        return Hardware.model_validate(dict(record))
