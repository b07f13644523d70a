"""Node repository backed by asyncpg."""
from __future__ import annotations

from asyncpg import Connection  # type: ignore[import-untyped]

from iot_server.core.exceptions import NotFoundError
from iot_server.domain.models import Node
from iot_server.repositories.base import BaseRepository


class NodeRepository(BaseRepository):
    """Read access to nodes."""

    async def get_by_id(self, conn: Connection, id_node: int) -> Node:
        record = await self._fetchrow(
            conn,
            """
            SELECT id_node, name, location, id_user, id_hardware
            FROM node
            WHERE id_node = $1
            """,
            id_node,
        )
        if record is None:
            raise NotFoundError(f"Node with id {id_node} not found")
        return Node.model_validate(dict(record))
