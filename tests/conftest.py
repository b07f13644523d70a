from __future__ import annotations

from datetime import datetime, timezone

import pytest

from iot_server.db.pool import Database
from iot_server.domain.models import Hardware, Node, Sensor, SensorChannel
from iot_server.main import create_app
from iot_server.settings import Settings

from tests.fakes import (
    FakePool,
    InMemoryHardwareRepository,
    InMemoryNodeRepository,
    InMemorySensorRepository,
    InMemoryStore,
)
from tests.utils import TEST_JWT_SECRET

OWNER_ID = 1
OTHER_USER_ID = 2
ADMIN_ID = 99


@pytest.fixture
def test_settings() -> Settings:
    return Settings(jwt_secret=TEST_JWT_SECRET, env="development")


@pytest.fixture
def store() -> InMemoryStore:
    store = InMemoryStore()
    store.hardware[1] = Hardware(id_hardware=1, name="DHT22", type="Sensor")
    store.hardware[2] = Hardware(id_hardware=2, name="ESP32", type="single-board microcontroller")
    store.nodes[10] = Node(id_node=10, name="Greenhouse", id_user=OWNER_ID, id_hardware=2)
    store.nodes[20] = Node(id_node=20, name="Garage", id_user=OTHER_USER_ID, id_hardware=2)
    store.sensors[100] = Sensor(id_sensor=100, name="Temperature", unit="C", id_node=10, id_hardware=1)
    store.sensors[200] = Sensor(id_sensor=200, name="Humidity", unit="%", id_node=20, id_hardware=1)
    store.channels = [
        SensorChannel(time=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc), value=21.5, id_sensor=100),
        SensorChannel(time=datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc), value=19.0, id_sensor=100),
        SensorChannel(time=datetime(2024, 1, 1, 11, 0, tzinfo=timezone.utc), value=20.25, id_sensor=100),
        SensorChannel(time=datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc), value=55.0, id_sensor=200),
    ]
    return store


@pytest.fixture
def fake_pool() -> FakePool:
    return FakePool()


@pytest.fixture
async def service_client(aiohttp_client, test_settings, store, fake_pool):
    app = create_app(
        test_settings,
        db=Database("postgresql://unused/unused", 1, pool=fake_pool),
        sensor_repository=InMemorySensorRepository(store),
        hardware_repository=InMemoryHardwareRepository(store),
        node_repository=InMemoryNodeRepository(store),
    )
    return await aiohttp_client(app)
