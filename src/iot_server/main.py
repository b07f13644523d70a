"""aiohttp application entrypoint."""
from __future__ import annotations

from aiohttp import web
from aiohttp_cors import ResourceOptions, setup as cors_setup

from iot_server.api.middleware import error_middleware
from iot_server.api.routes.sensors import SensorHandler, setup_routes
from iot_server.api.validator import Validator
from iot_server.db.pool import Database
from iot_server.logging_config import configure_logging
from iot_server.repositories.hardware import HardwareRepository
from iot_server.repositories.nodes import NodeRepository
from iot_server.repositories.sensors import SensorRepository
from iot_server.settings import Settings, settings as default_settings

SETTINGS_KEY = web.AppKey("settings", Settings)


async def healthcheck(request: web.Request) -> web.Response:
    """Health check endpoint."""
    cfg: Settings = request.app[SETTINGS_KEY]
    return web.json_response({"status": "ok", "service": cfg.app_name, "env": cfg.env})


def create_app(
    cfg: Settings | None = None,
    *,
    db: Database | None = None,
    sensor_repository: SensorRepository | None = None,
    hardware_repository: HardwareRepository | None = None,
    node_repository: NodeRepository | None = None,
    validator: Validator | None = None,
) -> web.Application:
    """Create aiohttp application; collaborators may be injected."""
    cfg = cfg or default_settings
    db = db or Database(str(cfg.database_url), cfg.db_pool_size)
    validator = validator or Validator(
        cfg.jwt_secret,
        jwt_algorithm=cfg.jwt_algorithm,
        cookie_name=cfg.auth_cookie_name,
    )

    app = web.Application(middlewares=[error_middleware])
    app[SETTINGS_KEY] = cfg

    cors = cors_setup(
        app,
        defaults={
            origin: ResourceOptions(
                allow_credentials=True,
                expose_headers="*",
                allow_headers="*",
                allow_methods="*",
            )
            for origin in cfg.cors_allowed_origins
        },
    )

    app.router.add_get("/health", healthcheck)
    handler = SensorHandler(
        db,
        sensor_repository or SensorRepository(),
        hardware_repository or HardwareRepository(),
        node_repository or NodeRepository(),
        validator,
    )
    setup_routes(app, handler)

    app.on_startup.append(db.init_pool)
    app.on_cleanup.append(db.close_pool)

    for route in list(app.router.routes()):
        cors.add(route)

    return app


def main() -> None:
    """Run the application."""
    configure_logging(default_settings.log_level, json=default_settings.log_json)
    web.run_app(create_app(), host=default_settings.host, port=default_settings.port, access_log=None)


if __name__ == "__main__":
    main()
