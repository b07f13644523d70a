"""Request parsing, validation and authentication for handlers."""
from __future__ import annotations

from typing import Any, TypeVar

import jwt
import structlog
from aiohttp import web
from pydantic import BaseModel, ValidationError

from iot_server.core.exceptions import BadRequestError, UnauthorizedError
from iot_server.domain.models import User

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")
CURRENT_USER_KEY = "current_user"


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error["loc"]) or "body"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


class Validator:
    """Parses bodies and URL parameters and resolves the authenticated user."""

    def __init__(self, jwt_secret: str, *, jwt_algorithm: str = "HS256", cookie_name: str = "token") -> None:
        self._jwt_secret = jwt_secret
        self._jwt_algorithm = jwt_algorithm
        self._cookie_name = cookie_name

    async def parse_body(self, request: web.Request, model: type[ModelT]) -> ModelT:
        """Read a JSON object or form post and validate it as ``model``."""
        data: dict[str, Any]
        if request.content_type in FORM_CONTENT_TYPES:
            form = await request.post()
            # Blank form inputs mean "not provided".
            data = {key: value for key, value in form.items() if value != ""}
        else:
            try:
                payload = await request.json()
            except ValueError as exc:
                raise BadRequestError("Invalid JSON payload") from exc
            if not isinstance(payload, dict):
                raise BadRequestError("JSON body must be an object")
            data = payload
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise BadRequestError(_format_validation_error(exc)) from exc

    @staticmethod
    def parse_id_from_url_parameter(request: web.Request, name: str = "id") -> int:
        raw = request.match_info.get(name, "")
        try:
            value = int(raw)
        except ValueError as exc:
            raise BadRequestError(f"Invalid {name} parameter: {raw!r}") from exc
        if value <= 0:
            raise BadRequestError(f"Invalid {name} parameter: {raw!r}")
        return value

    def _extract_token(self, request: web.Request) -> str | None:
        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            token = auth_header[len("Bearer ") :].strip()
            if token:
                return token
        return request.cookies.get(self._cookie_name) or None

    def get_authentication(self, request: web.Request) -> User:
        """Return the user the request's token belongs to.

        The result is cached on the request so repeated calls are cheap.
        """
        cached = request.get(CURRENT_USER_KEY)
        if cached is not None:
            return cached

        token = self._extract_token(request)
        if token is None:
            raise UnauthorizedError("Authentication token is required")
        try:
            claims = jwt.decode(
                token,
                self._jwt_secret,
                algorithms=[self._jwt_algorithm],
                options={"require": ["sub"]},
            )
            user = User(
                id_user=int(claims["sub"]),
                username=claims.get("username", ""),
                email=claims.get("email"),
                is_admin=claims.get("is_admin") is True,
            )
        except jwt.ExpiredSignatureError as exc:
            raise UnauthorizedError("Token has expired") from exc
        except (jwt.InvalidTokenError, ValueError) as exc:
            logger.info("token_rejected", reason=str(exc))
            raise UnauthorizedError("Invalid token") from exc

        request[CURRENT_USER_KEY] = user
        return user
