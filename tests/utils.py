from __future__ import annotations

import time

import jwt

TEST_JWT_SECRET = "test-secret"

JSON_HEADERS = {"Accept": "application/json"}
HTML_HEADERS = {"Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"}


def make_token(
    user_id: int,
    *,
    is_admin: bool = False,
    username: str | None = None,
    secret: str = TEST_JWT_SECRET,
    ttl: int = 3600,
) -> str:
    now = int(time.time())
    claims = {
        "sub": str(user_id),
        "username": username or f"user{user_id}",
        "is_admin": is_admin,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(claims, secret, algorithm="HS256")


def make_headers(user_id: int, *, is_admin: bool = False, accept: str | None = None) -> dict[str, str]:
    headers = {"Authorization": f"Bearer {make_token(user_id, is_admin=is_admin)}"}
    if accept is not None:
        headers["Accept"] = accept
    return headers
