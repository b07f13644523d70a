from __future__ import annotations

import pytest
from aiohttp.test_utils import make_mocked_request

from iot_server.api.negotiation import HTML, JSON, accepts, wants_html


def _request(accept: str | None):
    headers = {} if accept is None else {"Accept": accept}
    return make_mocked_request("GET", "/sensor", headers=headers)


@pytest.mark.parametrize(
    ("accept", "expected"),
    [
        (None, JSON),
        ("", JSON),
        ("application/json", JSON),
        ("text/html", HTML),
        ("text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8", HTML),
        ("*/*", JSON),
        ("text/*", HTML),
        ("application/json;q=0.5, text/html", HTML),
        ("text/html;q=0.1, application/json;q=0.9", JSON),
        ("image/png", None),
        ("text/html;q=0", None),
        ("application/json;q=0, */*", HTML),
        ("text/html;q=0, */*", JSON),
        ("*/*, text/html", HTML),
        ("*/*;q=0.5, text/*;q=0.5", HTML),
        ("text/*;q=0.8, text/html;q=0, application/json;q=0.1", JSON),
    ],
)
def test_accepts(accept, expected):
    assert accepts(_request(accept), JSON, HTML) == expected


def test_accepts_without_offers():
    assert accepts(_request("text/html")) is None


def test_unacceptable_falls_back_to_json():
    assert wants_html(_request("image/png")) is False
