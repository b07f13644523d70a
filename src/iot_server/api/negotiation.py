"""Accept header negotiation and HTML rendering."""
from __future__ import annotations

from pathlib import Path
from typing import Any

from aiohttp import web
from jinja2 import Environment, FileSystemLoader, select_autoescape

JSON = "application/json"
HTML = "text/html"

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
    enable_async=False,
)


def _specificity(media_range: str) -> int:
    if media_range in ("*/*", "*"):
        return 0
    if media_range.endswith("/*"):
        return 1
    return 2


def _parse_accept(header: str) -> list[tuple[str, float]]:
    """Media ranges ordered by quality, then specificity, then header order."""
    ranges: list[tuple[str, float]] = []
    for part in header.split(","):
        media, *params = (item.strip() for item in part.split(";"))
        if not media:
            continue
        quality = 1.0
        for param in params:
            key, _, value = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        ranges.append((media.lower(), quality))
    return sorted(ranges, key=lambda item: (item[1], _specificity(item[0])), reverse=True)


def _matches(media_range: str, offer: str) -> bool:
    if media_range in ("*/*", "*"):
        return True
    kind, _, subtype = media_range.partition("/")
    offer_kind, _, _ = offer.partition("/")
    if subtype == "*":
        return kind == offer_kind
    return media_range == offer


def _offer_quality(ranges: list[tuple[str, float]], offer: str) -> float:
    """Quality of the most specific range matching ``offer`` (0 when none does)."""
    matching = [
        (_specificity(media_range), quality)
        for media_range, quality in ranges
        if _matches(media_range, offer)
    ]
    if not matching:
        return 0.0
    best = max(spec for spec, _ in matching)
    return max(quality for spec, quality in matching if spec == best)


def accepts(request: web.Request, *offers: str) -> str | None:
    """Pick the offer the client prefers.

    Without an Accept header the first offer wins. An offer refused with
    q=0 by its most specific range is never picked, even when a wildcard
    would match it. Returns None when the client accepts none of the offers.
    """
    if not offers:
        return None
    header = request.headers.get("Accept", "").strip()
    if not header:
        return offers[0]
    ranges = _parse_accept(header)
    allowed = [offer for offer in offers if _offer_quality(ranges, offer) > 0]
    for media_range, quality in ranges:
        if quality <= 0:
            continue
        for offer in allowed:
            if _matches(media_range, offer):
                return offer
    return None


def wants_html(request: web.Request) -> bool:
    return accepts(request, JSON, HTML) == HTML


def render(
    request: web.Request,
    template: str,
    context: dict[str, Any],
    *,
    layout: str = "layouts/main.html",
    status: int = 200,
) -> web.Response:
    """Render ``template`` inside ``layout`` as an HTML response."""
    body = templates.get_template(f"{template}.html").render(
        layout=layout,
        request=request,
        **context,
    )
    return web.Response(text=body, status=status, content_type=HTML)
