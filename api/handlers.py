"""Analytics API handlers."""
import logging
from typing import Any

from aiohttp import web
from pydantic import BaseModel

from core.exceptions import NotAuthenticatedError, UnknownSectionError
from services.analytics import AnalyticsService

logger = logging.getLogger(__name__)


def to_json(value: Any) -> Any:
    """Dump report DTOs with their camelCase field names."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode='json', by_alias=True)
    if isinstance(value, list):
        return [to_json(item) for item in value]
    return value


def analytics_service_for(request: web.Request) -> AnalyticsService:
    async def current_user():
        return request.get('user')

    return AnalyticsService(
        store_factory=request.app['store_factory'],
        user_resolver=current_user,
        batch_size=request.app['analytics_batch_size'],
    )


async def health_check(request: web.Request):
    return web.json_response({"status": "ok"})


async def get_dashboard(request: web.Request):
    """Every dashboard section; failed sections are listed under ``errors``."""
    service = analytics_service_for(request)
    try:
        report = await service.get_dashboard()
    except NotAuthenticatedError as e:
        return web.json_response({"error": e.message}, status=401)
    return web.json_response(to_json(report))


async def get_section(request: web.Request):
    """A single dashboard section, e.g. ``/api/analytics/kpi_stats``."""
    section = request.match_info['section']
    service = analytics_service_for(request)
    try:
        value = await service.get_section(section)
    except NotAuthenticatedError as e:
        return web.json_response({"error": e.message}, status=401)
    except UnknownSectionError as e:
        return web.json_response({"error": e.message}, status=404)
    except Exception as e:
        logger.error(f"Analytics section '{section}' failed: {e}", exc_info=True, extra={"section": section})
        return web.json_response(
            {"error": "Section failed to load", "section": section},
            status=500,
        )
    return web.json_response({"section": section, "data": to_json(value)})


def setup_routes(app: web.Application):
    """Setup analytics API routes."""
    app.router.add_get('/health', health_check)
    app.router.add_get('/api/analytics', get_dashboard)
    app.router.add_get('/api/analytics/{section}', get_section)
