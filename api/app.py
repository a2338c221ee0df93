"""Analytics API application factory and entry point."""
import asyncio
import logging
from typing import Optional

from aiohttp import web

from api.auth import auth_middleware
from api.handlers import setup_routes
from core.config import settings
from core.logging_config import setup_logging
from database import close_db
from database.repositories import repository_scope
from services.analytics import StoreFactory

logger = logging.getLogger(__name__)


def create_app(
    store_factory: Optional[StoreFactory] = None,
    api_token: Optional[str] = None,
    batch_size: Optional[int] = None,
) -> web.Application:
    """Build the aiohttp application.

    Args:
        store_factory: Opens an analytics store per query scope
            (defaults to a database session per scope)
        api_token: Bearer token accepted by the API (defaults to settings)
        batch_size: Dashboard sections queried concurrently (defaults to settings)
    """
    app = web.Application(middlewares=[auth_middleware])
    app['store_factory'] = store_factory or repository_scope
    app['api_token'] = api_token if api_token is not None else settings.api_token
    app['analytics_batch_size'] = batch_size or settings.analytics_batch_size
    setup_routes(app)
    return app


async def main():
    setup_logging()
    if not settings.api_token:
        logger.warning("API_TOKEN is not set; every analytics request will be rejected")

    app = create_app()
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, settings.api_host, settings.api_port)
    await site.start()
    logger.info(f"Analytics API listening on {settings.api_host}:{settings.api_port}")

    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()
        await close_db()


if __name__ == '__main__':
    asyncio.run(main())
