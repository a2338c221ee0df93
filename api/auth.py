"""Bearer-token authentication for the analytics API."""
import hmac
import logging
from typing import Callable, Optional

from aiohttp import web

from services.analytics import CurrentUser

logger = logging.getLogger(__name__)

PUBLIC_PATHS = {'/health'}


def resolve_token_user(authorization: Optional[str], api_token: Optional[str]) -> Optional[CurrentUser]:
    """Return the API user when the Authorization header carries the configured token.

    Args:
        authorization: Raw ``Authorization`` header value
        api_token: Token configured for the API; no token means nobody is let in

    Returns:
        CurrentUser if the token matches, None otherwise
    """
    if not api_token or not authorization:
        return None
    scheme, _, token = authorization.partition(' ')
    if scheme.lower() != 'bearer' or not token:
        return None
    if not hmac.compare_digest(token.strip().encode(), api_token.encode()):
        return None
    return CurrentUser(id='api', role='admin')


@web.middleware
async def auth_middleware(request: web.Request, handler: Callable):
    """Attach the current user to the request or answer 401."""
    if request.path in PUBLIC_PATHS:
        return await handler(request)

    user = resolve_token_user(
        request.headers.get('Authorization'),
        request.app['api_token'],
    )
    if user is None:
        logger.warning(f"Unauthenticated analytics API access: {request.path}")
        return web.json_response({"error": "Not authenticated"}, status=401)

    request['user'] = user
    return await handler(request)
