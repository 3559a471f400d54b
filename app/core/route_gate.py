# app/core/route_gate.py
import re
from urllib.parse import urlencode

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from app.core.auth import AUTH_COOKIE, read_session_token

PROTECTED_ROUTES = ("/", "/menu", "/cart")

AUTH_ROUTES = frozenset(
    {
        "/login",
        "/signup",
        "/verify-otp",
        "/forgot-password",
        "/reset-password",
    }
)

SKIPPED_PREFIXES = ("/api", "/static", "/docs", "/redoc")
SKIPPED_PATHS = frozenset({"/openapi.json", "/healthz", "/favicon.ico"})
ASSET_RE = re.compile(r"\.(?:svg|png|jpg|jpeg|gif|webp)$", re.IGNORECASE)


def is_skipped(path: str) -> bool:
    if path in SKIPPED_PATHS or ASSET_RE.search(path):
        return True
    return any(path == p or path.startswith(p + "/") for p in SKIPPED_PREFIXES)


def is_protected(path: str) -> bool:
    return any(path == route or path.startswith(route + "/") for route in PROTECTED_ROUTES)


class RouteGateMiddleware(BaseHTTPMiddleware):
    """
    Redirects page requests that don't match the caller's session state:

      - signed in + auth page       -> "/"
      - signed out + protected page -> "/login?callbackUrl=<path>"

    The session cookie is only decoded, never checked against the database.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if is_skipped(path):
            return await call_next(request)

        authenticated = read_session_token(request.cookies.get(AUTH_COOKIE)) is not None

        if authenticated and path in AUTH_ROUTES:
            return RedirectResponse(url="/", status_code=307)

        if not authenticated and is_protected(path):
            login_url = "/login?" + urlencode({"callbackUrl": path})
            return RedirectResponse(url=login_url, status_code=307)

        return await call_next(request)
