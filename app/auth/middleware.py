import hmac
import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from .service import decode_access_token, extract_bearer_token

logger = logging.getLogger(__name__)

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "TRACE"})


def _matches(path: str, prefixes) -> bool:
    return any(
        path == prefix.rstrip("/") or path.startswith(f"{prefix.rstrip('/')}/")
        for prefix in prefixes
    )


class SecurityMiddleware(BaseHTTPMiddleware):
    """Bearer-token authentication plus a double-submit CSRF check.

    Paths in PUBLIC_PATHS are anonymous. Unsafe methods outside
    CSRF_EXEMPT_PREFIXES must echo the CSRF cookie in the CSRF header.
    """

    def __init__(self, app, *, settings) -> None:
        super().__init__(app)
        self.public_paths = tuple(settings.PUBLIC_PATHS)
        self.csrf_exempt_prefixes = tuple(settings.CSRF_EXEMPT_PREFIXES)
        self.csrf_cookie_name = settings.CSRF_COOKIE_NAME
        self.csrf_header_name = settings.CSRF_HEADER_NAME

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path

        if request.method not in SAFE_METHODS and not _matches(
            path, self.csrf_exempt_prefixes
        ):
            if not self._csrf_token_valid(request):
                logger.warning(
                    "CSRF check failed", extra={"props": {"path": path}}
                )
                return JSONResponse(
                    {"detail": "CSRF token missing or invalid"}, status_code=403
                )

        if _matches(path, self.public_paths):
            return await call_next(request)

        token = extract_bearer_token(request.headers.get("Authorization"))
        if not token:
            return JSONResponse(
                {"detail": "Not authenticated"},
                status_code=401,
                headers={"WWW-Authenticate": "Bearer"},
            )
        principal = decode_access_token(token)
        if principal is None:
            return JSONResponse(
                {"detail": "Invalid bearer token"},
                status_code=401,
                headers={"WWW-Authenticate": "Bearer"},
            )

        request.state.principal = principal
        return await call_next(request)

    def _csrf_token_valid(self, request: Request) -> bool:
        cookie_token = request.cookies.get(self.csrf_cookie_name)
        header_token = request.headers.get(self.csrf_header_name)
        if not cookie_token or not header_token:
            return False
        return hmac.compare_digest(cookie_token, header_token)
