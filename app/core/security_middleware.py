"""Response hardening headers."""
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from app.core.config import settings

PERMISSIONS_POLICY = "geolocation=(), microphone=(), camera=(), payment=(), usb=()"
STRIPPED_HEADERS = ("server", "x-powered-by")


def content_security_policy(debug: bool, backend_url: str) -> str:
    """CSP allowing the portal to call its inventory backend."""
    connect_src = f"'self' {backend_url}"
    if debug:
        connect_src += " http://localhost:*"
    directives = [
        "default-src 'self'",
        "script-src 'self' 'unsafe-inline'",
        "style-src 'self' 'unsafe-inline'",
        "img-src 'self' data: https:" + (" http:" if debug else ""),
        "font-src 'self' data:",
        f"connect-src {connect_src}",
    ]
    if not debug:
        directives.append("frame-ancestors 'none'")
    return "; ".join(directives) + ";"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds security headers to every response and hides the server stack."""

    def __init__(self, app, debug: bool = None, backend_url: str = None):
        super().__init__(app)
        self.debug = settings.DEBUG if debug is None else debug
        self.csp = content_security_policy(self.debug, backend_url or settings.BACKEND_URL)

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = self.csp
        response.headers["Permissions-Policy"] = PERMISSIONS_POLICY

        if not self.debug and request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        for header in STRIPPED_HEADERS:
            if header in response.headers:
                del response.headers[header]

        return response
