from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request
import uuid
import structlog
from lti_trust.shared.core.config import get_settings

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds transport and content security headers.
    Frame ancestors are not restricted: the tool is embedded in the platform's iframe.
    """
    async def dispatch(self, request: Request, call_next):
        settings = get_settings()

        response = await call_next(request)

        # HSTS: Disable in debug mode for local development
        if settings.DEBUG:
            response.headers["Strict-Transport-Security"] = "max-age=0"
        else:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains; preload"

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response

class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Injects a unique X-Request-ID into the logs and response.
    NOTE: This middleware trusts the X-Request-ID header if provided by the client.
    It is meant for correlation, not as a security principal.
    """
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response
