from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from lti_trust.shared.core.config import get_settings
from lti_trust.shared.core.exceptions import LtiTrustException
from lti_trust.shared.core.logging import setup_logging
from lti_trust.shared.core.middleware import RequestIDMiddleware, SecurityHeadersMiddleware
from lti_trust.modules.keys.adapters.factory import KeySourceFactory
from lti_trust.modules.keys.domain.ports import KeyMaterialSource
from lti_trust.modules.login.api.v1.login import router as login_router
from lti_trust.modules.keys.api.v1.keys import router as keys_router

# Configure logging
setup_logging()

logger = structlog.get_logger()


async def lti_trust_exception_handler(request: Request, exc: LtiTrustException):
    log = logger.warning if exc.status_code < 500 else logger.error
    log("request_failed", code=exc.code, error=exc.message, path=request.url.path, details=exc.details)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "message": exc.message},
    )


def create_app(key_source: Optional[KeyMaterialSource] = None) -> FastAPI:
    settings = get_settings()

    # Runs BEFORE the app starts (setup) and AFTER it stops (teardown).
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("app_starting", app=settings.APP_NAME, key_source=settings.KEY_SOURCE)
        owns_key_source = app.state.key_source is None
        if owns_key_source:
            app.state.key_source = KeySourceFactory.create(settings)

        yield

        logger.info("app_stopping", app=settings.APP_NAME)
        # An injected key source belongs to the caller
        if owns_key_source:
            await app.state.key_source.close()
            app.state.key_source = None

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        lifespan=lifespan)
    app.state.key_source = key_source

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LtiTrustException, lti_trust_exception_handler)

    app.include_router(login_router)
    app.include_router(keys_router)

    @app.get("/health")
    async def health_check():
        return {
            "status": "active",
            "app": settings.APP_NAME,
            "version": settings.VERSION,
        }

    return app


app = create_app()
