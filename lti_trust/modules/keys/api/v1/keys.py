"""
Public Key Display Router

Serves the PEM-encoded public keys used on both sides of the LTI trust:
the tool's signing key and the platform's verification key.
"""

from typing import Annotated
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
import structlog

from lti_trust.modules.keys.domain.exporter import DerPemKeyExporter
from lti_trust.shared.core.config import Settings, get_settings
from lti_trust.shared.core.exceptions import ConfigurationError, ResourceNotFoundError

router = APIRouter(prefix="/keys", tags=["keys"])
logger = structlog.get_logger()


def get_key_exporter(request: Request) -> DerPemKeyExporter:
    return DerPemKeyExporter(request.app.state.key_source)


def resolve_key_identifier(alias: str, settings: Settings) -> str:
    identifiers = {
        "tool": settings.TOOL_KEY_IDENTIFIER,
        "platform": settings.PLATFORM_KEY_IDENTIFIER,
    }
    if alias not in identifiers:
        raise ResourceNotFoundError(f"Unknown key alias '{alias}'")
    identifier = identifiers[alias]
    if not identifier:
        raise ConfigurationError(f"No key identifier configured for '{alias}'")
    return identifier


@router.get("/{alias}.pem", response_class=PlainTextResponse)
async def get_public_key_pem(
    alias: str,
    exporter: Annotated[DerPemKeyExporter, Depends(get_key_exporter)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """PEM SubjectPublicKeyInfo for the tool or platform key."""
    identifier = resolve_key_identifier(alias, settings)
    pem = await exporter.resolve_and_export(identifier)
    logger.info("public_key_exported", alias=alias)
    return PlainTextResponse(pem, media_type="application/x-pem-file")
