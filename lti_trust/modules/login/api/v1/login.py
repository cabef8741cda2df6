"""
LTI Login Initiation Router

Accepts the platform's OIDC third-party-initiated login by GET or POST and
returns the normalized parameters. Building the authentication redirect
toward the platform happens downstream of this hand-off.
"""

from typing import Annotated
from fastapi import APIRouter, Depends, Request
import structlog

from lti_trust.modules.login.adapters.starlette import StarletteLoginRequest
from lti_trust.modules.login.domain.normalizer import LoginRequestNormalizer
from lti_trust.modules.login.domain.params import LoginParams

router = APIRouter(prefix="/lti", tags=["lti"])
logger = structlog.get_logger()


def get_login_normalizer() -> LoginRequestNormalizer:
    return LoginRequestNormalizer()


@router.api_route("/login", methods=["GET", "POST"], response_model=LoginParams)
async def oidc_login_initiation(
    request: Request,
    normalizer: Annotated[LoginRequestNormalizer, Depends(get_login_normalizer)],
):
    """Normalize a login-initiation request from either the form body or the query string."""
    params = await normalizer.normalize(StarletteLoginRequest(request))
    logger.info(
        "lti_login_initiated",
        method=request.method,
        target_link_uri=params.target_link_uri,
        login_hint=params.login_hint,
        has_message_hint=bool(params.lti_message_hint),
    )
    return params
