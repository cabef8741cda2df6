"""
Login Request Normalizer

Platforms deliver the OIDC login-initiation message either as a form POST
or as query parameters. This module reduces both shapes to one LoginParams.
"""

from typing import Mapping, Optional, Protocol

from lti_trust.modules.login.domain.params import (
    FormParameters,
    LoginParams,
    ParameterSource,
    QueryParameters,
    LOGIN_HINT,
    LTI_MESSAGE_HINT,
    TARGET_LINK_URI,
)
from lti_trust.shared.core.exceptions import RequestMalformedError


class LoginRequest(Protocol):
    """The only parts of an inbound HTTP request the normalizer consults."""

    @property
    def has_form_content_type(self) -> bool: ...

    async def read_form(self) -> Optional[Mapping[str, str]]: ...

    @property
    def query(self) -> Optional[Mapping[str, str]]: ...


async def resolve_parameter_source(request: LoginRequest) -> ParameterSource:
    """
    Locate the parameter collection for this request.

    A form content type selects the form body, read exactly once. There is no
    fallback to the query string when the body cannot be read.

    Raises:
        RequestMalformedError: the selected collection could not be obtained.
    """
    if request.has_form_content_type:
        form = await request.read_form()
        if form is None:
            raise RequestMalformedError("The HTTP form could not be fetched.")
        return FormParameters(form)

    query = request.query
    if query is None:
        raise RequestMalformedError("The HTTP query could not be fetched.")
    return QueryParameters(query)


def extract_login_params(source: ParameterSource) -> LoginParams:
    # Missing fields are not an error here; callers validate non-emptiness.
    return LoginParams(
        target_link_uri=source.get(TARGET_LINK_URI),
        login_hint=source.get(LOGIN_HINT),
        lti_message_hint=source.get(LTI_MESSAGE_HINT),
    )


async def normalize_login_request(request: LoginRequest) -> LoginParams:
    source = await resolve_parameter_source(request)
    return extract_login_params(source)


class LoginRequestNormalizer:
    """Injectable wrapper around normalize_login_request."""

    async def normalize(self, request: LoginRequest) -> LoginParams:
        return await normalize_login_request(request)
