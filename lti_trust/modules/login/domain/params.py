"""
Login-initiation parameter types.

LoginParams is the canonical record handed to redirect construction.
ParameterSource is the form-or-query collection it is extracted from,
resolved once per request.
"""

from dataclasses import dataclass, field
from typing import Literal, Mapping, Union
from pydantic import BaseModel, ConfigDict

TARGET_LINK_URI = "target_link_uri"
LOGIN_HINT = "login_hint"
LTI_MESSAGE_HINT = "lti_message_hint"


class LoginParams(BaseModel):
    """OIDC third-party-initiated login parameters, as sent by the platform."""
    model_config = ConfigDict(frozen=True)

    target_link_uri: str
    login_hint: str
    lti_message_hint: str = ""


@dataclass(frozen=True)
class _FieldCollection:
    fields: Mapping[str, str] = field(default_factory=dict)

    def get(self, name: str) -> str:
        """Exact, case-sensitive lookup. Missing names yield an empty string."""
        value = self.fields.get(name)
        return "" if value is None else str(value)


@dataclass(frozen=True)
class FormParameters(_FieldCollection):
    kind: Literal["form"] = "form"


@dataclass(frozen=True)
class QueryParameters(_FieldCollection):
    kind: Literal["query"] = "query"


ParameterSource = Union[FormParameters, QueryParameters]
