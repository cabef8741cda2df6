from typing import Mapping, Optional
import structlog
from fastapi import Request
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import ClientDisconnect

logger = structlog.get_logger()

FORM_MEDIA_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _joined_values(items) -> dict[str, str]:
    """Collapse a multi-dict to one string per key, repeated values joined with ",". File parts are skipped."""
    values: dict[str, list[str]] = {}
    for key, value in items:
        if isinstance(value, str):
            values.setdefault(key, []).append(value)
    return {key: ",".join(parts) for key, parts in values.items()}


class StarletteLoginRequest:
    """
    Adapts a FastAPI/Starlette request to the LoginRequest protocol.

    The form body is buffered by Starlette on first read; callers must still
    only call read_form() once per request.
    """

    def __init__(self, request: Request):
        self.request = request

    @property
    def has_form_content_type(self) -> bool:
        content_type = self.request.headers.get("content-type")
        if not content_type:
            return False
        media_type = content_type.split(";", 1)[0].strip().lower()
        return media_type in FORM_MEDIA_TYPES

    async def read_form(self) -> Optional[Mapping[str, str]]:
        try:
            form = await self.request.form()
        except (ClientDisconnect, MultiPartException, HTTPException) as e:
            # Starlette reports multipart parse failures as a 400 HTTPException inside an app
            logger.warning("login_form_unreadable", error=str(e), path=self.request.url.path)
            return None
        return _joined_values(form.multi_items())

    @property
    def query(self) -> Optional[Mapping[str, str]]:
        query_params = self.request.query_params
        if query_params is None:
            return None
        return _joined_values(query_params.multi_items())
