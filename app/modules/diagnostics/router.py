"""
Diagnostics Router - plain text and sample JSON endpoints.

- `/generic/...` echoes what the server saw in the request as text/plain,
  including form fields from a urlencoded or multipart body
- `/item/<name>` answers with a small JSON document describing the item

Both accept any common method and set the demo cookie, so a second visit
shows it coming back.
"""

from __future__ import annotations

import re
from typing import Dict, List

from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse

from app.core.cookies import set_demo_cookie
from app.modules.api.models import ItemOut

router = APIRouter()

ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
NOT_FOUND_TEXT = "404 page not found\n"

_ITEM_NAME_RE = re.compile(r"^\w+$")
_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def _request_form(request: Request) -> Dict[str, List[str]]:
    """Body form values first, then query values, like a parsed HTML form."""
    form: Dict[str, List[str]] = {}
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_TYPES):
        body = await request.form()
        for key, value in body.multi_items():
            form.setdefault(key, []).append(value if isinstance(value, str) else value.filename)
    for key, value in request.query_params.multi_items():
        form.setdefault(key, []).append(value)
    return form


def _request_uri(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


@router.api_route("/generic", methods=ANY_METHOD, response_class=PlainTextResponse)
@router.api_route("/generic/{path:path}", methods=ANY_METHOD, response_class=PlainTextResponse)
async def generic(request: Request):
    """Send text diagnostics about the incoming request."""
    lines = [
        "FooWebHandler says ... ",
        f" request.method      '{request.method}'",
        f" request.uri         '{_request_uri(request)}'",
        f" request.url.path    '{request.url.path}'",
        f" request.form        '{await _request_form(request)}'",
        f" request.cookies     '{dict(request.cookies)}'",
    ]
    response = PlainTextResponse("\n".join(lines) + "\n")
    set_demo_cookie(response, request.app.state.settings)
    return response


@router.api_route("/item/{name}", methods=ANY_METHOD, response_model=ItemOut)
def item(name: str, request: Request, response: Response):
    """Describe an item named by the last path segment."""
    if not _ITEM_NAME_RE.match(name):
        not_found = PlainTextResponse(NOT_FOUND_TEXT, status_code=404)
        set_demo_cookie(not_found, request.app.state.settings)
        return not_found
    set_demo_cookie(response, request.app.state.settings)
    return ItemOut(name=name)
