"""Request-scoped dependencies."""

from __future__ import annotations

import json
from typing import Any

from fastapi import Request

from .config import Settings
from .errors import InvalidJSONError
from .nissy import NissyRunner


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_runner(request: Request) -> NissyRunner:
    return request.app.state.runner


async def json_body(request: Request) -> dict[str, Any]:
    """Parse the request body as a JSON object.

    An empty body is an empty object, and so is any JSON value that is not an
    object. Unparsable bodies fail before any route validation runs.
    """
    raw = await request.body()
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise InvalidJSONError() from exc
    return data if isinstance(data, dict) else {}
