"""Static file serving for everything outside ``/api/``."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse

from ..config import Settings
from ..deps import get_settings
from ..errors import ForbiddenPathError, MethodNotAllowedError, NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["static"])

DEFAULT_DOCUMENT = "index.html"
DEFAULT_CONTENT_TYPE = "text/plain"
MIME_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".json": "application/json",
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".ico": "image/x-icon",
    ".txt": "text/plain",
}


def resolve_static_path(public_root: Path, url_path: str) -> Path:
    """Map a URL path onto a file beneath ``public_root``.

    Both sides are canonicalized (``..`` collapsed, symlinks followed) before
    the containment check, so no spelling of the path can escape the root.
    """
    relative = url_path.lstrip("/") or DEFAULT_DOCUMENT
    root = public_root.resolve()
    try:
        candidate = (root / relative).resolve()
    except (OSError, ValueError) as exc:
        raise NotFoundError() from exc
    if not candidate.is_relative_to(root):
        logger.warning("Refused static path outside public root: %r", url_path)
        raise ForbiddenPathError()
    return candidate


def content_type_for(path: Path) -> str:
    return MIME_TYPES.get(path.suffix.lower(), DEFAULT_CONTENT_TYPE)


@router.api_route(
    "/{path:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
def serve_static(path: str, request: Request, settings: Settings = Depends(get_settings)) -> FileResponse:
    if request.method not in ("GET", "HEAD"):
        raise MethodNotAllowedError()
    file_path = resolve_static_path(settings.public_dir, path)
    if not file_path.is_file() or not os.access(file_path, os.R_OK):
        raise NotFoundError()
    return FileResponse(file_path, media_type=content_type_for(file_path))
