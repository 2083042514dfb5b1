"""Jinja2 template rendering for the catalog pages."""

from pathlib import Path

from fastapi import Request, status
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

from library_catalog.core.errors import CatalogError, ErrorKind, error_kind

TEMPLATE_DIR = Path(__file__).parent / "templates"
ERROR_TITLE = "ERROR"
DEFAULT_ERROR_MESSAGE = "Sorry! We couldn't find the page you were looking for."

templates = Jinja2Templates(directory=str(TEMPLATE_DIR))


def render_error_page(
    request: Request,
    error: BaseException,
    status_code: int = status.HTTP_404_NOT_FOUND,
    message: str | None = None,
    kind: ErrorKind | None = None,
) -> Response:
    """Render the generic error page for any failure."""
    if message is None:
        message = error.message if isinstance(error, CatalogError) else DEFAULT_ERROR_MESSAGE
    return templates.TemplateResponse(
        request,
        "books/page-not-found.html",
        {
            "error": error,
            "error_kind": kind or error_kind(error),
            "message": message,
            "title": ERROR_TITLE,
        },
        status_code=status_code,
    )
