"""Jinja2 template rendering and htmx response helpers."""

from typing import Any

from fastapi import Request, Response, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from jinja2 import Environment, PackageLoader, select_autoescape

from taskboard.config import settings


def build_template_environment() -> Environment:
    """Build the Jinja2 environment for the packaged templates."""
    return Environment(
        loader=PackageLoader("taskboard", "templates"),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


templates = Jinja2Templates(env=build_template_environment())


VARY_HEADERS = {"Vary": "HX-Request"}


def is_htmx(request: Request) -> bool:
    """
    True when the request was issued by htmx and expects a fragment.

    History restores also carry ``HX-Request`` but replace the whole page,
    so they are answered like a normal navigation.
    """
    if request.headers.get("HX-History-Restore-Request", "").lower() == "true":
        return False
    return request.headers.get("HX-Request", "").lower() == "true"


def render(
    request: Request,
    template_name: str,
    context: dict[str, Any] | None = None,
    *,
    status_code: int = status.HTTP_200_OK,
    headers: dict[str, str] | None = None,
) -> Response:
    """Render a template with the values every page needs."""
    values: dict[str, Any] = {
        "app_title": settings.app_title,
        "user": getattr(request.state, "user", None),
    }
    values.update(context or {})
    return templates.TemplateResponse(
        request,
        template_name,
        values,
        status_code=status_code,
        headers={**VARY_HEADERS, **(headers or {})},
    )


def render_page(
    request: Request,
    fragment: str,
    context: dict[str, Any] | None = None,
    *,
    title: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> Response:
    """Render a fragment template wrapped in the full page layout."""
    values = dict(context or {})
    values.update({"fragment": fragment, "title": title})
    return render(request, "page.html", values, status_code=status_code)


def render_fragment_or_page(
    request: Request,
    fragment: str,
    context: dict[str, Any] | None = None,
    *,
    title: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> Response:
    if is_htmx(request):
        return render(request, fragment, context, status_code=status_code)
    return render_page(request, fragment, context, title=title, status_code=status_code)


def redirect(request: Request, url: str) -> Response:
    """
    Send the client to another page.

    A plain browser request gets a 303 so a submitted form becomes a GET.
    htmx requests get an ``HX-Redirect`` header instead, since htmx follows
    3xx responses transparently and would swap the target page in place.
    """
    if is_htmx(request):
        return Response(
            status_code=status.HTTP_200_OK, headers={"HX-Redirect": url, **VARY_HEADERS}
        )
    return RedirectResponse(
        url, status_code=status.HTTP_303_SEE_OTHER, headers=VARY_HEADERS
    )
