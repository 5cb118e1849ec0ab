"""
Main API module for Shortlink.

Responsibilities:
    - Serve the landing page
    - POST /      : shorten a submitted URL (form field `url`)
    - GET /{id}   : redirect to the stored URL
    - Convert every ShortlinkError into its HTTP status in one place

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - The Link Store (and its connection pool) is built once per app and
      shared by reference across requests; the lifespan prepares the
      schema on startup and releases the pool on shutdown.
    - LinkManager owns validation, id generation and persistence; routes
      only pick the response shape.
"""

import html
import logging
from contextlib import asynccontextmanager
from importlib import resources
from typing import Optional

from fastapi import FastAPI, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse, Response
from pydantic import BaseModel

from shortlink.config import load_settings
from shortlink.errors import ConfigurationError, ShortlinkError
from shortlink.manager.link_manager import CreatedLink, LinkManager
from shortlink.manager.strategies import get_strategy_from_config
from shortlink.storage.base import BaseLinkStore
from shortlink.storage.storage_factory import get_storage

log = logging.getLogger("shortlink")


class ShortenResponse(BaseModel):
    """JSON body returned when SHORTLINK_RESPONSE_SHAPE=json."""
    id: str
    short_url: str
    url: str


def _load_index() -> str:
    try:
        return resources.files("shortlink").joinpath("static/index.html").read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError("landing page asset is missing or unreadable") from exc


def _render_created(link: CreatedLink, shape: str) -> Response:
    if shape == "id":
        return PlainTextResponse(link.id)
    if shape == "url":
        return PlainTextResponse(link.short_url)
    if shape == "json":
        return JSONResponse(ShortenResponse(id=link.id, short_url=link.short_url, url=link.url).model_dump())
    short = html.escape(link.short_url, quote=True)
    return HTMLResponse(f'<a href="{short}">{short}</a>')


def create_app(storage: Optional[BaseLinkStore] = None, settings=None) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        storage: Link Store to use; built from configuration when omitted.
        settings: Settings object; read from the environment when omitted.

    Returns:
        FastAPI: a configured application with its own store and manager.
    """
    settings = settings or load_settings()

    # basic console logging
    if not logging.getLogger().handlers:
        logging.basicConfig(level=settings.LOG_LEVEL)

    storage = storage if storage is not None else get_storage()
    manager = LinkManager(
        storage=storage,
        id_strategy=get_strategy_from_config(settings.CODE_STRATEGY, settings.CODE_LENGTH),
        url_base=settings.URL_BASE,
    )
    redirect_status = 301 if settings.PERMANENT_REDIRECT else 302

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        storage.prepare_schema()
        try:
            yield
        finally:
            storage.close()

    app = FastAPI(
        title="Shortlink",
        description="Shortens URLs to random 21-character ids and redirects back",
        lifespan=lifespan,
    )
    app.state.manager = manager

    log.info(
        "Shortlink ready: storage=%s url_base=%s response_shape=%s redirect=%d",
        type(storage).__name__, settings.URL_BASE or "-", settings.RESPONSE_SHAPE, redirect_status,
    )

    # ----------------------------------------------------------------
    # Error boundary
    # ----------------------------------------------------------------
    @app.exception_handler(ShortlinkError)
    async def shortlink_error_handler(request: Request, exc: ShortlinkError) -> HTMLResponse:
        if exc.is_client_error:
            log.info("%s %s -> %d (%s)", request.method, request.url.path, exc.status_code, exc.kind.value)
        else:
            log.error(
                "%s %s -> %d (%s): %s", request.method, request.url.path, exc.status_code, exc.kind.value, exc,
                exc_info=exc,
            )
        return HTMLResponse(exc.public_message, status_code=exc.status_code)

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    @app.get("/", response_class=HTMLResponse)
    def index() -> HTMLResponse:
        return HTMLResponse(_load_index())

    @app.get("/health_shortlink")
    def health_shortlink():
        return {"status": "ok"}

    @app.post("/")
    def shorten(url: str = Form("")) -> Response:
        """
        Create a short link for the submitted `url` form field.

        Returns 200 with an anchor, the short URL, the bare id or a JSON body depending on
        SHORTLINK_RESPONSE_SHAPE; 400 for an invalid URL; 500 otherwise.
        """
        link = manager.create_link(url)
        return _render_created(link, settings.RESPONSE_SHAPE)

    @app.get("/{link_id}")
    def redirect(link_id: str) -> RedirectResponse:
        return RedirectResponse(url=manager.resolve(link_id), status_code=redirect_status)

    return app


# `uvicorn main:app` and `from main import app` keep working.
app = create_app()
