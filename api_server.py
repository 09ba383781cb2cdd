# api_server.py

from typing import Optional

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from user_directory.api_client import RandomUserClient
from user_directory.config import Settings, configure_logging
from user_directory.errors import FeatureUnavailable
from user_directory.rendering import render_page
from user_directory.view import DirectoryView


def create_app(settings: Optional[Settings] = None, client: Optional[RandomUserClient] = None) -> FastAPI:
    """
    Build the directory app around one DirectoryView.

    ``client`` is injectable so tests can swap the HTTP session.
    """
    settings = settings if settings is not None else Settings.from_env()
    configure_logging(settings.log_level)
    client = client if client is not None else RandomUserClient.from_settings(settings)

    app = FastAPI( # API metadata
        title="Random User Directory",
        description="Card grid of random user profiles from randomuser.me.",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.view = DirectoryView(client, settings.variant)

    def _back_to_page() -> RedirectResponse:
        # 303 so the browser follows with a GET and a refresh does not re-post
        return RedirectResponse("/", status_code=303)

    @app.get("/", response_class=HTMLResponse)
    def page(request: Request):
        view: DirectoryView = request.app.state.view
        view.mount() # initial load, only the first time the page is shown
        return HTMLResponse(render_page(view, settings.image_hosts))

    @app.post("/select/{index}")
    def select_user(index: int, request: Request):
        view: DirectoryView = request.app.state.view
        try:
            view.select_index(index)
        except (FeatureUnavailable, IndexError) as exc:
            raise HTTPException(status_code=404, detail=str(exc))
        return _back_to_page()

    @app.post("/clear")
    def clear_selection(request: Request):
        try:
            request.app.state.view.clear_selection()
        except FeatureUnavailable as exc:
            raise HTTPException(status_code=404, detail=str(exc))
        return _back_to_page()

    @app.post("/users")
    def submit_request_count(request: Request, count: Optional[str] = Form(None)):
        view: DirectoryView = request.app.state.view
        try:
            view.submit_request_count(count)
        except FeatureUnavailable as exc:
            raise HTTPException(status_code=404, detail=str(exc))
        return _back_to_page()

    @app.get("/api/state") # JSON view of what the page currently shows
    def state(request: Request):
        return request.app.state.view.snapshot()

    @app.get("/health") # Health check endpoint for load balancers / uptime monitors.
    def health():
        return {"status": "ok"}

    return app


def __getattr__(name: str):
    # `uvicorn api_server:app` builds the app on first access, so importing
    # create_app (tests) neither reads .env nor touches logging.
    if name == "app":
        app = create_app()
        globals()["app"] = app
        return app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
