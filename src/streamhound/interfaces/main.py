from __future__ import annotations

from fastapi import FastAPI

from streamhound.infrastructure.config import AppConfig
from streamhound.interfaces.api.middleware import RequestLoggingMiddleware
from streamhound.interfaces.api.streams import router as streams_router
from streamhound.interfaces.app_state import AppState
from streamhound.interfaces.composition import lifespan

API_PREFIX = "/api/v1"


async def healthz() -> dict[str, str]:
    return {"status": "ok"}


def build_app(config: AppConfig) -> FastAPI:
    """Build the FastAPI app from *config*.

    Only wiring happens here; the HTTP client, metadata resolver and
    adapters are created by lifespan() when the server starts.
    """
    app = FastAPI(
        title="Streamhound",
        description="Stream candidate resolution across site adapters",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    app.include_router(streams_router, prefix=API_PREFIX)
    app.add_api_route("/healthz", healthz, methods=["GET"])
    app.add_middleware(RequestLoggingMiddleware)

    return app
