"""API server for ``nonceward serve``.

Mounts the versioned ``/api/v1/`` routers behind bearer-token auth
(``api.auth``). Misconfiguration (no secret) surfaces as a 500 with a
generic body; the details go to the log.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def create_app():
    """Build the FastAPI application."""
    from fastapi import FastAPI, Request
    from fastapi.responses import JSONResponse

    from nonceward.api.auth import auth_middleware
    from nonceward.api.v1 import mount_v1_routers
    from nonceward.errors import ConfigurationError

    app = FastAPI(
        title="nonceward API",
        description="Issue and verify stateless nonces.",
        version="0.1.0",
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
    )

    @app.exception_handler(ConfigurationError)
    async def _configuration_error(request: Request, exc: ConfigurationError):
        logger.error("Nonce service misconfigured: %s", exc)
        return JSONResponse(status_code=500, content={"detail": "Nonce service is not configured"})

    app.middleware("http")(auth_middleware)
    mount_v1_routers(app)
    return app


def run_server(host: str = "127.0.0.1", port: int = 8890) -> None:
    """Start the API server."""
    import uvicorn

    logger.info("API docs: http://%s:%d/api/v1/docs", host, port)
    app = create_app()
    uvicorn.run(app, host=host, port=port, log_config=None)
