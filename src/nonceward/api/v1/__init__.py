# API v1 router aggregation.
# Created: 2026-10-18
#
# mount_v1_routers(app) registers the v1 routers at /api/v1/.

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi import FastAPI


def mount_v1_routers(app: FastAPI) -> None:
    """Mount the v1 routers on *app* at ``/api/v1``."""
    from nonceward.api.v1.nonces import router as nonces_router

    app.include_router(nonces_router, prefix="/api/v1")
