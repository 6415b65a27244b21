from __future__ import annotations

from fastapi import FastAPI

from eventpulse.api import analytics, events, registrations, waiting_list
from eventpulse.api.errors import register_error_handlers


def create_app() -> FastAPI:
    app = FastAPI(title="EventPulse Registration API", version="1.0.0")
    register_error_handlers(app)

    app.include_router(events.router, prefix="/api")
    app.include_router(registrations.router, prefix="/api")
    app.include_router(waiting_list.router, prefix="/api")
    app.include_router(analytics.router, prefix="/api")

    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
