"""FastAPI application for the Accounts Service."""

from fastapi import FastAPI
from libs.common.logging import configure_logging
from libs.common.middleware import add_observability_middleware
from services.accounts_service.routers import (
    access_router,
    admin_router,
    agreements_router,
    dashboard_router,
    dogs_router,
    internal_router,
    trainers_router,
    users_router,
)


def create_app() -> FastAPI:
    """Create and configure the Accounts Service FastAPI app."""
    configure_logging()

    app = FastAPI(
        title="Service Dog Standards Accounts Service",
        version="0.1.0",
        description="Accounts, roles, profile completion, agreements and dogs.",
    )
    add_observability_middleware(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "accounts"}

    app.include_router(users_router)
    app.include_router(agreements_router)
    app.include_router(dogs_router)
    app.include_router(dashboard_router)
    app.include_router(trainers_router)
    app.include_router(access_router)
    app.include_router(admin_router)
    app.include_router(internal_router)

    return app


app = create_app()
