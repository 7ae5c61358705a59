"""FastAPI application."""

from fastapi import FastAPI

from barter.interface.api.routes import health, internal, match_requests, matches
from barter.interface.error import register_error_handlers
from barter.util.di.container import create_container, setup_di
from barter.util.observability import (
    instrument_fastapi,
    instrument_httpx,
)


def create_app() -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.
    In tests, configure in conftest.py if needed.
    """
    # Instrument httpx for outbound directory and notification calls
    # (Logfire must be configured before instrumentation)
    instrument_httpx()

    app_instance = FastAPI(
        title="Barter Matchmaking API",
        description="Negotiation and match lifecycle service for a peer-to-peer skill exchange",
        version="0.1.0",
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    # Setup dependency injection
    # Settings are loaded from environment automatically
    container = create_container()
    setup_di(app_instance, container)

    register_error_handlers(app_instance)

    # Register routes
    app_instance.include_router(health.router)
    app_instance.include_router(match_requests.router)
    app_instance.include_router(matches.router)
    app_instance.include_router(internal.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
# In production: start_app.py handles this
# In tests: configure in conftest.py
app = create_app()
