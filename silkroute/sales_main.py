"""Sales API — FastAPI application factory for the order/gateway service.

Invariants:
    - SalesGateway is the only thing routes talk to; it holds a BillingContract
    - When no contract is injected, the lifespan owns one httpx.AsyncClient pointed at
      billing_base_url and closes it on shutdown
    - No timeout and no retries on Billing calls unless configured

Design Decisions:
    - Injected contract (create_sales_app(billing=...)) wires the gateway immediately,
      so tests can point it at an in-process Billing app without a lifespan
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from silkroute import __version__
from silkroute.api.dependencies import register_correlation_middleware
from silkroute.api.error_handlers import register_error_handlers
from silkroute.api.routes import health, sales
from silkroute.config import Settings, get_settings
from silkroute.core.billing_contract import BillingContract
from silkroute.infrastructure.billing_client import BillingClient
from silkroute.infrastructure.observability import setup_logging
from silkroute.services.sales_gateway import SalesGateway

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle — owns the Billing HTTP client when none was injected."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)

    http: httpx.AsyncClient | None = None
    if getattr(app.state, "sales_gateway", None) is None:
        http = httpx.AsyncClient(
            base_url=settings.billing_base_url,
            timeout=settings.billing_timeout_seconds,
        )
        app.state.sales_gateway = SalesGateway(BillingClient(http))
        logger.info(
            f"Billing client targeting {settings.billing_base_url}",
            extra={"service": "sales"},
        )
    logger.info("Sales API started", extra={"service": "sales"})
    try:
        yield
    finally:
        if http is not None:
            await http.aclose()
            app.state.sales_gateway = None
        logger.info("Sales API shutting down", extra={"service": "sales"})


def create_sales_app(
    billing: BillingContract | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the Sales app. Pass `billing` to bypass the lifespan-managed HTTP client."""
    settings = settings or get_settings()
    app = FastAPI(title="Sales API", version=__version__, lifespan=lifespan)

    app.state.service_name = "sales"
    app.state.settings = settings
    app.state.sales_gateway = SalesGateway(billing) if billing is not None else None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_correlation_middleware(app)
    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(sales.router)
    return app


app = create_sales_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("silkroute.sales_main:app", host="0.0.0.0", port=7071)
