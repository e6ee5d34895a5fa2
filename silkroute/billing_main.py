"""Billing API — FastAPI application factory for the invoice ledger service.

Invariants:
    - The ledger is constructed (and seeded) by the factory and lives on app.state
      for the process lifetime; nothing else creates one
    - Routes registered explicitly; error handlers map SilkRouteError → JSON envelope
    - Logging configured in the lifespan

Design Decisions:
    - Components built in create_billing_app, not in the lifespan: ASGI test transports
      that skip lifespan still get a fully wired app
    - Module-level `app` for `uvicorn silkroute.billing_main:app`
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from silkroute import __version__
from silkroute.api.dependencies import register_correlation_middleware
from silkroute.api.error_handlers import register_error_handlers
from silkroute.api.routes import billing, health
from silkroute.config import Settings, get_settings
from silkroute.infrastructure.observability import setup_logging
from silkroute.services.billing_handler import BillingHandler
from silkroute.services.billing_ledger import BillingLedger
from silkroute.services.invoice_pdf import InvoicePdfAsset

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    logger.info(
        f"Billing API started ({app.state.ledger.invoice_count} invoices in ledger)",
        extra={"service": "billing"},
    )
    yield
    logger.info("Billing API shutting down", extra={"service": "billing"})


def create_billing_app(
    ledger: BillingLedger | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the Billing app around an explicitly owned ledger."""
    settings = settings or get_settings()
    app = FastAPI(title="Billing API", version=__version__, lifespan=lifespan)

    app.state.service_name = "billing"
    app.state.settings = settings
    app.state.ledger = ledger if ledger is not None else BillingLedger.seeded()
    app.state.billing_handler = BillingHandler(
        app.state.ledger,
        InvoicePdfAsset(settings.invoice_pdf_path, settings.pdf_chunk_size),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_correlation_middleware(app)
    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(billing.router)
    return app


app = create_billing_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("silkroute.billing_main:app", host="0.0.0.0", port=7072)
