"""Root fixtures — in-process Billing and Sales apps joined by a real BillingClient.

Invariants:
    - Every test gets a fresh seeded ledger (no state shared between tests)
    - Sales talks to Billing over HTTP via ASGITransport, never by direct call
    - No network and no lifespan: factories wire components eagerly

Design Decisions:
    - Billing and Sales apps share nothing but the BillingClient, so route tests
      exercise the full contract boundary
"""

import pytest
from httpx import ASGITransport, AsyncClient

from silkroute.billing_main import create_billing_app
from silkroute.config import Settings
from silkroute.infrastructure.billing_client import BillingClient
from silkroute.sales_main import create_sales_app
from silkroute.services.billing_handler import BillingHandler
from silkroute.services.billing_ledger import BillingLedger
from silkroute.services.invoice_pdf import InvoicePdfAsset


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def ledger():
    return BillingLedger.seeded()


@pytest.fixture
def pdf_asset():
    return InvoicePdfAsset(chunk_size=64)


@pytest.fixture
def handler(ledger, pdf_asset):
    return BillingHandler(ledger, pdf_asset)


@pytest.fixture
def billing_app(ledger, settings):
    return create_billing_app(ledger=ledger, settings=settings)


@pytest.fixture
async def billing_http(billing_app):
    """HTTP client bound to the in-process Billing app."""
    async with AsyncClient(
        transport=ASGITransport(app=billing_app), base_url="http://billing",
    ) as c:
        yield c


@pytest.fixture
def billing_client(billing_http):
    return BillingClient(billing_http)


@pytest.fixture
def sales_app(billing_client, settings):
    return create_sales_app(billing=billing_client, settings=settings)


@pytest.fixture
async def sales_http(sales_app):
    """HTTP client bound to the in-process Sales app."""
    async with AsyncClient(
        transport=ASGITransport(app=sales_app), base_url="http://sales",
    ) as c:
        yield c
