"""Error Hierarchy — envelope shape, codes and HTTP status per error type."""

from uuid import uuid4

from silkroute.core.errors import (
    AssetMissingError,
    ErrorContext,
    ErrorSeverity,
    InvoiceNotFoundError,
    InvoiceValidationError,
    UpstreamEmptyResponseError,
    UpstreamServiceError,
)


def test_validation_error_envelope():
    err = InvoiceValidationError("Logo bytes are empty.", ErrorContext(operation="logo"))
    body = err.to_response()["error"]
    assert err.http_status == 400
    assert body["code"] == "VALIDATION_ERROR"
    assert body["message"] == "Logo bytes are empty."
    assert body["context"]["operation"] == "logo"


def test_not_found_carries_invoice_id():
    invoice_id = uuid4()
    err = InvoiceNotFoundError(invoice_id)
    assert err.http_status == 404
    assert err.code == "RESOURCE_NOT_FOUND"
    assert err.to_response()["error"]["context"]["invoice_id"] == str(invoice_id)


def test_upstream_errors_are_502():
    assert UpstreamEmptyResponseError("none").http_status == 502
    err = UpstreamServiceError("boom", 503)
    assert err.http_status == 502
    assert err.context.upstream_status == 503


def test_asset_missing_is_500():
    err = AssetMissingError("/nope.pdf")
    assert err.http_status == 500
    assert "/nope.pdf" in err.message


def test_client_errors_are_warnings_upstream_errors_are_not():
    assert InvoiceValidationError("x").severity is ErrorSeverity.WARNING
    assert InvoiceNotFoundError(uuid4()).severity is ErrorSeverity.WARNING
    assert UpstreamServiceError("x").severity is ErrorSeverity.CRITICAL


def test_upstream_code_defaults_to_none_in_envelope():
    context = UpstreamServiceError("x", 500).to_response()["error"]["context"]
    assert context["upstream_status"] == 500
    assert context["upstream_code"] is None
