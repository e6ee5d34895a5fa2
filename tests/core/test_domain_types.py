"""Domain Types — verifies enum values and transport mode parsing."""

from uuid import uuid4

import pytest

from silkroute.core.domain_types import (
    InvoiceId, CustomerId, AttachmentId,
    InvoiceStatus, TransportMode,
)


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert InvoiceId(uid) == uid
    assert CustomerId(uid) == uid
    assert AttachmentId(uid) == uid


def test_invoice_status_has_four_states():
    assert [s.value for s in InvoiceStatus] == ["Issued", "Paid", "Overdue", "Cancelled"]


def test_transport_mode_parse_is_case_insensitive():
    assert TransportMode.parse("stream") is TransportMode.STREAM
    assert TransportMode.parse("STREAM") is TransportMode.STREAM
    assert TransportMode.parse("Stream") is TransportMode.STREAM


def test_transport_mode_parse_defaults_to_bytes():
    assert TransportMode.parse(None) is TransportMode.BYTES
    assert TransportMode.parse("") is TransportMode.BYTES
    assert TransportMode.parse("bytes") is TransportMode.BYTES
    assert TransportMode.parse("chunked") is TransportMode.BYTES


def test_invoice_status_binds_case_insensitively():
    assert InvoiceStatus("overdue") is InvoiceStatus.OVERDUE
    assert InvoiceStatus("PAID") is InvoiceStatus.PAID
    assert InvoiceStatus("Issued") is InvoiceStatus.ISSUED


def test_invoice_status_rejects_unknown_names():
    with pytest.raises(ValueError):
        InvoiceStatus("Refunded")
