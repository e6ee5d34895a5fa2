"""Ledger Rules — tests for pure totals, paging, import counting and echo formatting.

Tests cover:
    - compute_total is exact Decimal arithmetic
    - clamp_paging / paginate map non-positive values to defaults
    - import_count clamps to [1, 25]
    - import_message falls back to 'unknown'
    - format_status_echo embeds correlation id verbatim
"""

from decimal import Decimal
from uuid import UUID

from silkroute.core.ledger_rules import (
    blank_to_default,
    clamp_paging,
    compute_total,
    format_status_echo,
    import_count,
    import_message,
    import_total,
    invoice_number,
    paginate,
)


# ─── compute_total ───────────────────────────────────────────────

def test_compute_total_is_exact_for_cents():
    lines = [(3, Decimal("0.10")), (1, Decimal("0.20"))]
    assert compute_total(lines) == Decimal("0.50")


def test_compute_total_many_lines_no_drift():
    lines = [(1, Decimal("0.01"))] * 1000
    assert compute_total(lines) == Decimal("10.00")


def test_compute_total_empty_is_zero():
    assert compute_total([]) == Decimal("0")


# ─── invoice_number ──────────────────────────────────────────────

def test_invoice_number_uses_upper_first_eight_hex():
    uid = UUID("abcdef12-3456-7890-abcd-ef1234567890")
    assert invoice_number("INV", uid) == "INV-ABCDEF12"
    assert invoice_number("IMP", uid) == "IMP-ABCDEF12"


# ─── paging ──────────────────────────────────────────────────────

def test_clamp_paging_defaults_non_positive():
    assert clamp_paging(0, 0) == (1, 20)
    assert clamp_paging(-3, -1) == (1, 20)
    assert clamp_paging(2, 5) == (2, 5)


def test_paginate_slices_requested_page():
    items = list(range(45))
    assert paginate(items, 1, 20) == list(range(20))
    assert paginate(items, 3, 20) == list(range(40, 45))
    assert paginate(items, 4, 20) == []


def test_paginate_zero_page_behaves_as_first():
    items = list(range(5))
    assert paginate(items, 0, 2) == paginate(items, 1, 2)


# ─── import ──────────────────────────────────────────────────────

def test_import_count_minimum_is_one():
    assert import_count(1) == 1
    assert import_count(127) == 1


def test_import_count_scales_by_128():
    assert import_count(128) == 1
    assert import_count(256) == 2
    assert import_count(1000) == 7


def test_import_count_caps_at_25():
    assert import_count(25 * 128) == 25
    assert import_count(10_000_000) == 25


def test_import_total_increments_from_base():
    assert import_total(0) == Decimal("49.99")
    assert import_total(3) == Decimal("52.99")


def test_import_message_format():
    assert import_message(3, "legacy.zip") == "Imported 3 invoices from 'legacy.zip'."
    assert import_message(1, None) == "Imported 1 invoices from 'unknown'."


# ─── echo / defaults ─────────────────────────────────────────────

def test_format_status_echo():
    assert format_status_echo("Issued", "abc123") == "Issued (corr=abc123)"
    assert format_status_echo("NotFound", "x") == "NotFound (corr=x)"


def test_blank_to_default():
    assert blank_to_default(None, "d") == "d"
    assert blank_to_default("   ", "d") == "d"
    assert blank_to_default("a.txt", "d") == "a.txt"
