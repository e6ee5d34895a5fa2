"""Services Layer — ledger, PDF asset, Billing handler, and Sales gateway.

Invariants:
    - BillingLedger is the single writer of billing state
    - SalesGateway reaches billing state only through BillingContract
"""
