"""Core Layer — domain types, pure ledger rules, error taxonomy, remote contract.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - Rule functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell
"""
