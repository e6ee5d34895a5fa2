"""Pydantic Schemas — wire DTOs for the Billing contract and the Sales gateway.

Invariants:
    - Schemas validate at system boundary (HTTP bodies, remote call results)
    - Domain types from core/ used for enum fields

Design Decisions:
    - Billing DTOs shared by server routes and client stub (single source of shape)
"""
