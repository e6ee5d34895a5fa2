"""Infrastructure Layer — remote service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/
    - All remote calls mapped onto the core/errors.py taxonomy

Design Decisions:
    - Thin wrappers over caller-owned clients: lifecycle stays with the app factory
"""
