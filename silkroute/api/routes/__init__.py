"""Route Modules — one file per service surface.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes never contain business logic (delegate to handler/gateway)

Design Decisions:
    - Explicit registration in the app factories over auto-discovery
"""
