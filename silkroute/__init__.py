"""SilkRoute Billing/Sales sample — two FastAPI services joined by one typed contract.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""

__version__ = "1.0.0"
