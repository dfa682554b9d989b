"""Services Layer: imperative shell around the pure custody core.

Invariants:
    - Services load state, call exactly one core operation, and persist the result
    - Commit happens only after the core operation returned without raising
"""
