"""Custody Vault Package: whitelist-gated custody ledger.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
