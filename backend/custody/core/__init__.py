"""Core Layer: pure custody logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Collaborators (ledger, audit sink) arrive as capabilities, never as globals
"""
