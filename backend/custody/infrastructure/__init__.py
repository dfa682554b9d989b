"""Infrastructure Layer: database access and cross-cutting concerns.

Invariants:
    - Infrastructure never imports custody logic from core/ (errors only)
    - All SQLAlchemy failures mapped to DatabaseError
"""
