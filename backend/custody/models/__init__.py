"""ORM Models: SQLAlchemy declarative models for persisted custody state.

Invariants:
    - All models inherit from Base (db/base.py)
    - A deployment is keyed by its derived address; events reference it

Design Decisions:
    - One file per table
    - All models imported here so Base.metadata is complete before create_all
"""

from custody.models.custody_deployment import CustodyDeployment  # noqa: F401
from custody.models.ledger_account import LedgerAccount  # noqa: F401
from custody.models.audit_event import AuditEventRecord  # noqa: F401
