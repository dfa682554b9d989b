"""Authorization Guard: the single admin predicate shared by registry and vault.

Invariants:
    - require_admin runs before any state is read-modify-written
    - Comparison is on normalized addresses only
"""

from custody.core.domain_types import Address
from custody.core.errors import NotAdminError


def is_admin(caller: Address, admin: Address) -> bool:
    return caller == admin


def require_admin(caller: Address, admin: Address) -> None:
    """Raise NotAdminError unless caller is the admin."""
    if not is_admin(caller, admin):
        raise NotAdminError(caller)
