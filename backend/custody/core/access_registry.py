"""Access Registry: the admin-controlled whitelist.

Invariants:
    - Only the admin mutates the whitelist; NotAdminError precedes any other check
    - Batches are all-or-nothing: every address is validated before the first write
    - A repeat inside one batch counts as already present (add) or absent (remove)
    - One WhitelistChange event per successful batch, listing addresses in input order
    - Removal preserves the relative order of remaining members
"""

from custody.core.audit_events import WhitelistChange
from custody.core.authorization import require_admin
from custody.core.custody_state import CustodyState
from custody.core.domain_types import Address, WhitelistAction
from custody.core.errors import AlreadyWhitelistedError, NotWhitelistedError
from custody.core.repository_protocols import AuditLog


class AccessRegistry:
    """Owns CustodyState.whitelist. The vault only calls is_whitelisted."""

    def __init__(self, state: CustodyState, audit_log: AuditLog):
        self._state = state
        self._audit_log = audit_log

    def add_to_whitelist(
        self, caller: Address, addresses: list[Address],
    ) -> WhitelistChange:
        require_admin(caller, self._state.admin)
        members = set(self._state.whitelist)
        for address in addresses:
            if address in members:
                raise AlreadyWhitelistedError(address)
            members.add(address)

        self._state.whitelist.extend(addresses)
        event = WhitelistChange(WhitelistAction.ADDED, tuple(addresses))
        self._audit_log.append(event)
        return event

    def remove_from_whitelist(
        self, caller: Address, addresses: list[Address],
    ) -> WhitelistChange:
        require_admin(caller, self._state.admin)
        members = set(self._state.whitelist)
        for address in addresses:
            if address not in members:
                raise NotWhitelistedError(address)
            members.discard(address)

        removed = set(addresses)
        self._state.whitelist[:] = [
            a for a in self._state.whitelist if a not in removed
        ]
        event = WhitelistChange(WhitelistAction.REMOVED, tuple(addresses))
        self._audit_log.append(event)
        return event

    def is_whitelisted(self, address: Address) -> bool:
        return address in self._state.whitelist

    def list_whitelisted(self) -> list[Address]:
        return list(self._state.whitelist)
