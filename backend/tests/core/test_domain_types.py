"""Domain Types: address normalization and enum values."""

import pytest

from custody.core.domain_types import (
    AuditEventType, KeyStrategy, WhitelistAction, address_bytes, normalize_address,
)
from custody.core.errors import InvalidAddressError


def test_normalize_pads_and_lowercases():
    assert normalize_address("0xAB") == "0x" + "0" * 62 + "ab"


def test_equivalent_spellings_normalize_equal():
    assert normalize_address("0xa") == normalize_address("0x000A")


@pytest.mark.parametrize("raw", ["", "0x", "ab", "0xzz", "0x" + "1" * 65, " "])
def test_invalid_addresses_rejected(raw):
    with pytest.raises(InvalidAddressError):
        normalize_address(raw)


def test_address_bytes_is_32_bytes():
    assert len(address_bytes(normalize_address("0x1"))) == 32


def test_enum_values_are_stable():
    assert WhitelistAction.ADDED.value == "added"
    assert WhitelistAction.REMOVED.value == "removed"
    assert AuditEventType.WHITELIST_CHANGE.value == "whitelist_change"
    assert AuditEventType.DEPOSIT_RECORDED.value == "deposit_recorded"
    assert {k.value for k in KeyStrategy} == {"admin_address", "resource_account"}
