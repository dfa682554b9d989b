"""Custody Routes: HTTP surface, caller header, and error envelope mapping.

Invariants:
    - Caller identity comes from X-Caller-Address
    - CustodyError codes map to 403 / 404 / 409 / 400 with the uniform envelope
    - Request validation failures return VALIDATION_ERROR (400)
"""

from custody.core.domain_types import normalize_address
from custody.core.funds import MAX_BALANCE

ADMIN = normalize_address("0xad")
U1 = normalize_address("0x1001")
U2 = normalize_address("0x1002")

AS_ADMIN = {"X-Caller-Address": "0xAD"}
AS_U1 = {"X-Caller-Address": U1}
AS_U2 = {"X-Caller-Address": U2}


async def _bootstrap(client):
    res = await client.post("/api/v1/deployment/bootstrap", headers=AS_ADMIN)
    assert res.status_code == 201
    return res.json()


async def _fund(client, address, amount):
    res = await client.post(
        f"/api/v1/ledger/accounts/{address}/credit", json={"amount": amount},
    )
    assert res.status_code == 200


# ─── deployment ──────────────────────────────────────────────────

async def test_bootstrap_returns_deployment(client):
    body = await _bootstrap(client)
    assert body == {
        "deployment_id": ADMIN,
        "admin": ADMIN,
        "key_strategy": "admin_address",
        "whitelist_size": 0,
        "balance": 0,
    }


async def test_bootstrap_twice_returns_409(client):
    await _bootstrap(client)
    res = await client.post("/api/v1/deployment/bootstrap", headers=AS_ADMIN)
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "ALREADY_INITIALIZED"


async def test_uninitialized_deployment_returns_404(client):
    res = await client.get("/api/v1/vault/balance")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "NOT_INITIALIZED"


async def test_missing_caller_header_is_validation_error(client):
    res = await client.post("/api/v1/deployment/bootstrap")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_malformed_caller_header_rejected(client):
    res = await client.post(
        "/api/v1/deployment/bootstrap", headers={"X-Caller-Address": "alice"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_ADDRESS"


# ─── whitelist ───────────────────────────────────────────────────

async def test_whitelist_add_list_check_remove(client):
    await _bootstrap(client)
    res = await client.post(
        "/api/v1/whitelist/add", json={"addresses": ["0x1001", "0x1002"]},
        headers=AS_ADMIN,
    )
    assert res.status_code == 200
    assert res.json() == {
        "action": "added", "addresses": [U1, U2], "whitelist_size": 2,
    }

    listed = await client.get("/api/v1/whitelist")
    assert listed.json() == {"addresses": [U1, U2]}

    check = await client.get("/api/v1/whitelist/0x1001")
    assert check.json() == {"address": U1, "whitelisted": True}

    res = await client.post(
        "/api/v1/whitelist/remove", json={"addresses": [U1]}, headers=AS_ADMIN,
    )
    assert res.json()["whitelist_size"] == 1
    check = await client.get(f"/api/v1/whitelist/{U1}")
    assert check.json()["whitelisted"] is False


async def test_whitelist_add_by_non_admin_returns_403(client):
    await _bootstrap(client)
    res = await client.post(
        "/api/v1/whitelist/add", json={"addresses": [U2]}, headers=AS_U1,
    )
    assert res.status_code == 403
    body = res.json()["error"]
    assert body["code"] == "NOT_ADMIN"
    assert body["context"]["operation"] == "add_to_whitelist"


async def test_whitelist_duplicate_returns_409_and_keeps_state(client):
    await _bootstrap(client)
    await client.post(
        "/api/v1/whitelist/add", json={"addresses": [U1]}, headers=AS_ADMIN,
    )
    res = await client.post(
        "/api/v1/whitelist/add", json={"addresses": [U2, U1]}, headers=AS_ADMIN,
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "ALREADY_WHITELISTED"
    listed = await client.get("/api/v1/whitelist")
    assert listed.json()["addresses"] == [U1]


async def test_whitelist_batch_with_bad_address_is_validation_error(client):
    await _bootstrap(client)
    res = await client.post(
        "/api/v1/whitelist/add", json={"addresses": ["0x1", "nope"]},
        headers=AS_ADMIN,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


# ─── vault ───────────────────────────────────────────────────────

async def test_deposit_and_transfer_out_flow(client):
    await _bootstrap(client)
    await _fund(client, U1, 100)
    await client.post(
        "/api/v1/whitelist/add", json={"addresses": [U1]}, headers=AS_ADMIN,
    )

    res = await client.post(
        "/api/v1/vault/deposit", json={"amount": 30}, headers=AS_U1,
    )
    assert res.status_code == 200
    assert res.json() == {"depositor": U1, "amount": 30, "balance": 30}

    res = await client.post(
        "/api/v1/vault/transfer-out", json={"to": "0x1002", "amount": 12},
        headers=AS_ADMIN,
    )
    assert res.json() == {"balance": 18}

    account = await client.get(f"/api/v1/ledger/accounts/{U2}")
    assert account.json() == {"address": U2, "balance": 12}


async def test_deposit_by_non_whitelisted_returns_403(client):
    await _bootstrap(client)
    await _fund(client, U2, 10)
    res = await client.post(
        "/api/v1/vault/deposit", json={"amount": 10}, headers=AS_U2,
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "NOT_WHITELISTED"
    balance = await client.get("/api/v1/vault/balance")
    assert balance.json() == {"balance": 0}


async def test_transfer_out_over_balance_returns_400(client):
    await _bootstrap(client)
    res = await client.post(
        "/api/v1/vault/transfer-out", json={"to": U1, "amount": 1},
        headers=AS_ADMIN,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INSUFFICIENT_FUNDS"


async def test_transfer_out_by_non_admin_returns_403(client):
    await _bootstrap(client)
    res = await client.post(
        "/api/v1/vault/transfer-out", json={"to": U1, "amount": 0},
        headers=AS_U1,
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "NOT_ADMIN"


async def test_negative_deposit_is_validation_error(client):
    await _bootstrap(client)
    res = await client.post(
        "/api/v1/vault/deposit", json={"amount": -5}, headers=AS_U1,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_mutation_responses_need_no_follow_up_read(client, service, monkeypatch):
    await _bootstrap(client)
    await _fund(client, U1, 20)

    async def unexpected_read(*args, **kwargs):
        raise AssertionError("unexpected follow-up read")

    monkeypatch.setattr(service, "get_balance", unexpected_read)
    monkeypatch.setattr(service, "list_whitelisted", unexpected_read)

    res = await client.post(
        "/api/v1/whitelist/add", json={"addresses": [U1, U2]}, headers=AS_ADMIN,
    )
    assert res.json()["whitelist_size"] == 2
    res = await client.post(
        "/api/v1/vault/deposit", json={"amount": 20}, headers=AS_U1,
    )
    assert res.json() == {"depositor": U1, "amount": 20, "balance": 20}
    res = await client.post(
        "/api/v1/whitelist/remove", json={"addresses": [U2]}, headers=AS_ADMIN,
    )
    assert res.json()["whitelist_size"] == 1


async def test_deposit_overflowing_vault_returns_400(client):
    await _bootstrap(client)
    await _fund(client, U1, MAX_BALANCE)
    await _fund(client, U2, 1)
    await client.post(
        "/api/v1/whitelist/add", json={"addresses": [U1, U2]}, headers=AS_ADMIN,
    )
    res = await client.post(
        "/api/v1/vault/deposit", json={"amount": MAX_BALANCE}, headers=AS_U1,
    )
    assert res.status_code == 200

    res = await client.post(
        "/api/v1/vault/deposit", json={"amount": 1}, headers=AS_U2,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "BALANCE_OVERFLOW"
    account = await client.get(f"/api/v1/ledger/accounts/{U2}")
    assert account.json()["balance"] == 1


# ─── audit trail & status ────────────────────────────────────────

async def test_audit_events_endpoint_filters_by_type(client):
    await _bootstrap(client)
    await _fund(client, U1, 5)
    await client.post(
        "/api/v1/whitelist/add", json={"addresses": [U1]}, headers=AS_ADMIN,
    )
    await client.post("/api/v1/vault/deposit", json={"amount": 5}, headers=AS_U1)

    res = await client.get("/api/v1/audit-events")
    assert [e["event_type"] for e in res.json()["events"]] == [
        "whitelist_change", "deposit_recorded",
    ]

    res = await client.get(
        "/api/v1/audit-events", params={"event_type": "deposit_recorded"},
    )
    events = res.json()["events"]
    assert len(events) == 1
    assert events[0]["payload"] == {"depositor": U1, "amount": 5}


async def test_audit_events_rejects_unknown_type(client):
    await _bootstrap(client)
    res = await client.get("/api/v1/audit-events", params={"event_type": "transfer"})
    assert res.status_code == 400


async def test_deployment_status_reports_counts(client):
    await _bootstrap(client)
    await _fund(client, U1, 9)
    await client.post(
        "/api/v1/whitelist/add", json={"addresses": [U1, U2]}, headers=AS_ADMIN,
    )
    await client.post("/api/v1/vault/deposit", json={"amount": 9}, headers=AS_U1)
    res = await client.get("/api/v1/deployment")
    assert res.json()["whitelist_size"] == 2
    assert res.json()["balance"] == 9


# ─── health ──────────────────────────────────────────────────────

async def test_health_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_health_readiness_with_test_db(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"] == {"database": "healthy"}
