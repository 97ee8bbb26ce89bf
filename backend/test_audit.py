from conftest import register_and_login


def _actions(client, headers):
    r = client.get("/audit-logs", headers=headers)
    assert r.status_code == 200
    return [log["action"] for log in r.get_json()["logs"]]


def test_audit_trail_records_access_lifecycle(client, alice_api, provider_api):
    headers, _ = alice_api
    provider_headers, _ = provider_api

    record = client.post("/records", json={
        "record_type": "lab_results", "title": "Blood Panel", "content_address": "cid123",
    }, headers=headers).get_json()["record"]
    grant = client.post("/access", json={"provider_address": "0xProvider1"},
                        headers=headers).get_json()["grant"]
    client.get(f"/records/{record['id']}", headers=provider_headers)
    client.patch(f"/access/{grant['id']}/revoke", headers=headers)
    client.delete(f"/records/{record['id']}", headers=headers)

    alice_actions = _actions(client, headers)
    for action in ("register", "login", "create_record", "grant_access", "revoke_access", "delete_record"):
        assert action in alice_actions
    # Newest first
    assert alice_actions[0] == "delete_record"

    assert "read_record" in _actions(client, provider_headers)


def test_owner_reads_are_not_audited(client, alice_api):
    headers, _ = alice_api
    record = client.post("/records", json={
        "record_type": "lab_results", "title": "Blood Panel", "content_address": "cid123",
    }, headers=headers).get_json()["record"]

    client.get(f"/records/{record['id']}", headers=headers)

    assert "read_record" not in _actions(client, headers)


def test_emergency_grant_is_audited_with_expiry(client, alice_api):
    headers, _ = alice_api

    client.post("/access/emergency", json={"provider_address": "0xMedic"}, headers=headers)

    logs = client.get("/audit-logs", headers=headers).get_json()["logs"]
    emergency = [log for log in logs if log["action"] == "grant_emergency_access"]
    assert len(emergency) == 1
    assert emergency[0]["detail"].startswith("0xMedic until ")


def test_audit_logs_are_private(client, alice_api):
    other_headers, _ = register_and_login(client, "mallory")

    actions = _actions(client, other_headers)

    assert set(actions) <= {"register", "login"}


def test_provider_listing_through_grant_is_audited(client, alice_api, provider_api):
    headers, alice = alice_api
    provider_headers, _ = provider_api
    client.post("/records", json={
        "record_type": "lab_results", "title": "Blood Panel", "content_address": "cid123",
    }, headers=headers)
    client.post("/access", json={"provider_address": "0xProvider1"}, headers=headers)

    r = client.get(f"/records?owner={alice['id']}", headers=provider_headers)
    assert r.get_json()["count"] == 1

    logs = client.get("/audit-logs", headers=provider_headers).get_json()["logs"]
    listing = [log for log in logs if log["action"] == "list_records"]
    assert len(listing) == 1
    assert listing[0]["detail"] == f"owner {alice['id']} via grant"

    # Listing your own records leaves no entry
    client.get("/records", headers=headers)
    assert "list_records" not in _actions(client, headers)
