"""Unit tests for the record store and its authorization rule."""
import pytest

from errors import Conflict, NotFound, PermissionDenied, ValidationError


def _blood_panel(store, owner, cid="cid123"):
    return store.create(owner.id, "lab_results", "Blood Panel", cid)


def test_create_assigns_owner_and_timestamp(store, alice, clock):
    record = _blood_panel(store, alice)

    assert record.owner_id == alice.id
    assert record.record_type == "lab_results"
    assert record.title == "Blood Panel"
    assert record.content_address == "cid123"
    assert record.transaction_ref is None
    assert record.created_at == clock.now


def test_create_rejects_duplicate_content_address(store, alice, provider):
    _blood_panel(store, alice)

    with pytest.raises(Conflict):
        store.create(provider.id, "imaging", "X-Ray", "cid123")


@pytest.mark.parametrize("field", ["record_type", "title", "content_address"])
def test_create_requires_fields(store, alice, field):
    values = {"record_type": "lab_results", "title": "Blood Panel", "content_address": "cid123"}
    values[field] = "  "

    with pytest.raises(ValidationError):
        store.create(alice.id, **values)


def test_owner_can_read(store, alice):
    record = _blood_panel(store, alice)

    assert store.get_by_id(record.id, alice).id == record.id
    assert store.open(record.id, alice)[1] == "owner"


def test_unauthorized_provider_denied_until_granted(store, ledger, alice, provider):
    record = _blood_panel(store, alice)

    with pytest.raises(PermissionDenied):
        store.get_by_id(record.id, provider)

    ledger.grant(alice.id, provider.wallet_address)

    assert store.get_by_id(record.id, provider).id == record.id
    assert store.open(record.id, provider)[1] == "standard"


def test_user_without_wallet_is_never_a_provider(store, ledger, directory, alice):
    stranger = directory.create_user("carol", "An0ther-pass")
    record = _blood_panel(store, alice)

    with pytest.raises(PermissionDenied):
        store.get_by_id(record.id, stranger)


def test_get_missing_record(store, alice):
    with pytest.raises(NotFound):
        store.get_by_id(42, alice)


def test_list_by_owner_newest_first(store, alice, clock):
    first = _blood_panel(store, alice, "cid-1")
    clock.advance(minutes=1)
    second = store.create(alice.id, "imaging", "MRI", "cid-2")

    assert [r.id for r in store.list_by_owner(alice.id)] == [second.id, first.id]


def test_list_by_owner_for_other_requester(store, ledger, alice, provider):
    _blood_panel(store, alice)

    with pytest.raises(PermissionDenied):
        store.list_by_owner(alice.id, requester=provider)

    ledger.grant(alice.id, provider.wallet_address)
    assert len(store.list_by_owner(alice.id, requester=provider)) == 1


def test_delete_removes_record(store, alice):
    record = _blood_panel(store, alice)

    store.delete(record.id, alice.id)

    with pytest.raises(NotFound):
        store.get_by_id(record.id, alice)
    assert store.list_by_owner(alice.id) == []
    # The content address is free again
    assert _blood_panel(store, alice).content_address == "cid123"


def test_delete_by_non_owner_is_denied(store, ledger, alice, provider):
    record = _blood_panel(store, alice)
    ledger.grant(alice.id, provider.wallet_address)

    with pytest.raises(PermissionDenied):
        store.delete(record.id, provider.id)

    assert store.get_by_id(record.id, alice).id == record.id


def test_delete_missing_record(store, alice):
    with pytest.raises(NotFound):
        store.delete(7, alice.id)


def test_attach_transaction(store, alice):
    record = _blood_panel(store, alice)

    updated = store.attach_transaction(record.id, "0xabc")

    assert updated.transaction_ref == "0xabc"
    with pytest.raises(NotFound):
        store.attach_transaction(999, "0xabc")


def test_alice_scenario(store, ledger, alice, provider):
    record = store.create(alice.id, "lab_results", "Blood Panel", "cid123")
    assert record.owner_id == alice.id

    grant = ledger.grant(alice.id, "0xProvider1")
    assert ledger.is_authorized(alice.id, "0xProvider1")
    assert store.get_by_id(record.id, provider).title == "Blood Panel"

    ledger.revoke(grant.id, requesting_user_id=alice.id)
    with pytest.raises(PermissionDenied):
        store.get_by_id(record.id, provider)
