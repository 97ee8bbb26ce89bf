OWNER_ACCESS = "owner"


def check_record_access(record, requester, ledger):
    """Check if requester can read a specific health record.

    Returns ``(has_access, reason)``. The reason is ``"owner"`` for the record
    owner, the grant type (``"standard"`` / ``"emergency"``) for a provider
    reading through the ledger, or a denial message.
    """
    if requester is None:
        return False, "Authentication required"

    # Patients can access their own records
    if record.owner_id == requester.id:
        return True, OWNER_ACCESS

    # Providers need a current grant from the owner
    if not requester.wallet_address:
        return False, "No provider address on this account"

    grant = ledger.current_grant(record.owner_id, requester.wallet_address)
    if grant is None:
        return False, "No active access grant found"
    return True, grant.grant_type


def check_owner_listing(owner_id, requester, ledger):
    """Check if requester can list every record of *owner_id*."""
    if requester.id == owner_id:
        return True, OWNER_ACCESS
    if requester.wallet_address and ledger.is_authorized(owner_id, requester.wallet_address):
        return True, "grant"
    return False, "Cannot list another patient's records"


def check_grant_listing(requester, patient_id=None, provider_address=None):
    """Patients see their own ledger, providers see grants naming their address."""
    if patient_id is not None:
        if patient_id == requester.id:
            return True, "Own ledger"
        return False, "Cannot view another patient's grants"
    if provider_address is not None:
        if requester.wallet_address and requester.wallet_address == provider_address.strip():
            return True, "Own provider grants"
        return False, "Cannot view grants for another provider"
    return False, "Nothing to list"
