"""In-memory storage used by the unit tests.

Enforces the same uniqueness rules as the SQL schema so the services behave
identically against either backend.
"""
from itertools import count

from database.config import utcnow
from errors import Conflict
from models.access_grant import AccessGrant
from models.health_record import HealthRecord
from models.user import User
from .base import GrantRepository, RecordRepository, UserRepository


def _newest_first(rows, field):
    return sorted(rows, key=lambda row: (getattr(row, field), row.id), reverse=True)


class MemoryUserRepository(UserRepository):

    def __init__(self):
        self._users = {}
        self._ids = count(1)

    def add(self, username, password_hash, wallet_address=None):
        if self.get_by_username(username) is not None:
            raise Conflict("Username or wallet address already registered")
        if wallet_address is not None and self.get_by_wallet_address(wallet_address) is not None:
            raise Conflict("Username or wallet address already registered")
        user = User(
            id=next(self._ids),
            username=username,
            password_hash=password_hash,
            wallet_address=wallet_address,
            created_at=utcnow(),
        )
        self._users[user.id] = user
        return user

    def get(self, user_id):
        return self._users.get(user_id)

    def get_by_username(self, username):
        return next((u for u in self._users.values() if u.username == username), None)

    def get_by_wallet_address(self, wallet_address):
        return next((u for u in self._users.values() if u.wallet_address == wallet_address), None)


class MemoryRecordRepository(RecordRepository):

    def __init__(self, clock=utcnow):
        self._records = {}
        self._ids = count(1)
        self._clock = clock

    def add(self, owner_id, record_type, title, content_address, transaction_ref=None):
        if self.get_by_content_address(content_address) is not None:
            raise Conflict("Content address already recorded")
        record = HealthRecord(
            id=next(self._ids),
            owner_id=owner_id,
            record_type=record_type,
            title=title,
            content_address=content_address,
            transaction_ref=transaction_ref,
            created_at=self._clock(),
        )
        self._records[record.id] = record
        return record

    def get(self, record_id):
        return self._records.get(record_id)

    def get_by_content_address(self, content_address):
        return next(
            (r for r in self._records.values() if r.content_address == content_address), None
        )

    def list_by_owner(self, owner_id):
        rows = [r for r in self._records.values() if r.owner_id == owner_id]
        return _newest_first(rows, "created_at")

    def set_transaction_ref(self, record_id, transaction_ref):
        record = self._records.get(record_id)
        if record is not None:
            record.transaction_ref = transaction_ref
        return record

    def delete(self, record_id):
        return self._records.pop(record_id, None) is not None


class MemoryGrantRepository(GrantRepository):

    def __init__(self):
        self._grants = {}
        self._ids = count(1)

    def add(self, patient_id, provider_address, grant_type, granted_at, expires_at=None):
        if self.find_active(patient_id, provider_address, grant_type) is not None:
            raise Conflict("An active grant already exists for this provider")
        grant = AccessGrant(
            id=next(self._ids),
            patient_id=patient_id,
            provider_address=provider_address,
            grant_type=grant_type,
            is_active=True,
            granted_at=granted_at,
            revoked_at=None,
            expires_at=expires_at,
        )
        self._grants[grant.id] = grant
        return grant

    def get(self, grant_id):
        return self._grants.get(grant_id)

    def find_active(self, patient_id, provider_address, grant_type):
        return next(
            (g for g in self._grants.values()
             if g.patient_id == patient_id
             and g.provider_address == provider_address
             and g.grant_type == grant_type
             and g.is_active),
            None,
        )

    def list_for_patient(self, patient_id):
        rows = [g for g in self._grants.values() if g.patient_id == patient_id]
        return _newest_first(rows, "granted_at")

    def list_active_for_provider(self, provider_address, now):
        rows = [g for g in self._grants.values()
                if g.provider_address == provider_address and g.is_current(now)]
        return _newest_first(rows, "granted_at")

    def deactivate(self, grant_id, revoked_at):
        grant = self._grants.get(grant_id)
        if grant is None or not grant.is_active:
            return None
        grant.is_active = False
        grant.revoked_at = revoked_at
        return grant

    def extend(self, grant_id, expires_at):
        grant = self._grants.get(grant_id)
        if grant is not None:
            grant.expires_at = expires_at
        return grant
