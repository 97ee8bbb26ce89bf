"""SQLAlchemy implementations of the storage interfaces.

Each mutating call is committed as one unit. ``IntegrityError`` becomes
:class:`errors.Conflict`, any other ``SQLAlchemyError`` becomes
:class:`errors.Internal`; the session is rolled back in both cases.
"""
import logging
from functools import wraps

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from errors import Conflict, Internal
from models.access_grant import AccessGrant
from models.health_record import HealthRecord
from models.user import User
from .base import GrantRepository, RecordRepository, UserRepository

logger = logging.getLogger(__name__)


def translate_errors(conflict_message):
    """Rollback and map storage exceptions to the service taxonomy."""
    def decorator(f):
        @wraps(f)
        def decorated_function(self, *args, **kwargs):
            try:
                return f(self, *args, **kwargs)
            except IntegrityError as e:
                self.db.rollback()
                logger.info("[STORAGE] Integrity violation in %s: %s", f.__name__, e.orig)
                raise Conflict(conflict_message) from e
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error("[STORAGE] %s failed: %s", f.__name__, e)
                raise Internal("Storage failure") from e
        return decorated_function
    return decorator


class SqlUserRepository(UserRepository):

    def __init__(self, db):
        self.db = db

    @translate_errors("Username or wallet address already registered")
    def add(self, username, password_hash, wallet_address=None):
        user = User(
            username=username,
            password_hash=password_hash,
            wallet_address=wallet_address,
        )
        self.db.add(user)
        self.db.commit()
        return user

    @translate_errors("User lookup failed")
    def get(self, user_id):
        return self.db.get(User, user_id)

    @translate_errors("User lookup failed")
    def get_by_username(self, username):
        return self.db.query(User).filter(User.username == username).first()

    @translate_errors("User lookup failed")
    def get_by_wallet_address(self, wallet_address):
        return self.db.query(User).filter(User.wallet_address == wallet_address).first()


class SqlRecordRepository(RecordRepository):

    def __init__(self, db):
        self.db = db

    @translate_errors("Content address already recorded")
    def add(self, owner_id, record_type, title, content_address, transaction_ref=None):
        record = HealthRecord(
            owner_id=owner_id,
            record_type=record_type,
            title=title,
            content_address=content_address,
            transaction_ref=transaction_ref,
        )
        self.db.add(record)
        self.db.commit()
        return record

    @translate_errors("Record lookup failed")
    def get(self, record_id):
        return self.db.get(HealthRecord, record_id)

    @translate_errors("Record lookup failed")
    def get_by_content_address(self, content_address):
        return (
            self.db.query(HealthRecord)
            .filter(HealthRecord.content_address == content_address)
            .first()
        )

    @translate_errors("Record lookup failed")
    def list_by_owner(self, owner_id):
        return (
            self.db.query(HealthRecord)
            .filter(HealthRecord.owner_id == owner_id)
            .order_by(HealthRecord.created_at.desc(), HealthRecord.id.desc())
            .all()
        )

    @translate_errors("Record update failed")
    def set_transaction_ref(self, record_id, transaction_ref):
        record = self.db.get(HealthRecord, record_id)
        if record is None:
            return None
        record.transaction_ref = transaction_ref
        self.db.commit()
        return record

    @translate_errors("Record delete failed")
    def delete(self, record_id):
        deleted = (
            self.db.query(HealthRecord)
            .filter(HealthRecord.id == record_id)
            .delete(synchronize_session="fetch")
        )
        self.db.commit()
        return deleted > 0


class SqlGrantRepository(GrantRepository):

    def __init__(self, db):
        self.db = db

    @translate_errors("An active grant already exists for this provider")
    def add(self, patient_id, provider_address, grant_type, granted_at, expires_at=None):
        grant = AccessGrant(
            patient_id=patient_id,
            provider_address=provider_address,
            grant_type=grant_type,
            is_active=True,
            granted_at=granted_at,
            expires_at=expires_at,
        )
        self.db.add(grant)
        self.db.commit()
        return grant

    @translate_errors("Grant lookup failed")
    def get(self, grant_id):
        return self.db.get(AccessGrant, grant_id)

    @translate_errors("Grant lookup failed")
    def find_active(self, patient_id, provider_address, grant_type):
        return self.db.query(AccessGrant).filter(
            AccessGrant.patient_id == patient_id,
            AccessGrant.provider_address == provider_address,
            AccessGrant.grant_type == grant_type,
            AccessGrant.is_active == True,  # noqa: E712
        ).first()

    @translate_errors("Grant lookup failed")
    def list_for_patient(self, patient_id):
        return (
            self.db.query(AccessGrant)
            .filter(AccessGrant.patient_id == patient_id)
            .order_by(AccessGrant.granted_at.desc(), AccessGrant.id.desc())
            .all()
        )

    @translate_errors("Grant lookup failed")
    def list_active_for_provider(self, provider_address, now):
        return (
            self.db.query(AccessGrant)
            .filter(
                AccessGrant.provider_address == provider_address,
                AccessGrant.is_active == True,  # noqa: E712
                (AccessGrant.expires_at.is_(None)) | (AccessGrant.expires_at > now),
            )
            .order_by(AccessGrant.granted_at.desc(), AccessGrant.id.desc())
            .all()
        )

    @translate_errors("Grant update failed")
    def deactivate(self, grant_id, revoked_at):
        # Conditional update: only the first of two racing revokes matches
        result = self.db.execute(
            update(AccessGrant)
            .where(AccessGrant.id == grant_id, AccessGrant.is_active == True)  # noqa: E712
            .values(is_active=False, revoked_at=revoked_at)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        if result.rowcount == 0:
            return None
        grant = self.db.get(AccessGrant, grant_id)
        self.db.refresh(grant)
        return grant

    @translate_errors("Grant update failed")
    def extend(self, grant_id, expires_at):
        grant = self.db.get(AccessGrant, grant_id)
        if grant is None:
            return None
        grant.expires_at = expires_at
        self.db.commit()
        return grant
