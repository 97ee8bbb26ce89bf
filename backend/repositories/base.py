"""
Storage interfaces used by the services.

The services never touch a session or a module-level map directly, so the
same authorization logic runs against SQLAlchemy in the app and against the
in-memory fakes in unit tests. Implementations must raise
:class:`errors.Conflict` on uniqueness violations and must not let driver
exceptions escape.
"""
from abc import ABC, abstractmethod


class UserRepository(ABC):

    @abstractmethod
    def add(self, username, password_hash, wallet_address=None):
        """Persist a new user and return it."""

    @abstractmethod
    def get(self, user_id):
        pass

    @abstractmethod
    def get_by_username(self, username):
        pass

    @abstractmethod
    def get_by_wallet_address(self, wallet_address):
        pass


class RecordRepository(ABC):

    @abstractmethod
    def add(self, owner_id, record_type, title, content_address, transaction_ref=None):
        """Persist a new record; Conflict if the content address is taken."""

    @abstractmethod
    def get(self, record_id):
        pass

    @abstractmethod
    def get_by_content_address(self, content_address):
        pass

    @abstractmethod
    def list_by_owner(self, owner_id):
        """All records of *owner_id*, newest first."""

    @abstractmethod
    def set_transaction_ref(self, record_id, transaction_ref):
        pass

    @abstractmethod
    def delete(self, record_id):
        """Remove the row. Returns True if something was deleted."""


class GrantRepository(ABC):

    @abstractmethod
    def add(self, patient_id, provider_address, grant_type, granted_at, expires_at=None):
        """Insert an active grant; Conflict if the pair already has an active one."""

    @abstractmethod
    def get(self, grant_id):
        pass

    @abstractmethod
    def find_active(self, patient_id, provider_address, grant_type):
        pass

    @abstractmethod
    def list_for_patient(self, patient_id):
        """Every grant of the patient, active and revoked, newest first."""

    @abstractmethod
    def list_active_for_provider(self, provider_address, now):
        """Active, unexpired grants naming the provider, newest first."""

    @abstractmethod
    def deactivate(self, grant_id, revoked_at):
        """Conditionally switch an active grant off.

        Returns the updated grant, or None when the grant was not active.
        """

    @abstractmethod
    def extend(self, grant_id, expires_at):
        pass
