import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Index, text

from database.config import Base, utcnow


class GrantType(str, enum.Enum):
    STANDARD = "standard"
    EMERGENCY = "emergency"


class AccessGrant(Base):
    """One row of the access ledger.

    Rows are append-only: a revoked grant is never switched back on, a new
    grant for the same pair inserts a new row. The partial unique index keeps
    at most one active row per (patient, provider, grant type).
    """
    __tablename__ = "access_grants"
    __table_args__ = (
        Index(
            "uq_access_grants_active_pair",
            "patient_id", "provider_address", "grant_type",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    patient_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    # Not a foreign key: providers do not have to be registered users
    provider_address = Column(String(128), index=True, nullable=False)
    grant_type = Column(String(16), default=GrantType.STANDARD.value, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    granted_at = Column(DateTime, default=utcnow, nullable=False)
    revoked_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=True)

    def is_current(self, now):
        """Active and, for time-boxed grants, not yet expired."""
        if not self.is_active:
            return False
        return self.expires_at is None or self.expires_at > now

    def __repr__(self):
        return (f"<AccessGrant id={self.id} patient_id={self.patient_id} "
                f"provider={self.provider_address!r} active={self.is_active}>")
