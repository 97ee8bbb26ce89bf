"""
Access ledger: who may read a patient's records.

Grants are kept as an append-only log. A revoked row is never switched back
on; granting again after a revoke inserts a fresh row. The storage layer holds
at most one active row per (patient, provider, grant type), so concurrent
grants for the same pair collapse into one.
"""
import logging
from datetime import timedelta

from database.config import utcnow
from errors import AlreadyRevoked, Conflict, NotFound, PermissionDenied, ValidationError
from models.access_grant import GrantType

logger = logging.getLogger(__name__)

DEFAULT_EMERGENCY_MAX_TTL = timedelta(hours=24)


def _clean_provider(provider_address):
    if not isinstance(provider_address, str) or not provider_address.strip():
        raise ValidationError("Provider address is required")
    return provider_address.strip()


def _check_owner(patient_id, requesting_user_id):
    if requesting_user_id is not None and requesting_user_id != patient_id:
        raise PermissionDenied("Cannot manage access for another patient")


class AccessLedger:

    def __init__(self, grants, clock=utcnow, emergency_max_ttl=DEFAULT_EMERGENCY_MAX_TTL):
        self.grants = grants
        self._clock = clock
        self.emergency_max_ttl = emergency_max_ttl

    def grant(self, patient_id, provider_address, requesting_user_id=None):
        """Give *provider_address* read access to the patient's records.

        Granting a pair that already holds an active grant returns that grant
        unchanged.
        """
        provider_address = _clean_provider(provider_address)
        _check_owner(patient_id, requesting_user_id)

        existing = self.grants.find_active(patient_id, provider_address, GrantType.STANDARD.value)
        if existing is not None:
            logger.info("[ACCESS] Grant %s already active for patient %s", existing.id, patient_id)
            return existing

        try:
            grant = self.grants.add(
                patient_id, provider_address, GrantType.STANDARD.value, granted_at=self._clock()
            )
        except Conflict:
            # Lost a race against a concurrent grant for the same pair
            grant = self.grants.find_active(patient_id, provider_address, GrantType.STANDARD.value)
            if grant is None:
                raise
        logger.info("[ACCESS] Patient %s granted access to %s (grant %s)",
                    patient_id, provider_address, grant.id)
        return grant

    def grant_emergency(self, patient_id, provider_address, ttl, requesting_user_id=None):
        """Time-boxed grant, typically handed out through an emergency QR code.

        Re-issuing while one is still running moves its expiry to now + ttl.
        """
        provider_address = _clean_provider(provider_address)
        _check_owner(patient_id, requesting_user_id)
        if not isinstance(ttl, timedelta) or ttl <= timedelta(0):
            raise ValidationError("Emergency access duration must be positive")
        if ttl > self.emergency_max_ttl:
            raise ValidationError(
                f"Emergency access cannot exceed {int(self.emergency_max_ttl.total_seconds() // 60)} minutes"
            )

        now = self._clock()
        expires_at = now + ttl
        existing = self.grants.find_active(patient_id, provider_address, GrantType.EMERGENCY.value)
        if existing is not None:
            if existing.is_current(now):
                logger.info("[ACCESS] Emergency grant %s extended until %s", existing.id, expires_at)
                return self.grants.extend(existing.id, expires_at)
            # Expired but never closed
            self.grants.deactivate(existing.id, now)

        try:
            grant = self.grants.add(
                patient_id, provider_address, GrantType.EMERGENCY.value,
                granted_at=now, expires_at=expires_at,
            )
        except Conflict:
            grant = self.grants.find_active(patient_id, provider_address, GrantType.EMERGENCY.value)
            if grant is None:
                raise
            grant = self.grants.extend(grant.id, expires_at)
        logger.warning("[ACCESS] Emergency access for %s on patient %s until %s (grant %s)",
                       provider_address, patient_id, expires_at, grant.id)
        return grant

    def revoke(self, grant_id, requesting_user_id):
        grant = self.grants.get(grant_id)
        if grant is None:
            raise NotFound("Access grant not found")
        if grant.patient_id != requesting_user_id:
            raise PermissionDenied("Only the granting patient can revoke this grant")
        if not grant.is_active:
            raise AlreadyRevoked()

        revoked = self.grants.deactivate(grant.id, self._clock())
        if revoked is None:
            # Another revoke got there first
            raise AlreadyRevoked()
        logger.info("[ACCESS] Patient %s revoked grant %s", requesting_user_id, grant_id)
        return revoked

    def list_for_patient(self, patient_id):
        return self.grants.list_for_patient(patient_id)

    def list_for_provider(self, provider_address):
        provider_address = _clean_provider(provider_address)
        return self.grants.list_active_for_provider(provider_address, self._clock())

    def current_grant(self, patient_id, provider_address):
        """The grant currently authorizing the pair, standard before emergency."""
        if not provider_address:
            return None
        now = self._clock()
        for grant_type in (GrantType.STANDARD, GrantType.EMERGENCY):
            grant = self.grants.find_active(patient_id, provider_address, grant_type.value)
            if grant is not None and grant.is_current(now):
                return grant
        return None

    def is_authorized(self, patient_id, provider_address):
        return self.current_grant(patient_id, provider_address) is not None
