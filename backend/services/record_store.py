"""
Record store: health record metadata and who may see it.

The store only keeps the content address handed back by the external content
store; uploading happens before :meth:`RecordStore.create` is called.
"""
import logging

from access_control.authorization import check_owner_listing, check_record_access
from errors import Conflict, NotFound, PermissionDenied, ValidationError

logger = logging.getLogger(__name__)


def _required_text(value, field):
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required", details={field: ["Missing data for required field."]})
    return value.strip()


class RecordStore:

    def __init__(self, records, ledger):
        self.records = records
        self.ledger = ledger

    def create(self, owner_id, record_type, title, content_address, transaction_ref=None):
        record_type = _required_text(record_type, "record_type")
        title = _required_text(title, "title")
        content_address = _required_text(content_address, "content_address")
        if transaction_ref is not None and not str(transaction_ref).strip():
            transaction_ref = None

        if self.records.get_by_content_address(content_address) is not None:
            raise Conflict("A record with this content address already exists")

        record = self.records.add(owner_id, record_type, title, content_address, transaction_ref)
        logger.info("[RECORDS] User %s created record %s (%s)", owner_id, record.id, record_type)
        return record

    def open(self, record_id, requester):
        """Fetch a record for *requester* and report how access was obtained."""
        record = self.records.get(record_id)
        if record is None:
            raise NotFound("Health record not found")

        has_access, reason = check_record_access(record, requester, self.ledger)
        if not has_access:
            logger.info("[RECORDS] Read of record %s denied: %s", record_id, reason)
            raise PermissionDenied(f"Access denied: {reason}")
        return record, reason

    def get_by_id(self, record_id, requester):
        record, _ = self.open(record_id, requester)
        return record

    def list_by_owner(self, owner_id, requester=None):
        if requester is not None:
            has_access, reason = check_owner_listing(owner_id, requester, self.ledger)
            if not has_access:
                raise PermissionDenied(reason)
        return self.records.list_by_owner(owner_id)

    def attach_transaction(self, record_id, transaction_ref):
        record = self.records.set_transaction_ref(record_id, transaction_ref)
        if record is None:
            raise NotFound("Health record not found")
        return record

    def delete(self, record_id, requesting_user_id):
        record = self.records.get(record_id)
        if record is None:
            raise NotFound("Health record not found")
        if record.owner_id != requesting_user_id:
            raise PermissionDenied("Only the owner can delete this record")

        if not self.records.delete(record_id):
            raise NotFound("Health record not found")
        logger.info("[RECORDS] User %s deleted record %s", requesting_user_id, record_id)
        return record
