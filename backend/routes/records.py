import logging

from flask import Blueprint, Response, g, jsonify, request

from access_control.authorization import OWNER_ACCESS
from access_control.decorators import current_user_required
from audit import log_action
from errors import ValidationError
from extensions import content_store, get_db, record_store, settlement_client
from integrations.settlement import settle_record
from schemas import RecordCreateSchema, load_payload, record_schema, records_schema

logger = logging.getLogger(__name__)

records_bp = Blueprint("records", __name__, url_prefix="/records")
record_create_schema = RecordCreateSchema()


def _int_arg(name):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


@records_bp.route("", methods=["POST"])
@current_user_required
def create_record():
    """Create record metadata for content already uploaded to the content store"""
    user = g.current_user
    data = load_payload(record_create_schema, request.get_json(silent=True))

    store = record_store()
    record = store.create(
        user.id,
        data["record_type"],
        data["title"],
        data["content_address"],
        data.get("transaction_ref"),
    )
    if record.transaction_ref is None:
        record = settle_record(settlement_client(), store, record)

    log_action(get_db(), user.id, "create_record", record_id=record.id,
               detail=record.content_address)

    return jsonify({
        "success": True,
        "message": "Health record created successfully",
        "record": record_schema.dump(record),
    }), 201


@records_bp.route("", methods=["GET"])
@current_user_required
def list_records():
    """List records of ?owner= (defaults to the caller)"""
    user = g.current_user
    owner_id = _int_arg("owner")
    if owner_id is None:
        owner_id = user.id

    records = record_store().list_by_owner(owner_id, requester=user)
    if owner_id != user.id:
        log_action(get_db(), user.id, "list_records", detail=f"owner {owner_id} via grant")
    logger.info("[RECORDS] User %s listed %d records of owner %s", user.id, len(records), owner_id)

    return jsonify({
        "success": True,
        "count": len(records),
        "records": records_schema.dump(records),
    }), 200


@records_bp.route("/<int:record_id>", methods=["GET"])
@current_user_required
def get_record(record_id):
    """Get specific record with access control"""
    user = g.current_user
    record, reason = record_store().open(record_id, user)
    if reason != OWNER_ACCESS:
        log_action(get_db(), user.id, "read_record", record_id=record.id,
                   detail=f"access via {reason} grant")

    return jsonify({"success": True, "record": record_schema.dump(record)}), 200


@records_bp.route("/<int:record_id>/content", methods=["GET"])
@current_user_required
def get_record_content(record_id):
    """Fetch the document bytes from the content store after the access check"""
    user = g.current_user
    record, reason = record_store().open(record_id, user)
    data = content_store().get(record.content_address)
    if reason != OWNER_ACCESS:
        log_action(get_db(), user.id, "read_record_content", record_id=record.id,
                   detail=f"access via {reason} grant")

    return Response(
        data,
        mimetype="application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="record-{record.id}.bin"'},
    )


@records_bp.route("/<int:record_id>", methods=["DELETE"])
@current_user_required
def delete_record(record_id):
    user = g.current_user
    record = record_store().delete(record_id, user.id)
    log_action(get_db(), user.id, "delete_record", record_id=record_id,
               detail=record.content_address)

    return jsonify({
        "success": True,
        "message": "Health record deleted",
        "record_id": record_id,
    }), 200
