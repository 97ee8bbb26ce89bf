import logging
from datetime import timedelta

from flask import Blueprint, current_app, g, jsonify, request

from access_control.authorization import check_grant_listing
from access_control.decorators import current_user_required
from audit import log_action
from errors import PermissionDenied, ValidationError
from extensions import access_ledger, get_db
from schemas import EmergencyGrantSchema, GrantCreateSchema, grant_schema, grants_schema, load_payload

logger = logging.getLogger(__name__)

access_bp = Blueprint("access", __name__, url_prefix="/access")
grant_create_schema = GrantCreateSchema()
emergency_grant_schema = EmergencyGrantSchema()


@access_bp.route("", methods=["POST"])
@current_user_required
def grant_access():
    """Grant a provider read access to the caller's records"""
    user = g.current_user
    data = load_payload(grant_create_schema, request.get_json(silent=True))
    patient_id = data.get("patient_id") or user.id

    grant = access_ledger().grant(patient_id, data["provider_address"], requesting_user_id=user.id)
    log_action(get_db(), user.id, "grant_access", grant_id=grant.id,
               detail=grant.provider_address)

    return jsonify({
        "success": True,
        "message": "Access granted successfully",
        "grant": grant_schema.dump(grant),
    }), 201


@access_bp.route("/emergency", methods=["POST"])
@current_user_required
def grant_emergency_access():
    """Time-boxed grant behind the emergency QR code"""
    user = g.current_user
    data = load_payload(emergency_grant_schema, request.get_json(silent=True))
    patient_id = data.get("patient_id") or user.id
    minutes = data.get("minutes") or current_app.config["EMERGENCY_ACCESS_MINUTES"]

    grant = access_ledger().grant_emergency(
        patient_id, data["provider_address"], timedelta(minutes=minutes),
        requesting_user_id=user.id,
    )
    log_action(get_db(), user.id, "grant_emergency_access", grant_id=grant.id,
               detail=f"{grant.provider_address} until {grant.expires_at.isoformat()}")

    return jsonify({
        "success": True,
        "message": "Emergency access granted",
        "grant": grant_schema.dump(grant),
    }), 201


@access_bp.route("", methods=["GET"])
@current_user_required
def list_access():
    """List grants by ?patient= (full history) or ?provider= (active only)"""
    user = g.current_user
    patient_arg = request.args.get("patient")
    provider_arg = request.args.get("provider")

    if patient_arg and provider_arg:
        raise ValidationError("Specify either patient or provider, not both")

    ledger = access_ledger()
    if provider_arg:
        allowed, reason = check_grant_listing(user, provider_address=provider_arg)
        if not allowed:
            raise PermissionDenied(reason)
        grants = ledger.list_for_provider(provider_arg)
    else:
        if patient_arg:
            try:
                patient_id = int(patient_arg)
            except ValueError:
                raise ValidationError("patient must be an integer")
        else:
            patient_id = user.id
        allowed, reason = check_grant_listing(user, patient_id=patient_id)
        if not allowed:
            raise PermissionDenied(reason)
        grants = ledger.list_for_patient(patient_id)

    return jsonify({
        "success": True,
        "count": len(grants),
        "grants": grants_schema.dump(grants),
    }), 200


@access_bp.route("/<int:grant_id>/revoke", methods=["PATCH"])
@current_user_required
def revoke_access(grant_id):
    user = g.current_user
    grant = access_ledger().revoke(grant_id, user.id)
    log_action(get_db(), user.id, "revoke_access", grant_id=grant.id,
               detail=grant.provider_address)

    return jsonify({
        "success": True,
        "message": "Access revoked successfully",
        "grant": grant_schema.dump(grant),
    }), 200
