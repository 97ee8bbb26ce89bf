from flask import Blueprint, g, jsonify

from access_control.decorators import current_user_required
from audit import list_for_user
from extensions import get_db
from schemas import audit_logs_schema

audit_bp = Blueprint("audit", __name__)


@audit_bp.route("/audit-logs", methods=["GET"])
@current_user_required
def get_audit_logs():
    """Get audit logs for current user"""
    logs = list_for_user(get_db(), g.current_user.id)
    return jsonify({
        "success": True,
        "count": len(logs),
        "logs": audit_logs_schema.dump(logs),
    }), 200
