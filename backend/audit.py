import logging

from flask import has_request_context, request

from models.audit_log import AuditLog

logger = logging.getLogger(__name__)


def log_action(db, user_id, action, record_id=None, grant_id=None, detail=None, status="success"):
    """Append an audit entry for the current request."""
    entry = AuditLog(
        user_id=user_id,
        action=action,
        record_id=record_id,
        grant_id=grant_id,
        detail=detail,
        status=status,
        ip_address=request.remote_addr if has_request_context() else None,
        user_agent=request.headers.get("User-Agent") if has_request_context() else None,
    )
    db.add(entry)
    db.commit()
    logger.debug("[AUDIT] user=%s action=%s status=%s", user_id, action, status)
    return entry


def list_for_user(db, user_id, limit=200):
    return (
        db.query(AuditLog)
        .filter(AuditLog.user_id == user_id)
        .order_by(AuditLog.timestamp.desc(), AuditLog.id.desc())
        .limit(limit)
        .all()
    )
