import logging

from flask import Blueprint, g, jsonify, request

from access_control.decorators import current_user_required
from errors import ValidationError
from extensions import content_store

logger = logging.getLogger(__name__)

content_bp = Blueprint("content", __name__, url_prefix="/content")


@content_bp.route("", methods=["POST"])
@current_user_required
def upload_content():
    """Proxy an (already encrypted) document to the content store"""
    upload = request.files.get("file")
    if upload is None:
        raise ValidationError("No file uploaded")

    data = upload.read()
    if not data:
        raise ValidationError("Uploaded file is empty")

    store = content_store()
    content_address = store.put(data)
    logger.info("[CONTENT] User %s uploaded %d bytes", g.current_user.id, len(data))

    return jsonify({
        "success": True,
        "message": "File uploaded to content store",
        "content_address": content_address,
        "gateway_url": store.gateway_url(content_address),
    }), 201
