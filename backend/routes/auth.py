import logging

from flask import Blueprint, g, jsonify, request
from flask_jwt_extended import create_access_token

from access_control.decorators import current_user_required
from audit import log_action
from extensions import get_db, user_directory
from schemas import LoginSchema, RegisterSchema, load_payload, user_schema

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")
register_schema = RegisterSchema()
login_schema = LoginSchema()


@auth_bp.route("/register", methods=["POST"])
def register():
    data = load_payload(register_schema, request.get_json(silent=True))

    user = user_directory().create_user(
        data["username"], data["password"], data.get("wallet_address")
    )
    log_action(get_db(), user.id, "register")

    return jsonify({
        "success": True,
        "message": "User registered successfully",
        "user": user_schema.dump(user),
    }), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = load_payload(login_schema, request.get_json(silent=True))

    user = user_directory().authenticate(data["username"], data["password"])
    # JWT identity must be a string
    token = create_access_token(identity=str(user.id))
    log_action(get_db(), user.id, "login")

    return jsonify({
        "success": True,
        "access_token": token,
        "user": user_schema.dump(user),
    }), 200


@auth_bp.route("/me", methods=["GET"])
@current_user_required
def me():
    return jsonify({"success": True, "user": user_schema.dump(g.current_user)}), 200
