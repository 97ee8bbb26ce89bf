import logging

from flask import Flask, jsonify

from config import Config
from database.config import init_db, init_engine
from errors import Unauthenticated, error_response, register_error_handlers
from extensions import close_db, cors, jwt
from integrations.ipfs import IpfsClient
from integrations.settlement import SettlementClient
from routes import all_blueprints


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.logger.setLevel(level)


def register_jwt_callbacks():
    """Missing, malformed and expired tokens all answer 401 in the JSON envelope."""

    @jwt.unauthorized_loader
    def missing_token(reason):
        return error_response(Unauthenticated(reason))

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return error_response(Unauthenticated(reason))

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return error_response(Unauthenticated("Token has expired"))


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    configure_logging(app)

    cors.init_app(app, resources={r"/*": {"origins": app.config["CORS_ORIGINS"]}})
    jwt.init_app(app)
    register_jwt_callbacks()

    # Initialize database on app startup
    init_engine(app.config["DATABASE_URL"], echo=app.config.get("SQL_ECHO", False))
    init_db()
    app.teardown_appcontext(close_db)

    # External collaborators, swappable in tests
    app.extensions["content_store"] = IpfsClient.from_config(app.config)
    app.extensions["settlement"] = SettlementClient.from_config(app.config)

    register_error_handlers(app)
    for blueprint in all_blueprints:
        app.register_blueprint(blueprint)

    @app.route("/health", methods=["GET"])
    def health():
        """Health check endpoint"""
        return jsonify({"success": True, "status": "ok", "message": "Server is running"}), 200

    app.logger.info("[STARTUP] Health records API ready (database: %s)",
                    app.config["DATABASE_URL"].split("@")[-1])
    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=5001, debug=app.config.get("DEBUG", False))
