# HTTP blueprints, registered by app.create_app()
from .auth import auth_bp
from .records import records_bp
from .access import access_bp
from .content import content_bp
from .audit_logs import audit_bp

all_blueprints = (auth_bp, records_bp, access_bp, content_bp, audit_bp)
