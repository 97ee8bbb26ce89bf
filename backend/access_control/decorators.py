from functools import wraps

from flask import g
from flask_jwt_extended import get_jwt_identity, jwt_required

from errors import Unauthenticated


def current_user_required(f):
    """Decorator to require a valid token that maps to an existing user.

    The user is loaded once and stored on ``g.current_user``.
    """
    @wraps(f)
    @jwt_required()
    def decorated_function(*args, **kwargs):
        # Imported here to avoid a cycle: extensions builds the ledger from this package
        from extensions import user_directory

        try:
            user_id = int(get_jwt_identity())
        except (TypeError, ValueError):
            raise Unauthenticated("Invalid token identity")

        user = user_directory().find_by_id(user_id)
        if user is None:
            raise Unauthenticated("User not found")

        g.current_user = user
        return f(*args, **kwargs)
    return decorated_function
