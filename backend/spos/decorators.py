# Overview: Request decorators for API routes.

from functools import wraps
from flask import jsonify, g

from .context import get_session_manager


def require_login(f):
    """
    Require a logged-in operator on the terminal.

    Sets g.current_user to the session's User. Returns 401 when nobody
    is logged in.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = get_session_manager().current_user()
        if user is None:
            return jsonify({"error": "Authentication required"}), 401

        g.current_user = user
        return f(*args, **kwargs)

    return decorated_function
