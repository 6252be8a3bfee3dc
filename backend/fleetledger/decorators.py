# Overview: Request authentication and role decorators for API routes.

from functools import wraps
from flask import request, jsonify, g, current_app

from .services import session_service


def get_request_token() -> str | None:
    """
    Session token for this request: Authorization: Bearer <token> first,
    then the session cookie.
    """
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return request.cookies.get(current_app.config["SESSION_TOKEN_COOKIE"]) or None


def require_auth(f):
    """
    Require a live session.

    Sets the following Flask g attributes:
    - g.current_user: The authenticated User object
    - g.identity: Identity(id, role) handed to policy checks
    - g.session_context: The full SessionContext object

    Returns 401 if there is no token or it is invalid, expired or revoked.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = get_request_token()
        if not token:
            return jsonify({"error": "Authentication required"}), 401

        context = session_service.validate_session(token)
        if not context:
            return jsonify({"error": "Invalid or expired session"}), 401

        g.current_user = context.user
        g.identity = context.identity
        g.session_context = context

        return f(*args, **kwargs)

    return decorated_function


def require_admin(f):
    """Require the authenticated caller to be an ADMIN. Use after @require_auth."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not hasattr(g, "identity"):
            return jsonify({"error": "Authentication required"}), 401
        if not g.identity.is_admin:
            current_app.logger.warning(
                "Admin access denied: user_id=%s path=%s", g.identity.id, request.path
            )
            return jsonify({"error": "Admin access required"}), 403
        return f(*args, **kwargs)
    return decorated_function
