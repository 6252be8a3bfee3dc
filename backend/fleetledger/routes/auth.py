# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/fleetledger/routes/auth.py
"""
Authentication API routes

- POST /api/auth/login   -> user + session token (also set as HttpOnly cookie)
- POST /api/auth/logout  -> revokes the session, clears the cookie
- GET  /api/auth/me      -> the signed-in user

There is no self-registration; admins create users via POST /api/users.
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..services import auth_service
from ..services import session_service
from ..decorators import require_auth, get_request_token
from ..time_utils import to_utc_z


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _set_session_cookie(response, token: str):
    response.set_cookie(
        current_app.config["SESSION_TOKEN_COOKIE"],
        token,
        max_age=int(current_app.config["SESSION_TTL"].total_seconds()),
        httponly=True,
        secure=current_app.config["SESSION_COOKIE_SECURE"],
        samesite="Lax",
    )
    return response


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and create a session.

    Wrong password and unknown username get the same 401 so the response
    does not reveal which usernames exist.
    """
    try:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "username and password required"}), 400
        username = data.get("username")
        password = data.get("password")

        if not isinstance(username, str) or not isinstance(password, str):
            return jsonify({"error": "username and password must be strings"}), 400
        if not username or not password:
            return jsonify({"error": "username and password required"}), 400

        user = auth_service.authenticate(username, password)
        if not user:
            current_app.logger.info("Failed login for username=%r from %s", username, request.remote_addr)
            return jsonify({"error": "Invalid credentials"}), 401

        session, token = session_service.create_session(
            user_id=user.id,
            user_agent=request.headers.get("User-Agent"),
            ip_address=request.remote_addr
        )
        current_app.logger.info("User %s logged in", user.username)

        response = jsonify({
            "user": user.to_dict(),
            "token": token,
            "expires_at": to_utc_z(session.expires_at),
            "message": "Login successful"
        })
        return _set_session_cookie(response, token), 200

    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/logout")
def logout_route():
    """Revoke the current session. Succeeds even if there was none."""
    try:
        token = get_request_token()
        if token and session_service.revoke_session(token, reason="User logout"):
            current_app.logger.info("Session revoked on logout")

        response = jsonify({"message": "Logout successful"})
        response.delete_cookie(current_app.config["SESSION_TOKEN_COOKIE"])
        return response, 200

    except Exception:
        current_app.logger.exception("Failed to logout user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.get("/me")
@require_auth
def me_route():
    return jsonify({"user": g.current_user.to_dict()}), 200
