# Overview: Flask API routes for user management; admin only.

from flask import Blueprint, request, jsonify, g, current_app

from ..decorators import require_auth, require_admin
from ..errors import AppError, ValidationError, error_response
from ..services import auth_service


users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("")
@require_auth
@require_admin
def list_users():
    users = auth_service.list_users()
    return jsonify({"users": [u.to_dict() for u in users], "count": len(users)}), 200


@users_bp.post("")
@require_auth
@require_admin
def create_user():
    """
    Create a new user.

    Request body:
    - username: str (required, unique)
    - password: str (required, min 6 chars)
    - name: str (required) - display name
    - role: "ADMIN" | "MANAGER" (default MANAGER)
    """
    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            raise ValidationError("Invalid JSON payload")
        user = auth_service.create_user(
            username=data.get("username"),
            password=data.get("password"),
            name=data.get("name"),
            role=data.get("role"),
        )
        current_app.logger.info(
            "User %s (%s) created by user_id=%s", user.username, user.role, g.identity.id
        )
        return jsonify({"user": user.to_dict()}), 201
    except AppError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create user")
        return jsonify({"error": "Internal server error"}), 500
