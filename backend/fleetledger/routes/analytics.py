# Overview: Flask API routes for analytics; admin-only JSON rollups.

from flask import Blueprint, request, jsonify

from ..decorators import require_auth, require_admin
from ..services import analytics_service
from ..services.analytics_service import AnalyticsError


analytics_bp = Blueprint("analytics", __name__, url_prefix="/api/analytics")


@analytics_bp.get("/dashboard")
@require_auth
@require_admin
def dashboard_route():
    try:
        months = analytics_service.parse_months(request.args.get("months"))
        return jsonify(analytics_service.dashboard_stats(months=months)), 200
    except AnalyticsError as e:
        return jsonify({"error": str(e)}), 400


@analytics_bp.get("/parties")
@require_auth
@require_admin
def parties_route():
    return jsonify({"parties": analytics_service.party_analytics()}), 200


@analytics_bp.get("/motor-owners")
@require_auth
@require_admin
def motor_owners_route():
    return jsonify({"motor_owners": analytics_service.motor_owner_analytics()}), 200
