# Overview: Flask API routes for trips; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, g, current_app

from ..decorators import require_auth
from ..errors import AppError, error_response
from ..services import trip_service
from ..services.trip_service import TripFilters


trips_bp = Blueprint("trips", __name__, url_prefix="/api/trips")


@trips_bp.get("")
@require_auth
def list_trips():
    """
    List trips, most recently loaded first.

    Query params (all optional, ANDed):
    - vehicle_number: case-insensitive substring
    - trip_code: case-insensitive substring
    - loaded_after: ISO date; loaded on or after
    - settled: "true" (only SETTLED) / "false" (everything else)
    """
    try:
        filters = TripFilters.from_args(request.args)
        trips = trip_service.get_trips(filters)
        return jsonify({"trips": [t.to_dict() for t in trips], "count": len(trips)}), 200
    except AppError as e:
        return error_response(e)


@trips_bp.get("/<int:trip_id>")
@require_auth
def get_trip(trip_id: int):
    trip = trip_service.get_trip(trip_id)
    if not trip:
        return jsonify({"error": "Trip not found"}), 404
    return jsonify({"trip": trip.to_dict()}), 200


@trips_bp.post("")
@require_auth
def create_trip():
    try:
        data = request.get_json(silent=True)
        trip = trip_service.create_trip(data, g.identity)
        return jsonify({"trip": trip.to_dict()}), 201
    except AppError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create trip")
        return jsonify({"error": "Internal server error"}), 500


@trips_bp.put("/<int:trip_id>")
@require_auth
def update_trip(trip_id: int):
    try:
        data = request.get_json(silent=True)
        trip = trip_service.update_trip(trip_id, data, g.identity)
        return jsonify({"trip": trip.to_dict()}), 200
    except AppError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update trip")
        return jsonify({"error": "Internal server error"}), 500
