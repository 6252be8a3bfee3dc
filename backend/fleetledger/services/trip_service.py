# Overview: Service-layer operations for trips; encapsulates business logic and database work.

"""
Trip ledger.

Every write goes through here:
  validate payload -> load trip -> authorization policy -> balances -> persist

Trips are never deleted. trip_code and both balances are owned by the
server; clients may echo them back but the values are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from flask import current_app

from ..errors import NotFound, ValidationError
from ..extensions import db
from ..models import Trip, TRIP_STATUSES, VEHICLE_TYPES, STATUS_SETTLED
from ..time_utils import parse_iso_date
from ..validation import ModelValidationPolicy, validate_payload
from .balance_service import balances_for_create, balances_for_update
from .policy_service import Identity, authorize_trip_update
from .sequence_service import next_trip_code


TRIP_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({
        "vehicle_number",
        "vehicle_type",
        "loading_date",
        "status",
        "party_name",
        "party_freight",
        "party_advance",
        "motor_owner_name",
        "motor_owner_bhada",
        "motor_owner_advance",
    }),
    required_on_create=frozenset({
        "vehicle_number",
        "vehicle_type",
        "loading_date",
        "party_name",
    }),
    read_only_fields=frozenset({
        "id",
        "trip_code",
        "party_balance",
        "motor_owner_balance",
        "created_by_user_id",
        "created_at",
        "updated_at",
    }),
    choices={
        "status": TRIP_STATUSES,
        "vehicle_type": VEHICLE_TYPES,
    },
)


@dataclass(frozen=True)
class TripFilters:
    vehicle_number: str | None = None
    trip_code: str | None = None
    loaded_after: date | None = None
    # True: only SETTLED, False: anything but SETTLED, None: no filter
    settled: bool | None = None

    @classmethod
    def from_args(cls, args) -> "TripFilters":
        """Build filters from a query-string mapping."""
        loaded_after = None
        raw_date = args.get("loaded_after")
        if raw_date:
            try:
                loaded_after = parse_iso_date(raw_date)
            except ValueError:
                raise ValidationError("loaded_after must be an ISO-8601 date", "loaded_after")

        settled = None
        raw_settled = (args.get("settled") or "").strip().lower()
        if raw_settled == "true":
            settled = True
        elif raw_settled == "false":
            settled = False
        elif raw_settled:
            raise ValidationError("settled must be 'true' or 'false'", "settled")

        return cls(
            vehicle_number=(args.get("vehicle_number") or "").strip() or None,
            trip_code=(args.get("trip_code") or "").strip() or None,
            loaded_after=loaded_after,
            settled=settled,
        )


def _contains_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def get_trips(filters: TripFilters | None = None) -> list[Trip]:
    """List trips matching all given filters, most recently loaded first."""
    filters = filters or TripFilters()
    query = db.session.query(Trip)

    if filters.vehicle_number:
        query = query.filter(Trip.vehicle_number.ilike(_contains_pattern(filters.vehicle_number), escape="\\"))

    if filters.trip_code:
        query = query.filter(Trip.trip_code.ilike(_contains_pattern(filters.trip_code), escape="\\"))

    if filters.loaded_after:
        query = query.filter(Trip.loading_date >= filters.loaded_after)

    if filters.settled is True:
        query = query.filter(Trip.status == STATUS_SETTLED)
    elif filters.settled is False:
        query = query.filter(Trip.status != STATUS_SETTLED)

    return query.order_by(Trip.loading_date.desc(), Trip.id.desc()).all()


def get_trip(trip_id: int) -> Trip | None:
    return db.session.get(Trip, trip_id)


def enforce_status_transition(current: str, new: str) -> None:
    """Status only moves forward through the lifecycle; SETTLED is terminal."""
    if TRIP_STATUSES.index(new) < TRIP_STATUSES.index(current):
        raise ValidationError(f"status cannot move back from {current} to {new}", "status")


def create_trip(payload: dict, identity: Identity) -> Trip:
    """
    Validate and persist a new trip with a freshly allocated trip code.

    Raises ValidationError on bad input.
    """
    patch = validate_payload(model=Trip, payload=payload, policy=TRIP_POLICY, partial=False)

    trip_code = next_trip_code()
    trip = Trip(
        trip_code=trip_code,
        created_by_user_id=identity.id,
        **patch,
        **balances_for_create(patch),
    )
    db.session.add(trip)
    db.session.commit()

    current_app.logger.info("Trip %s created by user_id=%s", trip.trip_code, identity.id)
    return trip


def update_trip(trip_id: int, payload: dict, identity: Identity) -> Trip:
    """
    Apply a partial update. Only supplied fields change.

    Raises:
        ValidationError: bad input or backwards status move
        NotFound: no such trip
        Forbidden: the caller's role may not make this change
    """
    patch = validate_payload(model=Trip, payload=payload, policy=TRIP_POLICY, partial=True)

    trip = get_trip(trip_id)
    if not trip:
        raise NotFound("Trip not found")

    patch = authorize_trip_update(identity, trip, patch)

    if "status" in patch:
        enforce_status_transition(trip.status, patch["status"])

    patch.update(balances_for_update(trip, patch))

    for key, value in patch.items():
        setattr(trip, key, value)
    db.session.commit()

    current_app.logger.info(
        "Trip %s updated by user_id=%s fields=%s",
        trip.trip_code, identity.id, ",".join(sorted(patch)),
    )
    return trip
