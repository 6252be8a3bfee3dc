from __future__ import annotations

from ..extensions import db
from ..money import format_amount
from ..time_utils import to_utc_z


# Lifecycle order matters: status may only move forward through this tuple.
STATUS_PENDING = "PENDING"
STATUS_LOADED = "LOADED"
STATUS_IN_TRANSIT = "IN_TRANSIT"
STATUS_DELIVERED = "DELIVERED"
STATUS_COMPLETED = "COMPLETED"
STATUS_SETTLED = "SETTLED"
TRIP_STATUSES = (
    STATUS_PENDING,
    STATUS_LOADED,
    STATUS_IN_TRANSIT,
    STATUS_DELIVERED,
    STATUS_COMPLETED,
    STATUS_SETTLED,
)

# Trips in these states are closed to managers.
LOCKED_STATUSES = frozenset({STATUS_COMPLETED, STATUS_SETTLED})

VEHICLE_OWN = "OWN"
VEHICLE_MARKET = "MARKET"
VEHICLE_TYPES = (VEHICLE_OWN, VEHICLE_MARKET)

AMOUNT = db.Numeric(14, 2)


class Trip(db.Model):
    """
    One freight movement: a vehicle carrying a party's load.

    Party side: party_freight is billed to the customer, party_advance is
    what they paid up front, party_balance is what they still owe.

    Motor-owner side (mainly MARKET vehicles): motor_owner_bhada is the hire
    payable to the vehicle owner, motor_owner_advance what was paid so far,
    motor_owner_balance what is still due.

    Both balances are derived (gross - advance) by balance_service and are
    never accepted from clients. trip_code ("{year}_{n}") is allocated once
    at creation by sequence_service.
    """
    __tablename__ = "trips"
    __table_args__ = (
        db.UniqueConstraint("trip_code", name="uq_trips_trip_code"),
        db.Index("ix_trips_loading_date", "loading_date"),
        db.Index("ix_trips_status", "status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    trip_code = db.Column(db.String(32), nullable=False)

    vehicle_number = db.Column(db.String(32), nullable=False, index=True)
    vehicle_type = db.Column(db.String(16), nullable=False, default=VEHICLE_OWN)
    loading_date = db.Column(db.Date, nullable=False)
    status = db.Column(db.String(16), nullable=False, default=STATUS_PENDING)

    party_name = db.Column(db.String(120), nullable=False, index=True)
    party_freight = db.Column(AMOUNT, nullable=False, default=0)
    party_advance = db.Column(AMOUNT, nullable=False, default=0)
    party_balance = db.Column(AMOUNT, nullable=False, default=0)

    motor_owner_name = db.Column(db.String(120), nullable=True)
    motor_owner_bhada = db.Column(AMOUNT, nullable=False, default=0)
    motor_owner_advance = db.Column(AMOUNT, nullable=False, default=0)
    motor_owner_balance = db.Column(AMOUNT, nullable=False, default=0)

    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=True, onupdate=db.func.now())

    created_by = db.relationship("User", backref=db.backref("trips", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "trip_code": self.trip_code,
            "vehicle_number": self.vehicle_number,
            "vehicle_type": self.vehicle_type,
            "loading_date": self.loading_date.isoformat() if self.loading_date else None,
            "status": self.status,
            "party_name": self.party_name,
            "party_freight": format_amount(self.party_freight),
            "party_advance": format_amount(self.party_advance),
            "party_balance": format_amount(self.party_balance),
            "motor_owner_name": self.motor_owner_name,
            "motor_owner_bhada": format_amount(self.motor_owner_bhada),
            "motor_owner_advance": format_amount(self.motor_owner_advance),
            "motor_owner_balance": format_amount(self.motor_owner_balance),
            "created_by_user_id": self.created_by_user_id,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at) if self.updated_at else None,
        }


class TripSequence(db.Model):
    """
    Atomic per-year trip code counter.

    next_number is the number the next trip created in `year` will get.
    """
    __tablename__ = "trip_sequences"
    __table_args__ = (
        db.UniqueConstraint("year", name="uq_trip_sequences_year"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    year = db.Column(db.Integer, nullable=False, index=True)
    next_number = db.Column(db.Integer, nullable=False, default=1)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "year": self.year,
            "next_number": self.next_number,
            "updated_at": to_utc_z(self.updated_at),
        }
